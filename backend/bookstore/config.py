# backend/bookstore/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/bookstore.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///bookstore.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # bcrypt cost factor; tests lower it to keep fixtures fast
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    # Lock/deadlock retries for the purchase transaction
    PURCHASE_RETRY_ATTEMPTS = int(os.environ.get("PURCHASE_RETRY_ATTEMPTS", "3"))
    PURCHASE_RETRY_BACKOFF = float(os.environ.get("PURCHASE_RETRY_BACKOFF", "0.1"))

    # Upper bound on copies per purchase request
    MAX_PURCHASE_QUANTITY = int(os.environ.get("MAX_PURCHASE_QUANTITY", "100"))
