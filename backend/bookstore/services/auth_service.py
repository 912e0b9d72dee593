# Overview: Service-layer operations for user registration and login.

"""
Authentication Service

SECURITY NOTES:
- Passwords hashed with bcrypt (per-password salt, cost factor from BCRYPT_ROUNDS)
- Minimum 8 characters required
- Comparison goes through bcrypt.checkpw (constant time)
- Unknown email and wrong password are reported identically
"""

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import Conflict, InvalidInput
from ..models import User


MIN_PASSWORD_LENGTH = 8


class PasswordValidationError(InvalidInput):
    """Raised when password doesn't meet strength requirements."""


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Raises PasswordValidationError if requirements not met.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    if not password.strip():
        raise PasswordValidationError("Password cannot be blank")


def hash_password(password: str, rounds: int | None = None) -> str:
    """
    Hash password using bcrypt.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    if rounds is None:
        rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns True if password matches hash, False otherwise (including
    malformed hashes).
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(first_name: str, last_name: str, email: str, password: str) -> User:
    """
    Create new user with bcrypt password hashing.

    Args:
        first_name: Given name (non-blank)
        last_name: Family name (non-blank)
        email: Unique email, compared case-insensitively
        password: Password meeting strength requirements

    Returns:
        Created User object

    Raises:
        PasswordValidationError: If password doesn't meet requirements
        Conflict: If the email is already registered
    """
    email = normalize_email(email)

    existing = db.session.query(User).filter_by(email=email).first()
    if existing:
        raise Conflict("Email is already registered")

    user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=hash_password(password),
    )

    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        db.session.rollback()
        raise Conflict("Email is already registered")

    current_app.logger.info("Registered user id=%s", user.id)
    return user


def authenticate(email: str, password: str) -> User | None:
    """
    Authenticate user with email and password.

    Returns User if credentials valid, None otherwise.
    """
    if not email or not password:
        return None

    user = db.session.query(User).filter_by(email=normalize_email(email)).first()
    if not user:
        return None

    if verify_password(password, user.password_hash):
        return user

    return None
