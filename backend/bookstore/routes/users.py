# Overview: Flask API routes for user login and registration; parses input and returns envelopes.

# backend/bookstore/routes/users.py
"""
User API routes

POST /user/login     {email, password} -> {user_id, first_name, last_name, email}
POST /user/register  {first_name, last_name, email, password} -> created user
"""

from flask import Blueprint, request, current_app

from ..errors import AuthenticationFailed, InvalidInput
from ..models import User
from ..responses import success, error
from ..services import auth_service
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_user


USER_POLICY = ModelValidationPolicy(
    writable_fields={"first_name", "last_name", "email"},
    required_on_create={"first_name", "last_name", "email"},
)

users_bp = Blueprint("users", __name__, url_prefix="/user")


@users_bp.post("/login")
def login_route():
    """
    Authenticate with email and password.

    Returns the fields the client persists to scope later requests.
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise InvalidInput("Invalid JSON payload")
    email = data.get("email")
    password = data.get("password")

    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        return error("email and password required", 400)

    user = auth_service.authenticate(email, password)
    if not user:
        current_app.logger.info("Failed login attempt")
        raise AuthenticationFailed("No user found")

    return success({
        "user_id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
    }, message="Login successful")


@users_bp.post("/register")
def register_route():
    """
    Create a customer account.

    Password is hashed before storage; duplicate email returns 409.
    """
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        raise InvalidInput("Invalid JSON payload")
    payload = dict(payload)
    password = payload.pop("password", None)

    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=False)
    enforce_rules_user(patch, password)

    user = auth_service.register_user(
        first_name=patch["first_name"],
        last_name=patch["last_name"],
        email=patch["email"],
        password=password,
    )

    return success({
        "user_id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
    }, message="User registered successfully", status_code=201)
