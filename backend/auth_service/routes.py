"""
Authentication service route handlers.

Provides routes for:
- User registration
- User login
- Promoting a user to administrator (admin only)

All JWT and hashing logic is delegated to `auth_service.utils`.
"""

import logging
from typing import Tuple, Dict, Any

from flask import Blueprint, request, jsonify, Response

from backend.auth_service.models import User, validate_registration
from backend.auth_service.repository import UserRepository
from backend.auth_service.utils import (
    check_password,
    create_token,
    hash_password,
    verify_token_from_request,
)
from backend.errors import NotFound, PersistenceError, ValidationError
from backend.request_logging import attach_request_logging

auth_bp = Blueprint("auth", __name__)
attach_request_logging(auth_bp, "Auth")

user_repo = UserRepository()


# --- REGISTER ---
@auth_bp.route("/register", methods=["POST"])
def register() -> Tuple[Response, int]:
    """
    Register a new (non-admin) user.

    Expects a JSON body with:
    - username (str): 3 to 50 characters, unique.
    - password (str): Minimum 5 characters.

    Returns:
        201: JSON with id, username and is_admin.
        400: Invalid input or username already exists.
        500: Server-side error (hashing or database).
    """
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    try:
        validate_registration(username, password)
    except ValidationError as e:
        return e.to_response()

    try:
        pw_hash = hash_password(password)
    except Exception:
        logging.exception("[Auth] Password hashing failed")
        return jsonify({"error": "Failed to set password"}), 500

    user = User(username=username, password=pw_hash, is_admin=False)

    try:
        user_repo.create(user)
    except (ValidationError, PersistenceError) as e:
        return e.to_response()

    logging.info(f"[Auth] Registered user {user.id}")
    return jsonify(user.to_dict()), 201


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT valid for 72 hours.

    Expects a JSON body with:
    - username (str)
    - password (str)

    Returns:
        200: JSON with the token.
        400: Missing credentials.
        401: Invalid credentials (unknown user or wrong password).
        500: Database error.
    """
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return jsonify({"error": "Username and password required"}), 400

    try:
        user = user_repo.get_by_username(username)
    except NotFound:
        return jsonify({"error": "Invalid credentials"}), 401
    except PersistenceError:
        return jsonify({"error": "An unexpected error occurred"}), 500

    if not check_password(user.password, password):
        return jsonify({"error": "Invalid credentials"}), 401

    token = create_token(user.id, user.username, user.is_admin)

    return jsonify({"token": token}), 200


# --- PROMOTE (ADMIN ONLY) ---
@auth_bp.route("/api/v1/users/<username>/promote", methods=["PATCH"])
def promote_user(username: str) -> Tuple[Response, int]:
    """
    Admin-only endpoint to promote a user to administrator.

    Promoting a user who is already an admin is rejected instead of
    silently succeeding.

    Returns:
        200: Success message.
        400: User is already an admin.
        401/403: Unauthorized.
        404: User not found.
        500: Database error.
    """
    principal, err, code = verify_token_from_request(admin_only=True)
    if err:
        return err, code

    try:
        user = user_repo.get_by_username(username)
    except NotFound:
        return jsonify({"error": "User not found"}), 404
    except PersistenceError:
        return jsonify({"error": "Failed to promote user"}), 500

    if user.is_admin:
        return jsonify({"error": "User is already an admin"}), 400

    try:
        user_repo.set_admin(user.id, True)
    except NotFound:
        return jsonify({"error": "User not found"}), 404
    except PersistenceError:
        return jsonify({"error": "Failed to promote user"}), 500

    logging.info(f"[Auth] User {user.id} promoted to admin by {principal.user_id}")
    return jsonify({"message": "User promoted to admin successfully"}), 200
