"""
Shared authentication helpers.
Provides password hashing, token creation, verification, and admin enforcement.
"""

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import Argon2Error, InvalidHashError
from flask import request, Response
from dotenv import load_dotenv

from backend.errors import AuthenticationError, AuthorizationError

# Load .env only once here
load_dotenv()

# Load secrets & configs
JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET is missing. Set it in .env")

JWT_ALGORITHM = "HS256"
TOKEN_EXPIRATION_HOURS = int(os.getenv("TOKEN_EXPIRATION_HOURS", 72))

ph = PasswordHasher()


@dataclass(frozen=True)
class Principal:
    """The authenticated identity behind a request."""
    user_id: int
    username: str
    is_admin: bool


# --- PASSWORDS ---
def hash_password(password: str) -> str:
    return ph.hash(password)


def check_password(password_hash: str, password: str) -> bool:
    """Return True when the password matches; any verification failure is False."""
    try:
        return ph.verify(password_hash, password)
    except (Argon2Error, InvalidHashError):
        return False


# --- JWT CREATION ---
def create_token(user_id: int, username: str, is_admin: bool) -> str:
    """
    Generates a new JWT for a given user.

    Args:
        user_id (int): The unique ID of the user.
        username (str): The user's login name.
        is_admin (bool): Whether the user is an administrator.

    Returns:
        str: Encoded JWT string.
    """
    now = datetime.now(timezone.utc)

    payload = {
        "user_id": user_id,
        "username": username,
        "is_admin": is_admin,
        "exp": now + timedelta(hours=TOKEN_EXPIRATION_HOURS),
        "iat": now,
    }

    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


# --- JWT VALIDATION ---
def decode_token(token: str) -> Optional[Principal]:
    """
    Validate a JWT and build the principal it describes.

    Returns:
        Principal: if the signature, expiry and claims are valid.

    Raises:
        jwt.ExpiredSignatureError: The token is past its exp claim.
        jwt.InvalidTokenError: Any other signature or format problem.
    """
    payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])

    user_id = payload.get("user_id")
    is_admin = payload.get("is_admin")
    # bool is an int subclass, so rule it out explicitly
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(is_admin, bool):
        return None

    return Principal(user_id=user_id, username=payload.get("username", ""), is_admin=is_admin)


def verify_token_from_request(admin_only: bool = False) -> Tuple[Optional[Principal], Optional[Response], Optional[int]]:
    """
    Verify the JWT in the Authorization header.

    Args:
        admin_only (bool): Reject non-admin principals with 403.

    Returns:
        tuple: (principal, error_response, status_code)
               If successful, error_response and status_code are None.
               If failed, principal is None.
    """
    auth = request.headers.get("Authorization", "")

    if not auth.startswith("Bearer "):
        return (None,) + AuthenticationError("Missing or invalid token").to_response()

    token = auth.split(" ", 1)[1].strip()
    if not token:
        return (None,) + AuthenticationError("Missing or invalid token").to_response()

    try:
        principal = decode_token(token)
    except jwt.ExpiredSignatureError:
        return (None,) + AuthenticationError("Token expired").to_response()
    except jwt.InvalidTokenError:
        return (None,) + AuthenticationError("Invalid token").to_response()

    if principal is None:
        return (None,) + AuthenticationError("Invalid token claims").to_response()

    if admin_only and not principal.is_admin:
        return (None,) + AuthorizationError().to_response()

    return principal, None, None
