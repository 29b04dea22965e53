"""
Error taxonomy shared by repositories and route handlers.

Repositories raise these; handlers translate them into JSON error responses.
Every error carries the HTTP status it maps to and a short, client-safe message.
"""

from typing import Optional, Tuple

from flask import jsonify, Response


class APIError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_response(self) -> Tuple[Response, int]:
        return jsonify({"error": self.message}), self.status_code


class ValidationError(APIError):
    """Malformed or out-of-range input."""
    status_code = 400
    message = "Invalid input"

    def __init__(self, message=None, errors=None):
        self.errors = list(errors or [])
        if message is None and self.errors:
            message = "; ".join(self.errors)
        super().__init__(message)


class AuthenticationError(APIError):
    status_code = 401
    message = "Invalid credentials"


class AuthorizationError(APIError):
    status_code = 403
    message = "Access denied"


class NotFound(APIError):
    status_code = 404
    message = "Record not found"


class SignupRejected(APIError):
    """The event is missing, unpublished, in the past, or already joined."""
    status_code = 409
    message = "Can't sign up to event"


class PersistenceError(APIError):
    status_code = 500
    message = "Database error"
