"""
User model for the authentication service.

The password attribute always holds the argon2 hash and is left out of
to_dict(), so it never reaches a response body.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from backend.errors import ValidationError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 5


@dataclass
class User:
    username: str
    password: str
    is_admin: bool = False
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        return cls(
            id=row["id"],
            username=row["username"],
            password=row["password"],
            is_admin=row["is_admin"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username, "is_admin": self.is_admin}


def validate_registration(username: Any, password: Any) -> None:
    errors: List[str] = []

    if not isinstance(username, str) or not username:
        errors.append("username is required")
    elif not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        errors.append(f"username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters")

    if not isinstance(password, str) or not password:
        errors.append("password is required")
    elif len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"password must be at least {PASSWORD_MIN_LENGTH} characters")

    if errors:
        raise ValidationError(errors=errors)
