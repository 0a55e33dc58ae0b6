"""User schemas (DTOs)."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


# Request schemas
class UserCredentialsRequest(BaseModel):
    """User credentials submitted for registration or update.

    Every field is optional here: presence, format and length rules are
    applied by the user changesets so errors come back per field.
    """

    email: str | None = None
    password: str | None = None
    confirm_password: str | None = None
    current_password: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Return only the fields that were actually submitted."""
        return self.model_dump(exclude_unset=True)


# Response schemas
class UserResponse(BaseModel):
    """User response."""

    id: int
    email: str
    has_password: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: Any) -> "UserResponse":
        """Build the response without exposing the password hash."""
        return cls(
            id=user.id,
            email=user.email,
            has_password=user.password_hash is not None,
            created_at=user.created_at,
        )
