"""Authentication schemas (DTOs)."""

from pydantic import BaseModel, Field


# Request schemas
class SessionRequest(BaseModel):
    """Credentials submitted to open a session."""

    email: str = Field(..., min_length=1, description="Email address, matched case-insensitively")
    password: str = Field(..., min_length=1)
