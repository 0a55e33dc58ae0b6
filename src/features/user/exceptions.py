"""User-related exceptions."""

from fastapi import HTTPException, status

from src.shared.changeset.changeset import Changeset


class UserException(HTTPException):
    """Base user exception."""

    def __init__(self, detail: str | dict = "User operation failed", status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class UserNotFound(UserException):
    """Raised when user is not found."""

    def __init__(self):
        super().__init__(detail="User not found", status_code=status.HTTP_404_NOT_FOUND)


class InvalidChangeset(UserException):
    """Raised when a user changeset is invalid and cannot be committed.

    The changeset is kept on the exception so callers can inspect or
    re-render it; the response body carries its field errors.
    """

    def __init__(self, changeset: Changeset):
        self.changeset = changeset
        super().__init__(
            detail={"errors": changeset.errors},
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
