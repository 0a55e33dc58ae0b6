"""User domain models."""

from typing import Any

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.database.base import Base, TimestampMixin
from src.shared.changeset.changeset import Changeset

DEFAULT_USER_ID_FIELD = "email"

class User(Base, TimestampMixin):
    """User model for authentication.

    The user-id field (the field users log in with) is declared through
    ``__user_id_field__``. ``password_hash`` is null until a password is set,
    e.g. for accounts created through an external identity provider.
    """

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="users_email_key"),)
    __user_id_field__ = "email"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Identity (globally unique)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    # Authentication
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Transient input fields, never mapped
    password = None
    confirm_password = None
    current_password = None


def user_id_field(user_or_changeset: Any) -> str:
    """Get the user-id field name declared by a record type.

    Accepts a record class, a record or a changeset wrapping a record.
    """
    record = user_or_changeset.data if isinstance(user_or_changeset, Changeset) else user_or_changeset
    record_type = record if isinstance(record, type) else type(record)
    return getattr(record_type, "__user_id_field__", DEFAULT_USER_ID_FIELD)


def normalize_user_id_field_value(value: Any) -> Any:
    """Normalize a user-id value: strip surrounding whitespace and lowercase.

    Non-string values are returned untouched.

    Examples:
        >>> normalize_user_id_field_value(" User@Example.com ")
        'user@example.com'

    """
    if not isinstance(value, str):
        return value
    return value.strip().lower()


def persisted_fields(record_type: Any) -> frozenset[str]:
    """Get the fields written to storage for a record type.

    password, confirm_password and current_password only ever live in a
    changeset.
    """
    return frozenset({user_id_field(record_type), "password_hash"})
