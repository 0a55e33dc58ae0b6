"""User service layer."""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.credentials import ConfigInput
from src.shared.changeset.changeset import Changeset

from .changesets import user_changeset
from .exceptions import InvalidChangeset
from .models import User, normalize_user_id_field_value, persisted_fields, user_id_field

logger = logging.getLogger(__name__)


class UserService:
    """Service for user operations."""

    @staticmethod
    async def get_user(session: AsyncSession, user_id: int) -> User | None:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_user_id(session: AsyncSession, value: str) -> User | None:
        """Get user by the user-id field (email), normalizing the value first."""
        column = getattr(User, user_id_field(User))
        stmt = select(User).where(column == normalize_user_id_field_value(value))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def is_unique(session: AsyncSession, field: str, value: Any, exclude_id: int | None = None) -> bool:
        """Check that no other user holds value in field.

        Args:
            session: Database session
            field: Column name
            value: Value to look up
            exclude_id: User ID to ignore (the user being updated)

        Returns:
            True if the value is free

        """
        stmt = select(User.id).where(getattr(User, field) == value)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await session.execute(stmt.limit(1))
        return result.first() is None

    @staticmethod
    async def check_unique(session: AsyncSession, changeset: Changeset) -> Changeset:
        """Check the unique constraints declared on a changeset.

        Only changed fields without errors are looked up. A taken value adds
        the constraint's error to its field. A race with a concurrent insert
        is still caught at flush time.
        """
        exclude_id = getattr(changeset.data, "id", None)

        for constraint in changeset.constraints:
            value = changeset.get_change(constraint.field)
            if value is None or constraint.field in changeset.errors:
                continue
            if not await UserService.is_unique(session, constraint.field, value, exclude_id):
                changeset = changeset.add_error(constraint.field, constraint.message)

        return changeset

    @staticmethod
    async def create_user(session: AsyncSession, params: Mapping[str, Any], config: ConfigInput = None) -> User:
        """Register a new user.

        Args:
            session: Database session
            params: Raw submitted fields (email, password, confirm_password)
            config: Credential configuration

        Returns:
            Created User object

        Raises:
            InvalidChangeset: If any field is invalid or already taken

        """
        changeset = user_changeset(User(), params, config)
        if not changeset.valid:
            raise InvalidChangeset(changeset)

        changeset = await UserService.check_unique(session, changeset)
        if not changeset.valid:
            raise InvalidChangeset(changeset)

        user = changeset.apply_to(User(), persisted_fields(User))
        session.add(user)
        await UserService._flush(session, changeset)

        logger.info(f"New user registered: {user.id}")
        return user

    @staticmethod
    async def update_user(
        session: AsyncSession, user: User, params: Mapping[str, Any], config: ConfigInput = None
    ) -> User:
        """Update a user's email and/or password.

        The current password is required when the user already has one.

        Args:
            session: Database session
            user: User to update
            params: Raw submitted fields
            config: Credential configuration

        Returns:
            Updated User object

        Raises:
            InvalidChangeset: If any field is invalid or already taken

        """
        changeset = user_changeset(user, params, config)
        if not changeset.valid:
            raise InvalidChangeset(changeset)

        changeset = await UserService.check_unique(session, changeset)
        if not changeset.valid:
            raise InvalidChangeset(changeset)

        changeset.apply_to(user, persisted_fields(User))
        await UserService._flush(session, changeset)

        logger.info(f"User updated: {user.id} (changed: {sorted(changeset.changes.keys() & persisted_fields(User))})")
        return user

    @staticmethod
    async def delete_user(session: AsyncSession, user: User) -> None:
        """Delete a user."""
        await session.delete(user)
        await session.flush()
        logger.info(f"User deleted: {user.id}")

    @staticmethod
    async def _flush(session: AsyncSession, changeset: Changeset) -> None:
        try:
            await session.flush()
        except IntegrityError as exc:
            failed = constraint_error(changeset, exc)
            if failed is None:
                raise
            logger.warning(f"Unique constraint violated on flush: {sorted(failed.errors)}")
            raise InvalidChangeset(failed) from exc


def constraint_error(changeset: Changeset, error: IntegrityError) -> Changeset | None:
    """Map an integrity error onto the changeset's declared unique constraints.

    Matches the constraint name (PostgreSQL) or the table.column pair
    (SQLite) in the driver message.

    Returns:
        The changeset with the violation added to its field, or None when no
        declared constraint matches

    """
    message = str(error.orig)
    table = getattr(changeset.data, "__tablename__", None)

    for constraint in changeset.constraints:
        if constraint.name in message or (table and f"{table}.{constraint.field}" in message):
            return changeset.add_error(constraint.field, constraint.message)

    return None
