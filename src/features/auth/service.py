"""Authentication service layer."""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.credentials import ConfigInput
from src.features.user.changesets import hash_password, verify_password
from src.features.user.models import User, user_id_field
from src.features.user.service import UserService

logger = logging.getLogger(__name__)

# Hashed in place of a verification when no stored hash can be checked
TIMING_ATTACK_PASSWORD = "timing-attack-prevention"


class AuthService:
    """Service for credential authentication."""

    @staticmethod
    async def authenticate(
        session: AsyncSession, params: Mapping[str, Any], config: ConfigInput = None
    ) -> User | None:
        """Authenticate a user with the user-id field and password.

        Args:
            session: Database session
            params: Submitted fields, e.g. {"email": ..., "password": ...}
            config: Credential configuration

        Returns:
            User object if authentication successful, None otherwise

        """
        field = user_id_field(User)
        user_id_value = params.get(field)
        password = params.get("password")

        if not user_id_value or not password:
            return None

        user = await UserService.get_by_user_id(session, user_id_value)

        if not user:
            hash_password(TIMING_ATTACK_PASSWORD, config)
            logger.warning("Login attempt for unknown account")
            return None

        if user.password_hash is None:
            hash_password(TIMING_ATTACK_PASSWORD, config)
            logger.warning(f"Login attempt for user without a password: {user.id}")
            return None

        if not verify_password(user, password, config):
            logger.warning(f"Login attempt with invalid password for user: {user.id}")
            return None

        return user
