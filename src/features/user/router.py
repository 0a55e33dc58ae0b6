"""User management router (API endpoints)."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.credentials import CredentialConfig, get_credential_config
from src.database.dependencies import get_db_session

from .exceptions import UserNotFound
from .schemas import UserCredentialsRequest, UserResponse
from .service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["User Management"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    data: UserCredentialsRequest,
    session: AsyncSession = Depends(get_db_session),
    config: CredentialConfig = Depends(get_credential_config),
):
    """Register a new user.

    - **email**: Email address, normalized to lowercase
    - **password**: Password within the configured length bounds
    - **confirm_password**: Must match password

    Returns 422 with per-field errors when the submission is invalid.
    """
    user = await UserService.create_user(session, data.to_params(), config)
    await session.commit()
    return UserResponse.from_user(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user_credentials(
    user_id: int,
    data: UserCredentialsRequest,
    session: AsyncSession = Depends(get_db_session),
    config: CredentialConfig = Depends(get_credential_config),
):
    """Change a user's email and/or password.

    - **current_password**: Required once the user has a password
    - **email**: New email address (optional)
    - **password** / **confirm_password**: New password (optional)
    """
    user = await UserService.get_user(session, user_id)
    if not user:
        raise UserNotFound()

    user = await UserService.update_user(session, user, data.to_params(), config)
    await session.commit()
    return UserResponse.from_user(user)

