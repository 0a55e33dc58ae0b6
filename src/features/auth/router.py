"""Authentication router (session endpoints)."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.credentials import CredentialConfig, get_credential_config
from src.database.dependencies import get_db_session
from src.features.user.schemas import UserResponse

from .exceptions import InvalidCredentialsException
from .schemas import SessionRequest
from .service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/session", response_model=UserResponse)
async def create_session(
    data: SessionRequest,
    session: AsyncSession = Depends(get_db_session),
    config: CredentialConfig = Depends(get_credential_config),
):
    """Verify credentials.

    - **email**: Email address
    - **password**: Password

    Returns the authenticated user, or 401 when the credentials do not match.
    """
    user = await AuthService.authenticate(session, data.model_dump(), config)

    if not user:
        raise InvalidCredentialsException()

    logger.info(f"User authenticated: {user.id}")
    return UserResponse.from_user(user)
