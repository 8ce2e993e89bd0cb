"""
Authentication service for sign-up, sign-in and token resolution.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from plot_catalog.repositories.user import UserRepository
from plot_catalog.models.user import User
from plot_catalog.schemas.auth import RegisterRequest
from plot_catalog.utils.auth import create_access_token, verify_token
from plot_catalog.utils.exceptions import (
    DuplicateResourceError,
    InactiveUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    ValidationError,
)
from jose import JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Account management over the users table.
    Admin rights are not decided here; see AdminAllowList.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register(self, user_data: RegisterRequest) -> User:
        """
        Create an account.

        Raises:
            DuplicateResourceError: If the email is already registered
            ValidationError: If email or password is rejected
        """
        existing = await self.user_repo.get_by_email(user_data.email)
        if existing:
            raise DuplicateResourceError("User", user_data.email.lower())

        try:
            user = await self.user_repo.create_user(user_data.model_dump())
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"Registered user {user.email}")
        return user

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate and issue an access token.

        Returns:
            Tuple of (user, access_token)

        Raises:
            InvalidCredentialsError: If email or password doesn't match
        """
        user = await self.user_repo.authenticate_user(email, password)
        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        access_token = create_access_token(user_id=user.id, email=user.email)
        logger.info(f"User authenticated successfully: {user.email}")
        return user, access_token

    async def get_current_user(self, token: str) -> User:
        """
        Resolve the user behind an access token.

        Raises:
            InvalidTokenError: If the token is invalid, expired or its user is gone
            InactiveUserError: If the account is inactive
        """
        try:
            payload = verify_token(token)
            user_id = uuid.UUID(payload.user_id)
        except (JWTError, ValueError) as e:
            raise InvalidTokenError(str(e))

        user: Optional[User] = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise InvalidTokenError("User not found")

        if not user.is_active:
            raise InactiveUserError()

        return user
