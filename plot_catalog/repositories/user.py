"""
User repository for account lookup and creation.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from plot_catalog.repositories.base import BaseRepository
from plot_catalog.models.user import User
from plot_catalog.utils.auth import hash_password, verify_password
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for user accounts."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, case-insensitively."""
        try:
            result = await self.db.execute(select(User).where(User.email == email.strip().lower()))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with a hashed password.

        Args:
            user_data: email, password and optional full_name / is_active

        Raises:
            ValueError: If email or password is invalid
        """
        data = dict(user_data)
        password = data.pop("password")
        data["email"] = User.validate_email_format(data["email"])
        data["hashed_password"] = hash_password(password)

        user = await self.create(data)
        logger.info(f"Created user: {user.email} (ID: {user.id})")
        return user

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Return the user when the password matches an active account."""
        user = await self.get_by_email(email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user
