"""
FastAPI dependency injection utilities for authentication and services.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import FrozenSet, Iterable, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from plot_catalog.config import settings
from plot_catalog.database import get_db
from plot_catalog.models.user import User
from plot_catalog.services.auth import AuthService
from plot_catalog.services.listing import ListingService
from plot_catalog.services.moderation import ModerationService
from plot_catalog.services.plot import PlotService
from plot_catalog.services.storage import PhotoStorage, get_photo_storage
from plot_catalog.utils.exceptions import NotAdminError, UnauthorizedError


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


class AdminAllowList:
    """Emails allowed to use the admin API, compared case-insensitively."""

    def __init__(self, emails: Iterable[str]):
        self.emails: FrozenSet[str] = frozenset(
            email.strip().lower() for email in emails if email and email.strip()
        )

    @classmethod
    def from_setting(cls, value: str) -> "AdminAllowList":
        """Parse a comma-separated allow-list."""
        return cls(value.split(","))

    def is_admin(self, email: Optional[str]) -> bool:
        return bool(email) and email.strip().lower() in self.emails


_admin_allow_list = AdminAllowList(settings.admin_email_list)


def get_admin_allow_list() -> AdminAllowList:
    """Allow-list parsed once from ADMIN_EMAILS."""
    return _admin_allow_list


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_plot_service(db: AsyncSession = Depends(get_db)) -> PlotService:
    return PlotService(db)


async def get_listing_service(
    db: AsyncSession = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage)
) -> ListingService:
    return ListingService(db, storage)


async def get_moderation_service(
    db: AsyncSession = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage)
) -> ModerationService:
    return ModerationService(db, storage)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        UnauthorizedError: If no token provided or token is invalid
        InactiveUserError: If user account is inactive
    """
    if not credentials:
        raise UnauthorizedError()

    return await auth_service.get_current_user(credentials.credentials)


async def get_current_admin_user(
    current_user: User = Depends(get_current_user),
    allow_list: AdminAllowList = Depends(get_admin_allow_list)
) -> User:
    """
    Get current user if their email is on the admin allow-list.

    Raises:
        NotAdminError: If the user is not an admin
    """
    if not allow_list.is_admin(current_user.email):
        raise NotAdminError()

    return current_user
