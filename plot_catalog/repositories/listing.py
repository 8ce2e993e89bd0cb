"""
Repository for user-submitted listings and their moderation state.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update
from plot_catalog.repositories.base import BaseRepository
from plot_catalog.models.listing import UserListing
from typing import List, Dict, Any, Optional
import uuid
import logging

logger = logging.getLogger(__name__)


class ListingRepository(BaseRepository[UserListing]):
    """Repository for the user_listings table."""

    def __init__(self, db: AsyncSession):
        super().__init__(UserListing, db)

    async def list_recent(self) -> List[UserListing]:
        """All submissions, most recent first."""
        return await self.get_multi()

    async def list_for_user(self, user_id: uuid.UUID) -> List[UserListing]:
        """Submissions owned by one user, most recent first."""
        return await self.get_multi(filters={"user_id": user_id})

    async def transition_status(
        self,
        listing_id: uuid.UUID,
        from_status: str,
        to_status: str,
        values: Optional[Dict[str, Any]] = None,
        commit: bool = True
    ) -> bool:
        """
        Move a listing from one status to another, only if it is still in
        ``from_status``.

        Returns:
            True if the row changed, False if the listing is missing or was
            already moved by someone else
        """
        stmt = (
            update(UserListing)
            .where(UserListing.id == listing_id, UserListing.status == from_status)
            .values(status=to_status, **(values or {}))
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = await self.db.execute(stmt)
            await self._finish(commit)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to move listing {listing_id} to {to_status}: {e}")
            raise

        changed = result.rowcount == 1
        logger.debug(
            f"Listing {listing_id} {from_status} -> {to_status}: {'ok' if changed else 'skipped'}"
        )
        return changed
