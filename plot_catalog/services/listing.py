"""
Submission service for end users proposing new listings.
Stores photos under the new submission's namespace before the row is written.
"""

from typing import List
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from plot_catalog.repositories.listing import ListingRepository
from plot_catalog.models.listing import ListingStatus, UserListing
from plot_catalog.models.user import User
from plot_catalog.schemas.listing import ListingCreate
from plot_catalog.services.storage import PhotoStorage
import uuid
import logging

logger = logging.getLogger(__name__)


class ListingService:
    """User submissions and their photos."""

    def __init__(self, db_session: AsyncSession, storage: PhotoStorage):
        self.db = db_session
        self.storage = storage
        self.listing_repo = ListingRepository(db_session)

    async def create_submission(
        self,
        current_user: User,
        listing_data: ListingCreate,
        photos: List[UploadFile]
    ) -> UserListing:
        """
        Create a pending submission with its photos.

        Photos are stored first; if any upload or the insert fails, everything
        stored under the submission's namespace is removed.

        Returns:
            Created submission
        """
        listing_id = uuid.uuid4()
        namespace = str(listing_id)

        try:
            paths = [await self.storage.upload(namespace, photo) for photo in photos]

            create_data = listing_data.model_dump(mode="json")
            create_data.update({
                "id": listing_id,
                "user_id": current_user.id,
                "status": ListingStatus.PENDING.value,
                "image_urls": [self.storage.public_url(path) for path in paths],
            })
            listing = await self.listing_repo.create(create_data)
        except Exception:
            self.storage.remove_namespace(namespace)
            raise

        logger.info(
            f"Submission {listing.id} created by {current_user.email} with {len(paths)} photos"
        )
        return listing

    async def list_for_user(self, current_user: User) -> List[UserListing]:
        """Submissions owned by the caller, most recent first."""
        return await self.listing_repo.list_for_user(current_user.id)
