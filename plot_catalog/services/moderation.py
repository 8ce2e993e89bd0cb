"""
Moderation service for user submissions.
Applies approve/reject decisions and promotes approved submissions into the catalog.
"""

from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from plot_catalog.repositories.listing import ListingRepository
from plot_catalog.repositories.plot import PlotRepository
from plot_catalog.models.listing import ListingStatus, UserListing
from plot_catalog.models.plot import Plot, PlotStatus
from plot_catalog.schemas.listing import ModerationAction
from plot_catalog.services.storage import PhotoStorage
from plot_catalog.utils.exceptions import (
    APIException,
    ListingAlreadyModeratedError,
    ListingNotFoundError,
)
import uuid
import logging

logger = logging.getLogger(__name__)


def tagged_description(listing: UserListing) -> str:
    """Catalog description: deal tag, then the submitted text if any."""
    if listing.description:
        return f"{listing.deal_tag} {listing.description}"
    return listing.deal_tag


class ModerationService:
    """
    Moderation of user submissions.

    Decisions are conditional transitions out of ``pending``; approval and its
    catalog insert share one transaction.
    """

    def __init__(self, db_session: AsyncSession, storage: PhotoStorage):
        self.db = db_session
        self.storage = storage
        self.listing_repo = ListingRepository(db_session)
        self.plot_repo = PlotRepository(db_session)

    def resolve_image_urls(self, listing: UserListing) -> List[str]:
        """
        Image URLs of a submission.

        Falls back to the photos stored under the submission's namespace when
        none were recorded on the row.
        """
        if listing.image_urls:
            return list(listing.image_urls)
        return self.storage.list_public_urls(str(listing.id))

    async def list_submissions(self) -> List[Dict[str, Any]]:
        """Every submission, most recent first, with image lists resolved."""
        listings = await self.listing_repo.list_recent()
        results = []
        for listing in listings:
            data = listing.to_dict()
            data["image_urls"] = self.resolve_image_urls(listing)
            results.append(data)
        return results

    async def moderate(
        self,
        listing_id: uuid.UUID,
        action: ModerationAction
    ) -> Tuple[UserListing, Optional[Plot]]:
        """
        Approve or reject a pending submission.

        Returns:
            The updated submission and, on approval, the created plot

        Raises:
            ListingNotFoundError: If the submission doesn't exist
            ListingAlreadyModeratedError: If it is no longer pending
        """
        listing = await self.listing_repo.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError()

        if action == ModerationAction.APPROVE:
            plot = await self._approve(listing)
        else:
            await self._reject(listing)
            plot = None

        await self.db.refresh(listing)
        return listing, plot

    async def _approve(self, listing: UserListing) -> Plot:
        listing_id = listing.id
        image_urls = self.resolve_image_urls(listing)
        plot_data = {
            "title": listing.title,
            "location": listing.location,
            "price_usd": listing.price_usd,
            "area_m2": listing.area_m2,
            "status": PlotStatus.AVAILABLE.value,
            "type": listing.type,
            "description": tagged_description(listing),
            "image_url": image_urls[0] if image_urls else None,
            "image_urls": image_urls,
            "lat": listing.lat,
            "lng": listing.lng,
        }

        try:
            moved = await self.listing_repo.transition_status(
                listing_id,
                ListingStatus.PENDING.value,
                ListingStatus.APPROVED.value,
                values={"image_urls": image_urls},
                commit=False
            )
            if not moved:
                await self.db.rollback()
                await self._raise_conflict(listing_id)

            plot = await self.plot_repo.create(plot_data, commit=False)
            await self.db.commit()
        except APIException:
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to approve listing {listing_id}: {e}")
            raise

        logger.info(
            f"Approved listing {listing_id} as plot {plot.id} with {len(image_urls)} images"
        )
        return plot

    async def _reject(self, listing: UserListing) -> None:
        moved = await self.listing_repo.transition_status(
            listing.id,
            ListingStatus.PENDING.value,
            ListingStatus.REJECTED.value
        )
        if not moved:
            await self._raise_conflict(listing.id)
        logger.info(f"Rejected listing {listing.id}")

    async def _raise_conflict(self, listing_id: uuid.UUID) -> None:
        current = await self.listing_repo.get_by_id(listing_id)
        if current is None:
            raise ListingNotFoundError()
        await self.db.refresh(current)
        logger.warning(f"Listing {listing_id} is already {current.status}")
        raise ListingAlreadyModeratedError(current.status)
