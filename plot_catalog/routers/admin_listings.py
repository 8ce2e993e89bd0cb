"""
Admin moderation endpoints for user submissions.
"""

from fastapi import APIRouter, Depends, Path, status
from uuid import UUID

from plot_catalog.models.user import User
from plot_catalog.services.moderation import ModerationService
from plot_catalog.schemas.listing import (
    ListingListResponse,
    ListingResponse,
    ModerationRequest,
    ModerationResponse,
)
from plot_catalog.schemas.plot import PlotResponse
from plot_catalog.schemas.error import get_admin_error_responses
from plot_catalog.utils.dependencies import get_current_admin_user, get_moderation_service


router = APIRouter(prefix="/admin/listings", tags=["Admin"])


@router.get(
    "",
    response_model=ListingListResponse,
    status_code=status.HTTP_200_OK,
    summary="List submissions",
    description="Every submission, most recent first, with photos resolved from storage",
    responses=get_admin_error_responses()
)
async def list_listings(
    admin_user: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> ListingListResponse:
    listings = await moderation_service.list_submissions()
    return ListingListResponse(listings=[ListingResponse.model_validate(data) for data in listings])


@router.patch(
    "/{listing_id}",
    response_model=ModerationResponse,
    status_code=status.HTTP_200_OK,
    summary="Approve or reject a submission",
    description="Approval copies the submission and its photos into the catalog",
    responses=get_admin_error_responses(404, 409, 422)
)
async def moderate_listing(
    request: ModerationRequest,
    listing_id: UUID = Path(..., description="Submission ID"),
    admin_user: User = Depends(get_current_admin_user),
    moderation_service: ModerationService = Depends(get_moderation_service)
) -> ModerationResponse:
    """
    Apply a moderation decision.

    Raises:
        ListingNotFoundError: If the submission doesn't exist
        ListingAlreadyModeratedError: If it was already approved or rejected
    """
    listing, plot = await moderation_service.moderate(listing_id, request.action)
    return ModerationResponse(
        listing=ListingResponse.model_validate(listing.to_dict()),
        plot=PlotResponse.model_validate(plot.to_dict()) if plot else None
    )
