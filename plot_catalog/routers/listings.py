"""
User submission endpoints.
Signed-in users propose listings with photos and follow their moderation status.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from typing import List, Optional

from plot_catalog.models.listing import DealType
from plot_catalog.models.plot import PlotType
from plot_catalog.models.user import User
from plot_catalog.services.listing import ListingService
from plot_catalog.schemas.listing import ListingCreate, ListingListResponse, ListingResponse
from plot_catalog.schemas.error import get_error_responses
from plot_catalog.utils.dependencies import get_current_user, get_listing_service


router = APIRouter(prefix="/listings", tags=["Submissions"])


@router.post(
    "",
    response_model=ListingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a listing",
    description="Create a pending submission from form fields and optional photos",
    responses=get_error_responses(400, 401, 422, 500)
)
async def create_listing(
    title: str = Form(...),
    location: str = Form(...),
    price_usd: float = Form(...),
    area_m2: float = Form(...),
    type: PlotType = Form(PlotType.RESIDENTIAL),
    deal_type: DealType = Form(DealType.SALE),
    description: Optional[str] = Form(None),
    lat: Optional[float] = Form(None),
    lng: Optional[float] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(get_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    """
    Create a submission.

    Photos are stored under the new submission's id before the row is
    written; the submission starts as pending.
    """
    try:
        listing_data = ListingCreate(
            title=title,
            location=location,
            price_usd=price_usd,
            area_m2=area_m2,
            type=type,
            deal_type=deal_type,
            description=description,
            lat=lat,
            lng=lng
        )
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors())

    listing = await listing_service.create_submission(current_user, listing_data, photos or [])
    return ListingResponse.model_validate(listing.to_dict())


@router.get(
    "/mine",
    response_model=ListingListResponse,
    status_code=status.HTTP_200_OK,
    summary="List my submissions",
    responses=get_error_responses(401)
)
async def list_my_listings(
    current_user: User = Depends(get_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingListResponse:
    listings = await listing_service.list_for_user(current_user)
    return ListingListResponse(
        listings=[ListingResponse.model_validate(listing.to_dict()) for listing in listings]
    )
