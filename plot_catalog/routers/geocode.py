"""
Address to coordinates lookup, for the submission form and the admin form.
"""

from fastapi import APIRouter, Depends, status
from plot_catalog.models.user import User
from plot_catalog.services.geocoding import GeocodingService, get_geocoding_service
from plot_catalog.schemas.geocode import GeocodeRequest, GeocodeResponse
from plot_catalog.schemas.error import get_error_responses
from plot_catalog.utils.dependencies import get_current_admin_user, get_current_user


router = APIRouter(prefix="/geocode", tags=["Geocoding"])
admin_router = APIRouter(prefix="/admin/geocode", tags=["Admin"])

_GEOCODE_ERRORS = get_error_responses(400, 401, 404, 422, 502)


async def _geocode(request: GeocodeRequest, geocoder: GeocodingService) -> GeocodeResponse:
    lat, lng = await geocoder.geocode(request.address)
    return GeocodeResponse(lat=lat, lng=lng)


@router.post(
    "",
    response_model=GeocodeResponse,
    status_code=status.HTTP_200_OK,
    summary="Geocode an address",
    responses=_GEOCODE_ERRORS
)
async def geocode(
    request: GeocodeRequest,
    current_user: User = Depends(get_current_user),
    geocoder: GeocodingService = Depends(get_geocoding_service)
) -> GeocodeResponse:
    return await _geocode(request, geocoder)


@admin_router.post(
    "",
    response_model=GeocodeResponse,
    status_code=status.HTTP_200_OK,
    summary="Geocode an address (admin)",
    responses={**_GEOCODE_ERRORS, **get_error_responses(403)}
)
async def admin_geocode(
    request: GeocodeRequest,
    admin_user: User = Depends(get_current_admin_user),
    geocoder: GeocodingService = Depends(get_geocoding_service)
) -> GeocodeResponse:
    return await _geocode(request, geocoder)
