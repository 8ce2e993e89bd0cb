"""
Pydantic schemas for request/response validation.
"""

from .auth import (
    RegisterRequest,
    LoginRequest,
    UserResponse,
    CurrentUserResponse,
    LoginResponse
)

from .plot import (
    PlotResponse,
    PlotListResponse,
    PlotCreateRequest,
    PlotCountResponse,
    PlotImportResponse,
    PlotUpdate,
    SuccessResponse
)

from .listing import (
    ListingCreate,
    ListingResponse,
    ListingListResponse,
    ModerationAction,
    ModerationRequest,
    ModerationResponse
)

from .geocode import GeocodeRequest, GeocodeResponse

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "CurrentUserResponse",
    "LoginResponse",

    "PlotResponse",
    "PlotListResponse",
    "PlotCreateRequest",
    "PlotCountResponse",
    "PlotImportResponse",
    "PlotUpdate",
    "SuccessResponse",

    "ListingCreate",
    "ListingResponse",
    "ListingListResponse",
    "ModerationAction",
    "ModerationRequest",
    "ModerationResponse",

    "GeocodeRequest",
    "GeocodeResponse"
]
