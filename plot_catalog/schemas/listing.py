"""
Pydantic schemas for user submissions and moderation.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
import enum

from plot_catalog.models.listing import DealType
from plot_catalog.models.plot import PlotType
from plot_catalog.schemas.plot import PlotResponse


class ListingCreate(BaseModel):
    """Fields of the public submission form."""

    title: str = Field(..., max_length=255)
    location: str = Field(..., max_length=255)
    price_usd: float = Field(..., gt=0, allow_inf_nan=False)
    area_m2: float = Field(..., gt=0, allow_inf_nan=False)
    type: PlotType = PlotType.RESIDENTIAL
    deal_type: DealType = DealType.SALE
    description: Optional[str] = None
    lat: Optional[float] = Field(None, ge=-90, le=90, allow_inf_nan=False)
    lng: Optional[float] = Field(None, ge=-180, le=180, allow_inf_nan=False)

    @field_validator("title", "location")
    @classmethod
    def validate_required_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be empty")
        return v

    @field_validator("description")
    @classmethod
    def blank_to_none(cls, v):
        if v is not None:
            v = v.strip()
        return v or None


class ListingResponse(BaseModel):
    """User submission as returned by the API."""

    id: str
    title: str
    location: str
    price_usd: float
    area_m2: float
    type: str
    deal_type: str
    description: Optional[str] = None
    image_urls: List[str] = []
    lat: Optional[float] = None
    lng: Optional[float] = None
    status: str
    user_id: str
    created_at: Optional[str] = None


class ListingListResponse(BaseModel):
    """Submissions, most recent first."""

    listings: List[ListingResponse]


class ModerationAction(str, enum.Enum):
    """Moderator decision on a submission."""
    APPROVE = "approve"
    REJECT = "reject"


class ModerationRequest(BaseModel):
    """Body of a moderation call."""

    action: ModerationAction


class ModerationResponse(BaseModel):
    """Moderation outcome; ``plot`` is set only on approval."""

    success: bool = True
    listing: ListingResponse
    plot: Optional[PlotResponse] = None
