"""
Pydantic schemas for catalog plot requests and responses.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional


class PlotResponse(BaseModel):
    """Catalog plot as returned by the API."""

    id: str
    title: str
    location: str
    price_usd: float
    area_m2: float
    status: str
    type: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    image_urls: List[str] = []
    lat: Optional[float] = None
    lng: Optional[float] = None
    created_at: Optional[str] = None


class PlotListResponse(BaseModel):
    """All catalog plots, most recent first."""

    plots: List[PlotResponse]


class PlotCreateRequest(BaseModel):
    """
    Single or batch plot creation.

    Items are loose dicts: invalid items are dropped during sanitization
    instead of failing the whole request.
    """

    plot: Optional[Dict[str, Any]] = None
    plots: Optional[List[Dict[str, Any]]] = None

    def items(self) -> List[Dict[str, Any]]:
        if self.plots is not None:
            return self.plots
        return [self.plot] if self.plot else []

    model_config = {
        "json_schema_extra": {
            "example": {
                "plot": {
                    "title": "Terreno con vista al lago",
                    "location": "Puerto Varas, Chile",
                    "price_usd": 85000,
                    "area_m2": 5000,
                    "status": "available",
                    "type": "residential",
                    "description": "Acceso pavimentado, agua y luz.",
                    "image_url": "https://example.com/lago.jpg",
                    "lat": -41.3167,
                    "lng": -72.9833
                }
            }
        }
    }


class PlotCountResponse(BaseModel):
    """Number of plots persisted by a create or import call."""

    count: int


class PlotImportResponse(PlotCountResponse):
    """Spreadsheet import outcome."""

    total_rows: int


class PlotUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""

    title: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    price_usd: Optional[float] = Field(None, allow_inf_nan=False)
    area_m2: Optional[float] = Field(None, allow_inf_nan=False)
    status: Optional[str] = Field(None, max_length=32)
    type: Optional[str] = Field(None, max_length=32)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1000)
    image_urls: Optional[List[str]] = None
    lat: Optional[float] = Field(None, allow_inf_nan=False)
    lng: Optional[float] = Field(None, allow_inf_nan=False)

    @field_validator("title", "location")
    @classmethod
    def validate_required_text(cls, v):
        """Title and location cannot be blanked."""
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Value cannot be empty")
        return v

    @field_validator("status", "type")
    @classmethod
    def lower_case(cls, v):
        if v is not None:
            v = v.strip().lower()
            if not v:
                raise ValueError("Value cannot be empty")
        return v

    @field_validator("description", "image_url")
    @classmethod
    def blank_to_none(cls, v):
        if v is not None:
            v = v.strip()
        return v or None

    @field_validator("image_urls")
    @classmethod
    def drop_blank_urls(cls, v):
        if v is not None:
            v = [url.strip() for url in v if url and url.strip()]
        return v

    @model_validator(mode="after")
    def validate_not_null(self):
        """Fields backed by non-nullable columns may be omitted but not nulled."""
        for field in ("title", "location", "price_usd", "area_m2", "status", "type", "image_urls"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class SuccessResponse(BaseModel):
    """Generic acknowledgement."""

    success: bool = True
