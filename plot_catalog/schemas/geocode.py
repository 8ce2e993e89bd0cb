"""
Schemas for address geocoding.
"""

from pydantic import BaseModel
from typing import Optional


class GeocodeRequest(BaseModel):
    address: Optional[str] = None


class GeocodeResponse(BaseModel):
    lat: float
    lng: float
