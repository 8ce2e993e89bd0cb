"""
Address search against a Nominatim-compatible geocoding service.
"""

from typing import Optional, Tuple
import logging
import math

import httpx

from plot_catalog.config import Settings, get_settings
from plot_catalog.utils.exceptions import (
    BadRequestError,
    NotFoundError,
    UpstreamServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class GeocodingService:
    """Resolves a free-text address to the first matching coordinates."""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.url = settings.geocoder_url
        self.headers = {
            "User-Agent": settings.geocoder_user_agent,
            "Accept-Language": settings.geocoder_language,
        }
        self.timeout = httpx.Timeout(settings.geocoder_timeout_seconds)

    async def geocode(self, address: Optional[str]) -> Tuple[float, float]:
        """
        Look up an address.

        Returns:
            (lat, lng) of the first result

        Raises:
            BadRequestError: If the address is blank
            UpstreamServiceError: If the service fails or answers non-2xx
            NotFoundError: If the service has no result
            ValidationError: If the result carries non-numeric coordinates
        """
        address = (address or "").strip()
        if not address:
            raise BadRequestError("Missing address.")

        params = {"format": "json", "limit": "1", "q": address}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url, params=params, headers=self.headers)
                response.raise_for_status()
                results = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Geocoder answered {e.response.status_code} for {address!r}")
            raise UpstreamServiceError("Geocoding failed.")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Geocoder request failed for {address!r}: {e}")
            raise UpstreamServiceError("Geocoding failed.")

        if not isinstance(results, list):
            raise UpstreamServiceError("Geocoding failed.")

        if not results:
            raise NotFoundError("No results found.")

        first = results[0] if isinstance(results[0], dict) else {}
        try:
            lat = float(first.get("lat"))
            lng = float(first.get("lon"))
        except (TypeError, ValueError):
            raise ValidationError("Invalid coordinates.")

        if not math.isfinite(lat) or not math.isfinite(lng):
            raise ValidationError("Invalid coordinates.")

        logger.info(f"Geocoded {address!r} to ({lat}, {lng})")
        return lat, lng


def get_geocoding_service() -> GeocodingService:
    """Dependency providing the configured geocoder."""
    return GeocodingService()
