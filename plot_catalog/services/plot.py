"""
Catalog service for admin plot management.
Handles sanitization, batch creation, partial updates, deletion and spreadsheet import.
"""

from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from plot_catalog.repositories.plot import PlotRepository
from plot_catalog.models.plot import Plot, PlotStatus, PlotType
from plot_catalog.schemas.plot import PlotUpdate
from plot_catalog.services.importer import normalize_rows, read_spreadsheet
from plot_catalog.config import settings
from plot_catalog.utils.exceptions import (
    BadRequestError,
    FileSizeExceededError,
    NoValidRowsError,
    PlotNotFoundError,
    ValidationError,
)
import logging
import math
import uuid

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _finite(value: Any) -> Optional[float]:
    """Finite float from a JSON number or numeric string, else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def with_cover_image(image_url: Optional[str], image_urls: Optional[List[str]]) -> Tuple[Optional[str], List[str]]:
    """
    Reconcile a cover image with the gallery list.

    The cover is always the first gallery entry; a cover missing from the
    list is placed at its front.
    """
    urls = [url for url in (image_urls or []) if url]
    if urls and (image_url is None or image_url == urls[0]):
        return urls[0], urls
    if image_url:
        return image_url, [image_url] + [url for url in urls if url != image_url]
    return None, []


def sanitize_plot(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Clean one incoming plot record.

    Returns:
        Column values ready for insert, or None if title, location, price or
        area is unusable
    """
    if not isinstance(data, dict):
        return None

    title = _text(data.get("title"))
    location = _text(data.get("location"))
    price = _finite(data.get("price_usd"))
    area = _finite(data.get("area_m2"))

    if not title or not location or price is None or area is None:
        return None

    image_urls = data.get("image_urls")
    if not isinstance(image_urls, list):
        image_urls = None
    else:
        image_urls = [_text(url) for url in image_urls]
    image_url, image_urls = with_cover_image(_text(data.get("image_url")) or None, image_urls)

    return {
        "title": title,
        "location": location,
        "price_usd": price,
        "area_m2": area,
        "status": _text(data.get("status")).lower() or PlotStatus.AVAILABLE.value,
        "type": _text(data.get("type")).lower() or PlotType.RESIDENTIAL.value,
        "description": _text(data.get("description")) or None,
        "image_url": image_url,
        "image_urls": image_urls,
        "lat": _finite(data.get("lat")),
        "lng": _finite(data.get("lng")),
    }


class PlotService:
    """Admin operations on the public catalog."""

    def __init__(self, db_session: AsyncSession, max_import_size: Optional[int] = None):
        self.db = db_session
        self.plot_repo = PlotRepository(db_session)
        self.max_import_size = max_import_size or settings.max_import_file_size

    async def list_plots(self) -> List[Plot]:
        """Every plot, most recent first."""
        return await self.plot_repo.list_recent()

    async def create_plots(self, items: List[Dict[str, Any]]) -> int:
        """
        Sanitize and insert a batch of plots.

        Invalid items are dropped silently.

        Returns:
            Number of plots persisted

        Raises:
            BadRequestError: If no items were sent
            NoValidRowsError: If no item survived sanitization
        """
        if not items:
            raise BadRequestError("No plots provided.")

        cleaned = [plot for plot in (sanitize_plot(item) for item in items) if plot is not None]
        if not cleaned:
            raise NoValidRowsError()

        count = await self.plot_repo.create_many(cleaned)
        logger.info(f"Created {count} plots ({len(items) - len(cleaned)} dropped)")
        return count

    async def import_spreadsheet(self, filename: str, content: bytes) -> Tuple[int, int]:
        """
        Import plots from an uploaded CSV or Excel file.

        Returns:
            Tuple of (plots persisted, rows read)

        Raises:
            FileSizeExceededError: If the upload is over the import size limit
            NoValidRowsError: If the file is empty or every row is invalid
        """
        if len(content) > self.max_import_size:
            raise FileSizeExceededError(len(content), self.max_import_size)

        rows = read_spreadsheet(filename, content)
        candidates = normalize_rows(rows)
        logger.info(f"Import {filename}: {len(candidates)} valid rows found of {len(rows)}")

        if not candidates:
            raise NoValidRowsError()

        count = await self.plot_repo.create_many(candidates)
        return count, len(rows)

    async def update_plot(self, plot_id: uuid.UUID, plot_data: PlotUpdate) -> Plot:
        """
        Apply a partial update.

        Raises:
            BadRequestError: If no field was sent
            PlotNotFoundError: If the plot doesn't exist
            ValidationError: If the cover is cleared while gallery images remain
        """
        updates = plot_data.model_dump(exclude_unset=True)
        if not updates:
            raise BadRequestError("No fields provided for update.")

        existing = await self.plot_repo.get_by_id(plot_id)
        if existing is None:
            raise PlotNotFoundError(str(plot_id))

        if "image_urls" in updates or "image_url" in updates:
            if (
                "image_urls" not in updates
                and updates["image_url"] is None
                and existing.image_urls
            ):
                raise ValidationError(
                    "Cannot clear the cover image while the plot has gallery images."
                )
            image_url, image_urls = with_cover_image(
                updates.get("image_url", existing.image_url if "image_urls" not in updates else None),
                updates.get("image_urls", existing.image_urls),
            )
            updates["image_url"] = image_url
            updates["image_urls"] = image_urls

        updated = await self.plot_repo.update(plot_id, updates)
        if updated is None:
            raise PlotNotFoundError(str(plot_id))

        logger.info(f"Updated plot {plot_id}: {sorted(updates)}")
        return updated

    async def delete_plot(self, plot_id: uuid.UUID) -> None:
        """
        Delete a plot.

        Raises:
            PlotNotFoundError: If the plot doesn't exist
        """
        if not await self.plot_repo.delete(plot_id):
            raise PlotNotFoundError(str(plot_id))
        logger.info(f"Deleted plot {plot_id}")
