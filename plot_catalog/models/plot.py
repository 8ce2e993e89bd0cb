"""
Plot model for the public land catalog.
Handles pricing, area, location, cover image and gallery data.
"""

from sqlalchemy import String, Text, Float, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from plot_catalog.database import Base
import enum
from typing import List, Optional


class PlotStatus(str, enum.Enum):
    """Sale status of a catalog plot."""
    AVAILABLE = "available"
    RESERVED = "reserved"
    SOLD = "sold"


class PlotType(str, enum.Enum):
    """Land use of a catalog plot."""
    RESIDENTIAL = "residential"
    AGRARIAN = "agrarian"
    COMMERCIAL = "commercial"


class Plot(Base):
    """
    Catalog entry shown on the public site.

    Status and type are stored as lower-cased text: imports may carry values
    outside the known enums and those are kept as given.
    """

    __tablename__ = "plots"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Plot listing title"
    )

    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Plot location/address"
    )

    price_usd: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Asking price in USD"
    )

    area_m2: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Plot area in square meters"
    )

    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=PlotStatus.AVAILABLE.value,
        index=True,
        comment="available, reserved or sold"
    )

    type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=PlotType.RESIDENTIAL.value,
        comment="residential, agrarian or commercial"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    image_url: Mapped[Optional[str]] = mapped_column(
        String(1000),
        nullable=True,
        comment="Cover image, first element of image_urls when both are set"
    )

    image_urls: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list
    )

    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    def __repr__(self) -> str:
        return f"<Plot(id={self.id}, title={self.title[:30]}, price_usd={self.price_usd})>"

    def to_dict(self) -> dict:
        """Convert plot to dictionary."""
        return {
            "id": str(self.id),
            "title": self.title,
            "location": self.location,
            "price_usd": self.price_usd,
            "area_m2": self.area_m2,
            "status": self.status,
            "type": self.type,
            "description": self.description,
            "image_url": self.image_url,
            "image_urls": list(self.image_urls or []),
            "lat": self.lat,
            "lng": self.lng,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


# Catalog listing is ordered by recency
created_index = Index(
    'idx_plots_created_at_desc',
    Plot.created_at.desc()
)
