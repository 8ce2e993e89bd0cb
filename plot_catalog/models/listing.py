"""
UserListing model for listings proposed by end users.
Submissions wait in moderation until an admin approves or rejects them.
"""

from sqlalchemy import String, Text, Float, JSON, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from plot_catalog.database import Base
from plot_catalog.models.plot import PlotType
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from plot_catalog.models.user import User


class DealType(str, enum.Enum):
    """Whether the owner wants to sell or rent."""
    SALE = "sale"
    RENT = "rent"


class ListingStatus(str, enum.Enum):
    """Moderation state of a user submission."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserListing(Base):
    """User-submitted listing pending moderation."""

    __tablename__ = "user_listings"

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    location: Mapped[str] = mapped_column(String(255), nullable=False)

    price_usd: Mapped[float] = mapped_column(Float, nullable=False)

    area_m2: Mapped[float] = mapped_column(Float, nullable=False)

    type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=PlotType.RESIDENTIAL.value
    )

    deal_type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=DealType.SALE.value,
        comment="sale or rent"
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    image_urls: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Public URLs of photos stored under this listing's namespace"
    )

    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ListingStatus.PENDING.value,
        index=True
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="listings",
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<UserListing(id={self.id}, status={self.status}, title={self.title[:30]})>"

    @property
    def deal_tag(self) -> str:
        """Bracketed tag prefixed to the catalog description on approval."""
        return "[Arriendo]" if self.deal_type == DealType.RENT.value else "[Venta]"

    def to_dict(self) -> dict:
        """Convert listing to dictionary."""
        return {
            "id": str(self.id),
            "title": self.title,
            "location": self.location,
            "price_usd": self.price_usd,
            "area_m2": self.area_m2,
            "type": self.type,
            "deal_type": self.deal_type,
            "description": self.description,
            "image_urls": list(self.image_urls or []),
            "lat": self.lat,
            "lng": self.lng,
            "status": self.status,
            "user_id": str(self.user_id),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


# Moderation queue ordering
status_created_index = Index(
    'idx_user_listings_status_created',
    UserListing.status,
    UserListing.created_at.desc()
)
