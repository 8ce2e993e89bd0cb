"""
Database models for the Plot Catalog API.
Includes User, Plot and UserListing models.
"""

from plot_catalog.models.user import User
from plot_catalog.models.plot import Plot, PlotStatus, PlotType
from plot_catalog.models.listing import UserListing, DealType, ListingStatus

__all__ = [
    "User",
    "Plot",
    "PlotStatus",
    "PlotType",
    "UserListing",
    "DealType",
    "ListingStatus",
]
