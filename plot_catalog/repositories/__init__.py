"""
Repository layer for data access operations.
"""

from plot_catalog.repositories.base import BaseRepository
from plot_catalog.repositories.plot import PlotRepository
from plot_catalog.repositories.listing import ListingRepository
from plot_catalog.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PlotRepository",
    "ListingRepository",
    "UserRepository"
]
