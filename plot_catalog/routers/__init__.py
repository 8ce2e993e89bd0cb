"""
API route handlers for the Plot Catalog API.
"""

from .auth import router as auth_router
from .plots import router as plots_router
from .listings import router as listings_router
from .geocode import router as geocode_router, admin_router as admin_geocode_router
from .admin_plots import router as admin_plots_router
from .admin_listings import router as admin_listings_router

__all__ = [
    "auth_router",
    "plots_router",
    "listings_router",
    "geocode_router",
    "admin_geocode_router",
    "admin_plots_router",
    "admin_listings_router"
]
