"""
Service layer for business logic implementation.
"""

from .auth import AuthService
from .plot import PlotService
from .listing import ListingService
from .moderation import ModerationService
from .geocoding import GeocodingService
from .storage import PhotoStorage
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PlotService",
    "ListingService",
    "ModerationService",
    "GeocodingService",
    "PhotoStorage",
    "ErrorHandlerService"
]
