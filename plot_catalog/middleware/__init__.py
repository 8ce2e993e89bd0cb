"""
Middleware package for the Plot Catalog API.
"""

from .request import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
