"""
Plot Catalog API: land plot catalog with user submissions and admin moderation.
"""

__version__ = "1.0.0"
