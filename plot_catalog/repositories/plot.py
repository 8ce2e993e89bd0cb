"""
Plot repository for the public catalog.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from plot_catalog.repositories.base import BaseRepository
from plot_catalog.models.plot import Plot
from typing import List, Dict, Any
import logging

logger = logging.getLogger(__name__)


class PlotRepository(BaseRepository[Plot]):
    """Repository for catalog plots."""

    def __init__(self, db: AsyncSession):
        super().__init__(Plot, db)

    async def list_recent(self) -> List[Plot]:
        """All plots, most recent first."""
        return await self.get_multi()

    async def create_many(self, plots_data: List[Dict[str, Any]]) -> int:
        """
        Insert a batch of sanitized plots in one transaction.

        Returns:
            Number of rows persisted
        """
        created = await self.bulk_create(plots_data)
        logger.info(f"Inserted {len(created)} plots")
        return len(created)
