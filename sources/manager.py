"""
Data Source Manager - Single entry point for upstream data.

Provides the two capabilities the rest of the app consumes:
fetch(code, name) for one prefecture's series, and fetch_catalog()
for the prefecture list.
"""

import logging
from typing import List, Optional

from models import Entity, EntitySeries
from .base import SeriesSource, CatalogSource, FetchError
from .mlit import MlitPopulationSource
from .resas import ResasCatalogSource
from .client import close_async_client


logger = logging.getLogger(__name__)


class DataSourceManager:
    """
    Routes requests to the configured sources.

    Holds no data itself; per-entity caching lives in the selection cache.
    """

    def __init__(
        self,
        series_source: Optional[SeriesSource] = None,
        catalog_source: Optional[CatalogSource] = None,
    ):
        self._series_source = series_source or MlitPopulationSource()
        self._catalog_source = catalog_source or ResasCatalogSource()

    @property
    def series_source(self) -> SeriesSource:
        return self._series_source

    @property
    def catalog_source(self) -> CatalogSource:
        return self._catalog_source

    async def fetch(self, code: int, name: str) -> EntitySeries:
        """
        Fetch one entity's series.

        Raises:
            FetchError: propagated from the source for the caller to handle
        """
        try:
            series = await self._series_source.fetch(code, name)
        except FetchError as e:
            logger.warning(f"[Sources] {self._series_source.name} failed for {name} ({code}): {e}")
            raise

        logger.info(f"[Sources] {name} ({code}): {len(series.points)} points")
        return series

    async def fetch_catalog(self) -> List[Entity]:
        """Fetch the entity list. Raises CatalogError."""
        return await self._catalog_source.fetch_catalog()

    def available_sources(self) -> dict:
        """Get status of the registered data sources."""
        return {
            'series': {'name': self._series_source.name, 'available': self._series_source.available},
            'catalog': {'name': self._catalog_source.name},
        }

    async def close(self) -> None:
        await self._series_source.close()
        await self._catalog_source.close()
        await close_async_client()


# Global instance
source_manager = DataSourceManager()
