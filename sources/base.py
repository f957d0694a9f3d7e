"""
Shared types and abstract interfaces for all data sources.

Every source speaks in terms of Entity (a selectable prefecture) and
EntitySeries (its year-sorted history). Adding a new upstream means
implementing one of the ABCs below.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from models import Entity, EntitySeries


# =============================================================================
# ERRORS
# =============================================================================

class DataSourceError(Exception):
    """Base class for upstream data failures."""


class CatalogError(DataSourceError):
    """The entity list could not be loaded."""


class FetchError(DataSourceError):
    """Series data for one entity could not be loaded."""


class NetworkError(FetchError):
    """Transport failure or timeout talking to the upstream service."""


class UpstreamError(FetchError):
    """The upstream service answered, but with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(FetchError):
    """The upstream response could not be decoded."""


# =============================================================================
# INTERFACES
# =============================================================================

class SeriesSource(ABC):
    """Abstract base class for per-entity series sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this data source."""
        pass

    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    async def fetch(self, code: int, name: str) -> EntitySeries:
        """
        Fetch the series for a single entity.

        Args:
            code: Catalog code of the entity
            name: Display name, used to pick the entity's records upstream

        Returns:
            EntitySeries, possibly with no points if nothing matched

        Raises:
            FetchError: NetworkError, UpstreamError or ParseError
        """
        pass

    async def close(self) -> None:
        """Release any pooled connections."""
        return None


class CatalogSource(ABC):
    """Abstract base class for entity catalog sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def fetch_catalog(self) -> List[Entity]:
        """
        Fetch the full list of selectable entities.

        Raises:
            CatalogError: if the list is unavailable or malformed
        """
        pass

    async def close(self) -> None:
        return None
