"""
Prefecture Registry - The selectable entity list.

Loaded once at startup from the catalog source. If the catalog cannot be
loaded, the registry stays empty and remembers the error so the API can
report it instead of offering an empty list as if nothing were wrong.
"""

import logging
from typing import Dict, Iterable, List, Optional

from models import Entity
from sources import CatalogError, source_manager


logger = logging.getLogger(__name__)


class PrefectureRegistry:
    """Catalog of selectable prefectures, indexed by code."""

    def __init__(self):
        self._entities: List[Entity] = []
        self._by_code: Dict[int, Entity] = {}
        self._error: Optional[str] = None
        self._loaded = False

    async def load(self, manager=None) -> None:
        """Load the catalog. Never raises; failures set `error`."""
        manager = manager or source_manager
        try:
            entities = await manager.fetch_catalog()
        except CatalogError as e:
            logger.error(f"[Registry] Failed to load prefectures: {e}")
            self._set(())
            self._error = str(e)
            self._loaded = True
            return

        self._set(entities)
        self._error = None
        self._loaded = True
        logger.info(f"[Registry] Loaded {len(self._entities)} prefectures")

    def set_entities(self, entities: Iterable[Entity]) -> None:
        """Replace the catalog directly (used for static catalogs and tests)."""
        self._set(entities)
        self._error = None
        self._loaded = True

    def _set(self, entities: Iterable[Entity]) -> None:
        self._entities = list(entities)
        self._by_code = {entity.code: entity for entity in self._entities}

    @property
    def entities(self) -> List[Entity]:
        return list(self._entities)

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def available(self) -> bool:
        return self._loaded and self._error is None

    def get(self, code: int) -> Optional[Entity]:
        return self._by_code.get(code)

    def __len__(self) -> int:
        return len(self._entities)

    def stats(self) -> dict:
        return {
            'loaded': self._loaded,
            'count': len(self._entities),
            'error': self._error,
        }


# Global registry instance
registry = PrefectureRegistry()
