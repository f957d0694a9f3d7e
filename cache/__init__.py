"""Cache module - Per-prefecture selection state and fetched series."""

from sources import source_manager
from .selection_cache import (
    SelectionCache,
    EntityState,
    ChartSeries,
    PALETTE,
    color_for,
)

# Global selection cache, fed by the upstream sources
selection_cache = SelectionCache(source_manager.fetch)

__all__ = [
    'SelectionCache',
    'EntityState',
    'ChartSeries',
    'PALETTE',
    'color_for',
    'selection_cache',
]
