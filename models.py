"""
Shared data types.

Entity is a selectable prefecture; EntitySeries is its resolved,
year-sorted history. Both are immutable once built.
"""

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Entity:
    """A selectable item from the catalog."""

    code: int
    name: str


@dataclass(frozen=True)
class SeriesPoint:
    """One value for one year."""

    year: int
    value: int


@dataclass(frozen=True)
class EntitySeries:
    """Resolved history for one entity, strictly ascending by year."""

    code: int
    name: str
    points: Tuple[SeriesPoint, ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.points) == 0

    @property
    def years(self) -> List[int]:
        return [p.year for p in self.points]

    def as_pairs(self) -> List[Tuple[int, int]]:
        """Points as (year, value) tuples, ready for charting."""
        return [(p.year, p.value) for p in self.points]
