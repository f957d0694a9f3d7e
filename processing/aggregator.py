"""
Feature Aggregator - Raw geospatial features -> yearly series.

Upstream population-concentration data arrives as GeoJSON-like features,
one per district, with loosely typed properties. Districts of the same
prefecture are reported separately, so values are summed per year.

Malformed records are dropped, never raised: partial upstream data must
not fail the whole aggregation. The number of dropped records is returned
alongside the points for diagnostics.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Protocol, Tuple

from models import SeriesPoint


# MLIT "National Land Numerical Information" property keys
NAME_FIELD = 'N03_001'    # Prefecture name
VALUE_FIELD = 'N03_004'   # Population of the district
YEAR_FIELD = 'N03_007'    # Census base year

_LEADING_INT = re.compile(r'\s*([+-]?\d+)', re.ASCII)


def parse_int(raw: Any) -> Optional[int]:
    """
    Parse a loosely typed field as an integer.

    Accepts ints, finite floats (truncated) and strings that start with an
    integer ("2015", " 42 ", "12abc"). Returns None for anything else.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if math.isnan(raw) or math.isinf(raw):
            return None
        return int(raw)

    match = _LEADING_INT.match(str(raw))
    if not match:
        return None
    return int(match.group(1))


class RawFeatureReader(Protocol):
    """Adapter over one upstream record; each accessor returns None if unusable."""

    def entity_name(self) -> Optional[str]: ...

    def year(self) -> Optional[int]: ...

    def value(self) -> Optional[int]: ...


class MlitFeatureReader:
    """Reads MLIT population-concentration features (`properties.N03_*`)."""

    def __init__(self, feature: Any):
        properties = feature.get('properties') if isinstance(feature, Mapping) else None
        self._properties: Mapping = properties if isinstance(properties, Mapping) else {}

    def entity_name(self) -> Optional[str]:
        name = self._properties.get(NAME_FIELD)
        return name if isinstance(name, str) else None

    def year(self) -> Optional[int]:
        return parse_int(self._properties.get(YEAR_FIELD))

    def value(self) -> Optional[int]:
        return parse_int(self._properties.get(VALUE_FIELD))


@dataclass(frozen=True)
class AggregationResult:
    """Aggregated points plus diagnostics."""

    points: Tuple[SeriesPoint, ...]
    matched: int = 0
    dropped: int = 0


def aggregate_features(
    records: Iterable[Any],
    target_name: str,
    reader: Callable[[Any], RawFeatureReader] = MlitFeatureReader,
) -> AggregationResult:
    """
    Build a year-sorted series for one entity from raw feature records.

    Args:
        records: Raw upstream features
        target_name: Entity name to keep (exact match, no normalization)
        reader: Factory wrapping each record in a RawFeatureReader

    Returns:
        AggregationResult with one point per distinct year, ascending.
        Empty points if nothing matched or nothing parsed.
    """
    totals: Dict[int, int] = {}
    matched = 0
    dropped = 0

    for record in records:
        feature = reader(record)
        if feature.entity_name() != target_name:
            continue
        matched += 1

        year = feature.year()
        value = feature.value()
        if year is None or value is None:
            dropped += 1
            continue

        totals[year] = totals.get(year, 0) + value

    points = tuple(SeriesPoint(year=year, value=totals[year]) for year in sorted(totals))
    return AggregationResult(points=points, matched=matched, dropped=dropped)


def aggregate_series(
    records: Iterable[Any],
    target_name: str,
    reader: Callable[[Any], RawFeatureReader] = MlitFeatureReader,
) -> Tuple[SeriesPoint, ...]:
    """Same as aggregate_features, points only."""
    return aggregate_features(records, target_name, reader).points
