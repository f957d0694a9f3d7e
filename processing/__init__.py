"""Processing module - Feature aggregation and chart formatting."""

from .aggregator import (
    aggregate_features,
    aggregate_series,
    parse_int,
    AggregationResult,
    RawFeatureReader,
    MlitFeatureReader,
)
from .formatter import format_chart, format_chart_table, chart_frame, year_bounds

__all__ = [
    'aggregate_features',
    'aggregate_series',
    'parse_int',
    'AggregationResult',
    'RawFeatureReader',
    'MlitFeatureReader',
    'format_chart',
    'format_chart_table',
    'chart_frame',
    'year_bounds',
]
