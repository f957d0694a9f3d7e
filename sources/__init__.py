"""Data sources module - Unified interface for all data providers."""

from .base import (
    SeriesSource,
    CatalogSource,
    DataSourceError,
    CatalogError,
    FetchError,
    NetworkError,
    UpstreamError,
    ParseError,
)
from .mlit import MlitPopulationSource
from .resas import ResasCatalogSource, parse_prefectures
from .manager import DataSourceManager, source_manager

__all__ = [
    'SeriesSource',
    'CatalogSource',
    'DataSourceError',
    'CatalogError',
    'FetchError',
    'NetworkError',
    'UpstreamError',
    'ParseError',
    'MlitPopulationSource',
    'ResasCatalogSource',
    'parse_prefectures',
    'DataSourceManager',
    'source_manager',
]
