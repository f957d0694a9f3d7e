"""
PrefStats - Centralized Configuration

All environment variables, constants, and settings in one place.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


@dataclass
class Config:
    """Application configuration loaded from environment."""

    # API Keys (shared by the catalog and population endpoints)
    resas_api_key: Optional[str] = None

    # Upstream endpoints
    population_api_url: str = 'https://api.mlit.go.jp/datacore/opendata/v1/mlit/np-2410-pop_concentration_area'
    catalog_api_url: str = 'https://opendata.resas-portal.go.jp/api/v1/prefectures'

    # HTTP settings
    http_timeout: float = 15.0
    max_connections: int = 20

    log_level: str = 'INFO'
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        defaults = cls()
        return cls(
            resas_api_key=os.environ.get('RESAS_API_KEY'),
            population_api_url=os.environ.get('POPULATION_API_URL', defaults.population_api_url),
            catalog_api_url=os.environ.get('CATALOG_API_URL', defaults.catalog_api_url),
            http_timeout=float(os.environ.get('HTTP_TIMEOUT', defaults.http_timeout)),
            max_connections=int(os.environ.get('HTTP_MAX_CONNECTIONS', defaults.max_connections)),
            log_level=os.environ.get('LOG_LEVEL', defaults.log_level).upper(),
            cors_origins=_split_origins(os.environ.get('CORS_ORIGINS', '')) or defaults.cors_origins,
        )


# Global config instance
config = Config.from_env()


# Chart defaults (census years come every 5 years)
DEFAULT_YEAR_MIN = 1960
DEFAULT_YEAR_MAX = 2025
YEAR_TICK_INTERVAL = 5

CHART_TITLE = '人口集中地区（DID）の人口推移'
X_AXIS_TITLE = '基準年 (国勢調査)'
Y_AXIS_TITLE = '人口集中地区人口'
