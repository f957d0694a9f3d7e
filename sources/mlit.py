"""
MLIT Data Source - Population of Densely Inhabited Districts.

Fetches population-concentration features from the MLIT DATA PLATFORM and
shapes them into one yearly series per prefecture. The API key stays on
the server; clients never see it.
"""

import logging
from typing import Optional

import httpx

from config import config
from models import EntitySeries
from processing.aggregator import aggregate_features
from .base import SeriesSource, NetworkError, UpstreamError, ParseError
from .client import get_async_client, auth_headers


logger = logging.getLogger(__name__)


class MlitPopulationSource(SeriesSource):
    """Data source for MLIT population-concentration area data."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key if api_key is not None else config.resas_api_key
        self._base_url = base_url or config.population_api_url
        self._client = client

    @property
    def name(self) -> str:
        return "MLIT DATA PLATFORM"

    @property
    def available(self) -> bool:
        return bool(self._api_key)

    async def fetch(self, code: int, name: str) -> EntitySeries:
        """Fetch and aggregate the DID population series for one prefecture."""
        if not self._api_key:
            raise UpstreamError("MLIT API key not configured")

        client = self._client or get_async_client()
        logger.info(f"[MLIT] Fetching population for {name} ({code})")

        try:
            resp = await client.get(
                self._base_url,
                params={'prefCode': code},
                headers=auth_headers(self._api_key),
            )
        except httpx.TimeoutException as e:
            raise NetworkError(f"MLIT request timed out for {name} ({code}): {e}") from e
        except httpx.TransportError as e:
            raise NetworkError(f"MLIT request failed for {name} ({code}): {e}") from e

        # Check HTTP status codes BEFORE parsing JSON
        if resp.status_code >= 400:
            raise UpstreamError(
                f"MLIT API error ({resp.status_code}) for {name} ({code})",
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise ParseError(f"MLIT returned invalid JSON for {name} ({code})") from e

        if not isinstance(payload, dict):
            raise ParseError(f"MLIT returned unexpected payload type {type(payload).__name__}")

        features = payload.get('features')
        if not isinstance(features, list):
            # No features means nothing to plot, not a failure of the request
            return EntitySeries(code=code, name=name)

        result = aggregate_features(features, name)
        if result.dropped:
            logger.debug(
                f"[MLIT] {name}: dropped {result.dropped} of {result.matched} "
                f"matching features with unparseable year/value"
            )

        return EntitySeries(code=code, name=name, points=result.points)

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
