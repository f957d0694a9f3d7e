"""
RESAS Catalog Source - Prefecture list.

Loaded once at startup; the selection list is built from it.
"""

import logging
from typing import List, Optional

import httpx

from config import config
from models import Entity
from .base import CatalogSource, CatalogError
from .client import get_async_client, auth_headers


logger = logging.getLogger(__name__)


def parse_prefectures(payload) -> List[Entity]:
    """
    Convert a RESAS `{"result": [{"prefCode", "prefName"}]}` body to entities.

    Entries without an integer code or a name are skipped.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get('result'), list):
        raise CatalogError("Invalid API response structure: missing 'result' array.")

    entities = []
    for item in payload['result']:
        if not isinstance(item, dict):
            continue
        code = item.get('prefCode')
        name = item.get('prefName')
        if isinstance(code, bool) or not isinstance(code, int) or not isinstance(name, str):
            logger.warning(f"[RESAS] Skipping malformed prefecture entry: {item!r}")
            continue
        entities.append(Entity(code=code, name=name))
    return entities


class ResasCatalogSource(CatalogSource):
    """Catalog source for the RESAS prefecture list."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key if api_key is not None else config.resas_api_key
        self._url = url or config.catalog_api_url
        self._client = client

    @property
    def name(self) -> str:
        return "RESAS"

    async def fetch_catalog(self) -> List[Entity]:
        client = self._client or get_async_client()
        logger.info(f"[RESAS] Fetching prefectures from {self._url}")

        try:
            resp = await client.get(self._url, headers=auth_headers(self._api_key))
        except httpx.HTTPError as e:
            raise CatalogError(f"Failed to fetch prefectures: {e}") from e

        if resp.status_code >= 400:
            raise CatalogError(f"Failed to fetch prefectures: {resp.status_code} {resp.reason_phrase}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise CatalogError("Prefecture list is not valid JSON") from e

        return parse_prefectures(payload)

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
