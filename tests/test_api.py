"""Integration tests for the JSON API."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import api.health
import api.selection
from api import health_router, selection_router
from cache.selection_cache import SelectionCache, color_for
from conftest import CATALOG, FakeFetcher, make_series
from models import EntitySeries
from registry.prefecture_registry import PrefectureRegistry
from sources import DataSourceManager, NetworkError, SeriesSource, UpstreamError

pytestmark = pytest.mark.integration


class FakeSeriesSource(SeriesSource):
    def __init__(self, fetcher: FakeFetcher):
        self._fetcher = fetcher

    @property
    def name(self) -> str:
        return "Fake"

    async def fetch(self, code: int, name: str) -> EntitySeries:
        return await self._fetcher(code, name)


@pytest.fixture
def env(monkeypatch):
    fetcher = FakeFetcher()
    manager = DataSourceManager(series_source=FakeSeriesSource(fetcher))
    cache = SelectionCache(manager.fetch, CATALOG)
    registry = PrefectureRegistry()
    registry.set_entities(CATALOG)

    for module in (api.selection, api.health):
        monkeypatch.setattr(module, "selection_cache", cache)
        monkeypatch.setattr(module, "registry", registry)
        monkeypatch.setattr(module, "source_manager", manager)

    app = FastAPI()
    app.include_router(selection_router)
    app.include_router(health_router)

    with TestClient(app) as client:
        yield client, fetcher, cache, registry


def test_list_prefectures(env) -> None:
    client, *_ = env

    response = client.get("/api/prefectures")

    assert response.status_code == 200
    body = response.json()
    assert body["error"] is None
    assert body["result"][0] == {"prefCode": 1, "prefName": "北海道"}
    assert len(body["result"]) == len(CATALOG)


def test_list_prefectures_reports_catalog_failure(env, monkeypatch) -> None:
    client, *_ = env
    failed = PrefectureRegistry()
    failed._error = "Failed to fetch prefectures: 403 Forbidden"
    monkeypatch.setattr(api.selection, "registry", failed)

    response = client.get("/api/prefectures")

    assert response.status_code == 503
    assert response.json() == {"result": [], "error": "Failed to fetch prefectures: 403 Forbidden"}


def test_toggle_with_wait_caches_and_plots(env) -> None:
    client, fetcher, cache, _ = env
    fetcher.respond(7, make_series(7, "福島県", (1995, 100), (2000, 120)))

    response = client.post("/api/selection", json={"code": 7, "checked": True, "wait": True})

    assert response.status_code == 200
    assert response.json() == {
        "code": 7,
        "name": "福島県",
        "selected": True,
        "fetching": False,
        "cached": True,
        "color": color_for(7),
    }

    chart = client.get("/api/chart").json()
    assert chart["series"] == [{"name": "福島県", "data": [[1995, 100], [2000, 120]], "color": color_for(7)}]
    assert chart["options"]["xAxis"]["min"] == 1995
    assert chart["options"]["empty"] is False

    table = client.get("/api/chart/table").json()
    assert table == {"years": [1995, 2000], "columns": {"福島県": [100, 120]}}


def test_toggle_without_wait_is_optimistic(env) -> None:
    client, fetcher, _, _ = env
    fetcher.respond(1, make_series(1, "北海道", (2000, 1)))

    body = client.post("/api/selection", json={"code": 1, "checked": True}).json()

    assert body["selected"] is True
    assert body["fetching"] is True
    assert body["cached"] is False


def test_failed_fetch_unchecks(env) -> None:
    client, fetcher, _, _ = env
    fetcher.respond(13, NetworkError("down"))

    body = client.post("/api/selection", json={"code": 13, "checked": True, "wait": True}).json()

    assert body["selected"] is False
    assert body["cached"] is False
    assert client.get("/api/selection").json() == {"selected": [], "fetching": []}


def test_toggle_off_removes_series(env) -> None:
    client, fetcher, _, _ = env
    fetcher.respond(2, make_series(2, "青森県", (2000, 3)))
    client.post("/api/selection", json={"code": 2, "checked": True, "wait": True})

    body = client.post("/api/selection", json={"code": 2, "checked": False}).json()

    assert body["selected"] is False
    assert body["cached"] is False
    chart = client.get("/api/chart").json()
    assert chart["series"] == []
    assert chart["options"]["empty"] is True


def test_selection_lists_selected_with_color(env) -> None:
    client, fetcher, _, _ = env
    fetcher.respond(1, make_series(1, "北海道", (2000, 1)))
    client.post("/api/selection", json={"code": 1, "checked": True, "wait": True})

    assert client.get("/api/selection").json() == {
        "selected": [{
            "prefCode": 1,
            "prefName": "北海道",
            "color": color_for(1),
            "fetching": False,
            "cached": True,
        }],
        "fetching": [],
    }


def test_clear_selection(env) -> None:
    client, fetcher, cache, _ = env
    fetcher.respond(1, make_series(1, "北海道", (2000, 1)))
    client.post("/api/selection", json={"code": 1, "checked": True, "wait": True})

    assert client.delete("/api/selection").json() == {"selected": [], "fetching": []}
    assert cache.cached_codes() == set()


def test_toggle_unknown_code_is_404(env) -> None:
    client, fetcher, _, _ = env

    response = client.post("/api/selection", json={"code": 99, "checked": True})

    assert response.status_code == 404
    assert fetcher.calls == []


def test_population_proxy(env) -> None:
    client, fetcher, cache, _ = env
    fetcher.respond(13, make_series(13, "東京都", (2010, 5), (2015, 6)))

    response = client.get("/api/population", params={"prefCode": 13})

    assert response.status_code == 200
    assert response.json() == {
        "prefCode": 13,
        "prefName": "東京都",
        "data": [{"year": 2010, "value": 5}, {"year": 2015, "value": 6}],
    }
    assert cache.cached_codes() == set()


def test_population_proxy_maps_fetch_errors(env) -> None:
    client, fetcher, _, _ = env
    fetcher.respond(13, UpstreamError("MLIT API error (500)", status_code=500))
    fetcher.respond(1, UpstreamError("rate limited", status_code=429))

    assert client.get("/api/population", params={"prefCode": 13}).status_code == 502
    assert client.get("/api/population", params={"prefCode": 1}).status_code == 429
    assert client.get("/api/population", params={"prefCode": 99}).status_code == 404


def test_health_and_status(env) -> None:
    client, *_ = env

    assert client.get("/health").json()["status"] == "healthy"

    status = client.get("/api/status").json()
    assert status["status"] == "healthy"
    assert status["catalog"] == {"loaded": True, "count": len(CATALOG), "error": None}
    assert status["data_sources"]["series"]["name"] == "Fake"
    assert status["selection"]["selected"] == 0
