"""
Selection API Endpoints

Catalog, per-prefecture population proxy, selection toggling and the
derived chart payload.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from cache import selection_cache
from processing import format_chart, format_chart_table
from registry import registry
from sources import FetchError, UpstreamError, source_manager


logger = logging.getLogger(__name__)

selection_router = APIRouter()


# =============================================================================
# PYDANTIC MODELS FOR JSON API
# =============================================================================

class PrefectureResponse(BaseModel):
    """Catalog entry, in the upstream field naming."""
    prefCode: int
    prefName: str


class PrefectureListResponse(BaseModel):
    result: List[PrefectureResponse]
    error: Optional[str] = None


class PopulationValue(BaseModel):
    year: int
    value: int


class PopulationResponse(BaseModel):
    prefCode: int
    prefName: str
    data: List[PopulationValue]


class ToggleRequest(BaseModel):
    """Checkbox change. `wait` holds the response until the fetch settles."""
    code: int
    checked: bool
    wait: bool = False


class SelectedPrefecture(BaseModel):
    prefCode: int
    prefName: str
    color: str
    fetching: bool
    cached: bool


class SelectionResponse(BaseModel):
    selected: List[SelectedPrefecture]
    fetching: List[int]


class ToggleResponse(BaseModel):
    code: int
    name: str
    selected: bool
    fetching: bool
    cached: bool
    color: str


class ChartSeriesResponse(BaseModel):
    name: str
    data: List[List[int]]
    color: str


class ChartResponse(BaseModel):
    series: List[ChartSeriesResponse]
    options: dict


# =============================================================================
# HELPERS
# =============================================================================

def _require_prefecture(code: int):
    entity = registry.get(code)
    if entity is None:
        raise HTTPException(status_code=404, detail=f"Unknown prefecture code {code}")
    return entity


def _selection_payload() -> SelectionResponse:
    selected = [
        SelectedPrefecture(
            prefCode=entity.code,
            prefName=entity.name,
            color=color,
            fetching=selection_cache.is_fetching(entity.code),
            cached=selection_cache.get_series(entity.code) is not None,
        )
        for entity, color in selection_cache.selected_with_color()
    ]
    fetching = sorted(code for code, busy in selection_cache.fetch_status().items() if busy)
    return SelectionResponse(selected=selected, fetching=fetching)


# =============================================================================
# ENDPOINTS
# =============================================================================

@selection_router.get("/api/prefectures", response_model=PrefectureListResponse)
async def list_prefectures():
    """Selectable prefectures. 503 if the catalog failed to load at startup."""
    if registry.error:
        return JSONResponse(
            status_code=503,
            content={"result": [], "error": registry.error},
        )
    return PrefectureListResponse(
        result=[PrefectureResponse(prefCode=e.code, prefName=e.name) for e in registry.entities]
    )


@selection_router.get("/api/population", response_model=PopulationResponse)
async def get_population(prefCode: int = Query(..., description="Prefecture code")):
    """Fetch one prefecture's series directly from the upstream source."""
    entity = _require_prefecture(prefCode)

    try:
        series = await source_manager.fetch(entity.code, entity.name)
    except FetchError as e:
        status = 502
        if isinstance(e, UpstreamError) and e.status_code == 429:
            status = 429
        raise HTTPException(status_code=status, detail=str(e))

    return PopulationResponse(
        prefCode=series.code,
        prefName=series.name,
        data=[PopulationValue(year=p.year, value=p.value) for p in series.points],
    )


@selection_router.get("/api/selection", response_model=SelectionResponse)
async def get_selection():
    return _selection_payload()


@selection_router.post("/api/selection", response_model=ToggleResponse)
async def toggle_selection(request: ToggleRequest):
    """
    Check or uncheck a prefecture.

    The selection changes immediately; data is fetched in the background.
    A failed or empty fetch unchecks the prefecture again.
    """
    entity = _require_prefecture(request.code)
    selection_cache.toggle(entity.code, request.checked, entity.name)

    if request.wait:
        await selection_cache.wait_idle()

    return ToggleResponse(
        code=entity.code,
        name=entity.name,
        selected=selection_cache.is_selected(entity.code),
        fetching=selection_cache.is_fetching(entity.code),
        cached=selection_cache.get_series(entity.code) is not None,
        color=selection_cache.color_for(entity.code),
    )


@selection_router.delete("/api/selection")
async def clear_selection():
    """Uncheck everything."""
    selection_cache.clear()
    return _selection_payload()


@selection_router.get("/api/chart", response_model=ChartResponse)
async def get_chart():
    """Lines for every selected prefecture whose data has arrived."""
    series = selection_cache.chart_series()
    return ChartResponse(
        series=[ChartSeriesResponse(**s.to_dict()) for s in series],
        options=format_chart(series),
    )


@selection_router.get("/api/chart/table")
async def get_chart_table():
    """Year x prefecture table of the plotted values."""
    return JSONResponse(format_chart_table(selection_cache.chart_series()))
