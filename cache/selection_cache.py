"""
Selection Cache - Which prefectures are shown, and their fetched data.

One record per prefecture code:

  selected        what the user asked for (updated optimistically)
  series          fetched EntitySeries, present only while selected
  epoch           generation counter, bumped on deselect and on fetch start
  inflight_epoch  epoch of the outstanding fetch, if any

State per code:

  unselected --toggle(on)--> pending        [fetch starts]
  pending --success(points>0)--> cached
  pending --failure/empty--> unselected     [rollback]
  cached --toggle(off)--> unselected        [series evicted]
  pending --toggle(off)--> unselected       [series evicted, late result discarded]

A fetch only writes back if the epoch it captured is still current, so a
result that lands after the user toggled off (and maybe on again) can
never resurrect stale data or roll back a newer selection.

Everything runs on one asyncio loop; mutations for a code never interleave
with each other because there is no await between read and write.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Set, Tuple

from models import Entity, EntitySeries


logger = logging.getLogger(__name__)


FetchFn = Callable[[int, str], Awaitable[EntitySeries]]


# Line colors, cycled by prefecture code
PALETTE: Tuple[str, ...] = (
    '#E53935',  # Red
    '#43A047',  # Green
    '#1E88E5',  # Blue
    '#FFB300',  # Yellow
    '#8E24AA',  # Purple
    '#00ACC1',  # Cyan
    '#F4511E',  # Orange
    '#6D4C41',  # Brown
    '#546E7A',  # Slate
    '#D81B60',  # Pink
)


def color_for(code: int, palette: Tuple[str, ...] = PALETTE) -> str:
    """Color for a prefecture code. Codes are 1-based; colors repeat every len(palette)."""
    return palette[(code - 1) % len(palette)]


@dataclass
class EntityState:
    """Everything known about one code."""

    selected: bool = False
    series: Optional[EntitySeries] = None
    epoch: int = 0
    inflight_epoch: Optional[int] = None

    @property
    def fetching(self) -> bool:
        return self.inflight_epoch is not None


@dataclass
class ChartSeries:
    """One plotted line."""

    name: str
    points: List[Tuple[int, int]]
    color: str

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'data': [list(p) for p in self.points],
            'color': self.color,
        }


@dataclass
class SelectionStats:
    fetches_started: int = 0
    fetch_failures: int = 0
    stale_results: int = 0


class SelectionCache:
    """
    Owns selection state, in-flight fetches and fetched series.

    Args:
        fetch: async (code, name) -> EntitySeries; may raise
        catalog: entities in display order
        palette: line colors
    """

    def __init__(
        self,
        fetch: FetchFn,
        catalog: Iterable[Entity] = (),
        palette: Tuple[str, ...] = PALETTE,
    ):
        self._fetch = fetch
        self._catalog: List[Entity] = list(catalog)
        self._palette = palette
        self._states: Dict[int, EntityState] = {}
        self._tasks: Set[asyncio.Task] = set()
        self._stats = SelectionStats()

    # =========================================================================
    # Mutation
    # =========================================================================

    def toggle(self, code: int, checked: bool, name: str) -> Optional[asyncio.Task]:
        """
        Select or deselect a prefecture.

        The selection flag changes immediately. Selecting an uncached code
        with no current fetch outstanding schedules a fetch on the running
        loop and returns its task; every other case returns None.

        Raises:
            RuntimeError: when selecting outside a running event loop
        """
        loop = asyncio.get_running_loop() if checked else None

        state = self._state(code)
        state.selected = checked

        if not checked:
            state.series = None
            state.epoch += 1
            return None

        if state.series is not None:
            return None

        if state.inflight_epoch is not None and state.inflight_epoch == state.epoch:
            return None

        state.epoch += 1
        state.inflight_epoch = state.epoch
        self._stats.fetches_started += 1

        task = loop.create_task(self._run_fetch(code, name, state.epoch))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def clear(self) -> None:
        """Deselect everything; outstanding fetches will be discarded."""
        for state in self._states.values():
            state.selected = False
            state.series = None
            state.epoch += 1

    def set_catalog(self, catalog: Iterable[Entity]) -> None:
        self._catalog = list(catalog)

    async def wait_idle(self) -> None:
        """Wait until every outstanding fetch has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run_fetch(self, code: int, name: str, epoch: int) -> None:
        try:
            series = await self._fetch(code, name)
        except Exception as e:
            self._settle_failure(code, name, epoch, e)
        else:
            if series is None or series.is_empty:
                self._settle_failure(code, name, epoch, None)
            else:
                self._settle_success(code, name, epoch, series)
        finally:
            state = self._states.get(code)
            if state is not None and state.inflight_epoch == epoch:
                state.inflight_epoch = None

    def _is_current(self, code: int, epoch: int) -> bool:
        state = self._states.get(code)
        return state is not None and state.epoch == epoch

    def _settle_success(self, code: int, name: str, epoch: int, series: EntitySeries) -> None:
        if not self._is_current(code, epoch):
            self._stats.stale_results += 1
            logger.debug(f"[Selection] Discarding stale result for {name} ({code})")
            return
        self._states[code].series = series

    def _settle_failure(self, code: int, name: str, epoch: int, error: Optional[Exception]) -> None:
        self._stats.fetch_failures += 1
        if not self._is_current(code, epoch):
            self._stats.stale_results += 1
            logger.debug(f"[Selection] Ignoring stale failure for {name} ({code})")
            return

        if error is None:
            logger.warning(f"[Selection] No data returned for {name} ({code}); deselecting")
        else:
            logger.warning(f"[Selection] Fetch failed for {name} ({code}): {error}; deselecting")
        self._states[code].selected = False

    def _state(self, code: int) -> EntityState:
        state = self._states.get(code)
        if state is None:
            state = self._states[code] = EntityState()
        return state

    # =========================================================================
    # Queries
    # =========================================================================

    def color_for(self, code: int) -> str:
        return color_for(code, self._palette)

    def is_selected(self, code: int) -> bool:
        state = self._states.get(code)
        return state is not None and state.selected

    def is_fetching(self, code: int) -> bool:
        state = self._states.get(code)
        return state is not None and state.fetching

    def get_series(self, code: int) -> Optional[EntitySeries]:
        state = self._states.get(code)
        return state.series if state is not None else None

    def selection(self) -> Dict[int, bool]:
        return {code: state.selected for code, state in self._states.items()}

    def fetch_status(self) -> Dict[int, bool]:
        return {code: state.fetching for code, state in self._states.items()}

    def cached_codes(self) -> Set[int]:
        return {code for code, state in self._states.items() if state.series is not None}

    @property
    def catalog(self) -> List[Entity]:
        return list(self._catalog)

    def selected_entities(self) -> List[Entity]:
        """Selected catalog entries, in catalog order."""
        return [entity for entity in self._catalog if self.is_selected(entity.code)]

    def selected_with_color(self) -> List[Tuple[Entity, str]]:
        return [(entity, self.color_for(entity.code)) for entity in self.selected_entities()]

    def chart_series(self) -> List[ChartSeries]:
        """
        Lines to plot: selected codes with fetched data.

        Catalog order first, then selected codes missing from the catalog
        by ascending code. Pending or failed codes are left out.
        """
        catalog_codes = [entity.code for entity in self._catalog]
        known = set(catalog_codes)
        extra = sorted(code for code in self._states if code not in known)

        result = []
        for code in catalog_codes + extra:
            state = self._states.get(code)
            if state is None or not state.selected or state.series is None:
                continue
            result.append(ChartSeries(
                name=state.series.name,
                points=state.series.as_pairs(),
                color=self.color_for(code),
            ))
        return result

    def stats(self) -> dict:
        """Get selection statistics."""
        states = self._states.values()
        return {
            'selected': sum(1 for s in states if s.selected),
            'cached': sum(1 for s in states if s.series is not None),
            'fetching': sum(1 for s in states if s.fetching),
            'fetches_started': self._stats.fetches_started,
            'fetch_failures': self._stats.fetch_failures,
            'stale_results': self._stats.stale_results,
        }
