"""Accumulated browse state: search, load more, sort, filter and detail overlay."""

from __future__ import annotations

import logging
import secrets
from collections import OrderedDict
from typing import Sequence

from ..errors import MovieSearchError, NetworkError
from ..models import BrowseState, DetailRecord
from ..utils import normalize_query
from .enrichment import DetailEnricher
from .omdb import OMDbClient, PlotLength
from .pagination import PaginationAggregator

logger = logging.getLogger(__name__)

DETAIL_ERROR_MESSAGE = "Could not load movie details."


def _year_sort_key(item: DetailRecord) -> tuple[bool, int]:
    year = item.sort_year
    if year is None:
        return (True, 0)
    return (False, -year)


def sort_by_year_desc(items: Sequence[DetailRecord]) -> list[DetailRecord]:
    """Newest first, undated titles last.

    ``sorted`` is stable: equal years and all undated titles keep their
    relative order.
    """

    return sorted(items, key=_year_sort_key)


def filter_by_genre(
    items: Sequence[DetailRecord], category: str | None
) -> list[DetailRecord]:
    """Keep items whose genre contains ``category``, ignoring case."""

    needle = (category or "").strip().casefold()
    if not needle:
        return list(items)
    return [item for item in items if needle in item.genre.casefold()]


class BrowseSession:
    """State machine behind one browser tab.

    Every fetch cycle is tagged with a generation number; a cycle whose
    generation is no longer the latest when its requests complete leaves the
    state untouched.
    """

    def __init__(
        self,
        client: OMDbClient,
        aggregator: PaginationAggregator,
        enricher: DetailEnricher,
        *,
        detail_plot: PlotLength = "short",
    ) -> None:
        self._client = client
        self._aggregator = aggregator
        self._enricher = enricher
        self._detail_plot = detail_plot

        self._all_items: list[DetailRecord] = []
        self._query = ""
        self._next_page = 1
        self._total_available = 0
        self._generation = 0
        self._loading = False
        self._error: str | None = None
        self._has_searched = False

        self._selected_genre = ""

        self._detail_generation = 0
        self._selected_item: DetailRecord | None = None
        self._detail_loading = False
        self._detail_error: str | None = None

    @property
    def query(self) -> str:
        return self._query

    @property
    def next_page(self) -> int:
        return self._next_page

    @property
    def total_available(self) -> int:
        return self._total_available

    @property
    def all_items(self) -> list[DetailRecord]:
        return list(self._all_items)

    @property
    def displayed_items(self) -> list[DetailRecord]:
        return filter_by_genre(self._all_items, self._selected_genre)

    @property
    def selected_genre(self) -> str:
        return self._selected_genre

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def has_reached_end(self) -> bool:
        return self._total_available > 0 and len(self._all_items) >= self._total_available

    @property
    def selected_item(self) -> DetailRecord | None:
        return self._selected_item

    @property
    def detail_error(self) -> str | None:
        return self._detail_error

    async def new_search(self, query: str) -> None:
        """Replace the accumulated results with the first page of ``query``."""

        self._query = normalize_query(query)
        self._all_items = []
        self._next_page = 1
        self._total_available = 0
        self._error = None
        self._has_searched = True

        if not self._query:
            # Supersede anything still in flight for an older query.
            self._generation += 1
            self._loading = False
            return
        await self._run_cycle(append=False)

    async def load_more(self) -> None:
        """Append the next logical page for the current query."""

        if not self._query:
            return
        await self._run_cycle(append=True)

    def select_genre(self, category: str | None) -> None:
        self._selected_genre = (category or "").strip()

    async def select_item(self, movie_id: str) -> None:
        """Load the full record shown in the detail overlay."""

        self._detail_generation += 1
        generation = self._detail_generation
        self._selected_item = None
        self._detail_error = None
        self._detail_loading = True
        try:
            record = await self._client.get_details(movie_id, plot=self._detail_plot)
        except MovieSearchError as exc:
            if generation != self._detail_generation:
                return
            logger.warning("Could not load details for %s: %s", movie_id, exc)
            self._detail_error = DETAIL_ERROR_MESSAGE
            self._detail_loading = False
            return
        if generation != self._detail_generation:
            logger.info("Discarding stale detail response for %s", movie_id)
            return
        self._selected_item = record
        self._detail_loading = False

    def close_detail(self) -> None:
        self._detail_generation += 1
        self._selected_item = None
        self._detail_error = None
        self._detail_loading = False

    def snapshot(self) -> BrowseState:
        return BrowseState(
            query=self._query,
            displayed_items=self.displayed_items,
            loaded_count=len(self._all_items),
            selected_genre=self._selected_genre,
            loading=self._loading,
            error=self._error,
            has_searched=self._has_searched,
            has_reached_end=self.has_reached_end,
            total_available=self._total_available,
            selected_item=self._selected_item,
            detail_loading=self._detail_loading,
            detail_error=self._detail_error,
        )

    async def _run_cycle(self, *, append: bool) -> None:
        self._generation += 1
        generation = self._generation
        query = self._query
        page = self._next_page
        self._loading = True
        self._error = None

        try:
            batch = await self._aggregator.fetch_batch(query, page)
            if not self._is_current(generation, query):
                return
            if not batch.items and not append:
                self._all_items = []
                self._total_available = batch.total
                return
            records = await self._enricher.enrich(batch.items)
            if not self._is_current(generation, query):
                return
        except NetworkError as exc:
            if not self._is_current(generation, query):
                return
            logger.warning("Fetch cycle for %r page %s failed: %s", query, page, exc)
            self._error = exc.message
            if not append:
                self._all_items = []
            return
        finally:
            if generation == self._generation:
                self._loading = False

        merged = self._all_items + records if append else records
        self._all_items = sort_by_year_desc(merged)
        self._next_page = page + 1
        if batch.total:
            self._total_available = batch.total
        logger.info(
            "Query %r page %s: %s stubs, %s enriched, %s accumulated of %s",
            query,
            page,
            len(batch.items),
            len(records),
            len(self._all_items),
            self._total_available,
        )

    def _is_current(self, generation: int, query: str) -> bool:
        if generation == self._generation:
            return True
        logger.info("Discarding stale results for %r (generation %s)", query, generation)
        return False


class SessionRegistry:
    """In-memory map of browser session ids to their browse state."""

    def __init__(
        self,
        client: OMDbClient,
        aggregator: PaginationAggregator,
        enricher: DetailEnricher,
        *,
        detail_plot: PlotLength = "short",
        max_sessions: int = 1024,
    ) -> None:
        self._client = client
        self._aggregator = aggregator
        self._enricher = enricher
        self._detail_plot = detail_plot
        self._max_sessions = max(1, max_sessions)
        self._sessions: OrderedDict[str, BrowseSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def resolve(self, session_id: str | None) -> tuple[str, BrowseSession]:
        """Return the session for ``session_id``, creating one when unknown."""

        if session_id and session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return session_id, self._sessions[session_id]

        new_id = secrets.token_urlsafe(16)
        session = BrowseSession(
            self._client,
            self._aggregator,
            self._enricher,
            detail_plot=self._detail_plot,
        )
        self._sessions[new_id] = session
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug("Evicted browse session %s", evicted)
        return new_id, session
