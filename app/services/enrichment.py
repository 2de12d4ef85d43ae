"""Best-effort detail enrichment for a batch of search stubs."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from ..errors import MovieSearchError
from ..models import DetailRecord, SearchStub
from .omdb import OMDbClient, PlotLength

logger = logging.getLogger(__name__)


class DetailEnricher:
    """Fetch full records for many stubs at once, dropping the ones that fail."""

    def __init__(self, client: OMDbClient, *, plot: PlotLength = "short"):
        self._client = client
        self._plot = plot

    async def enrich(self, stubs: Iterable[SearchStub]) -> list[DetailRecord]:
        tasks = [
            asyncio.create_task(self._lookup(stub)) for stub in stubs
        ]
        if not tasks:
            return []
        results = await asyncio.gather(*tasks)
        return [record for record in results if record is not None]

    async def _lookup(self, stub: SearchStub) -> DetailRecord | None:
        try:
            return await self._client.get_details(stub.id, plot=self._plot)
        except MovieSearchError as exc:
            logger.warning("Detail lookup failed for %s (%s): %s", stub.id, stub.title, exc)
            return None
