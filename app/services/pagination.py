"""Assemble fixed-size UI batches out of OMDb's smaller remote pages."""

from __future__ import annotations

import asyncio
import logging

from ..config import Settings
from ..models import SearchPage
from .omdb import OMDbClient

logger = logging.getLogger(__name__)


class PaginationAggregator:
    """Fill one logical page by fetching two remote pages side by side."""

    def __init__(self, settings: Settings, client: OMDbClient):
        self._client = client
        self._batch_size = settings.batch_size

    @staticmethod
    def remote_pages(logical_page: int) -> tuple[int, int]:
        """Return the two remote page numbers backing ``logical_page``."""

        if logical_page < 1:
            raise ValueError("logical_page must be 1 or greater")
        first = 2 * logical_page - 1
        return first, first + 1

    async def fetch_batch(self, query: str, logical_page: int) -> SearchPage:
        first, second = self.remote_pages(logical_page)

        # Both requests run to completion even if one of them fails.
        results = await asyncio.gather(
            self._client.search(query, first),
            self._client.search(query, second),
            return_exceptions=True,
        )
        pages: list[SearchPage] = []
        for page_number, result in zip((first, second), results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Remote page %s for %r failed: %s", page_number, query, result
                )
                raise result
            pages.append(result)

        items = [item for page in pages for item in page.items][: self._batch_size]
        total = next((page.total for page in pages if page.total), 0)
        logger.debug(
            "Logical page %s for %r assembled %s items (total %s)",
            logical_page,
            query,
            len(items),
            total,
        )
        return SearchPage(items=items, total=total)
