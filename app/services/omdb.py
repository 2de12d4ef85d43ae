"""Client for the OMDb movie metadata API."""

from __future__ import annotations

import logging
from typing import Any, Literal

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..errors import DetailsNotFound, NetworkError
from ..models import DetailRecord, SearchPage, SearchStub
from ..utils import coerce_int, normalize_query

logger = logging.getLogger(__name__)

PlotLength = Literal["short", "full"]


class OMDbClient:
    """Thin wrapper around the two read-only OMDb queries the browser needs."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        if not settings.omdb_api_key:
            raise ValueError("OMDb API key is required when initialising OMDbClient")
        self._settings = settings
        self._client = http_client

    async def search(self, query: str, page: int = 1) -> SearchPage:
        """Return one remote page of title matches.

        OMDb reports "no results" as ``Response: "False"``; that is normalised
        to an empty page rather than raised.
        """

        normalized = normalize_query(query)
        if not normalized:
            return SearchPage.empty()

        data = await self._get(
            {"s": normalized, "page": page},
            failure_message="Failed to fetch movies.",
        )
        if data.get("Response") != "True":
            logger.debug(
                "OMDb search for %r page %s returned no results: %s",
                normalized,
                page,
                data.get("Error"),
            )
            return SearchPage.empty()

        raw_items = data.get("Search") or []
        if not isinstance(raw_items, list):
            raw_items = []
        items: list[SearchStub] = []
        for entry in raw_items:
            if not isinstance(entry, dict):
                continue
            try:
                items.append(SearchStub.model_validate(entry))
            except ValidationError:
                logger.debug("Skipping malformed OMDb search entry: %s", entry)
        return SearchPage(items=items, total=coerce_int(data.get("totalResults")))

    async def get_details(
        self, movie_id: str, *, plot: PlotLength = "short"
    ) -> DetailRecord:
        """Fetch the full record for a single IMDb identifier."""

        data = await self._get(
            {"i": movie_id, "plot": plot},
            failure_message="Failed to fetch movie details.",
        )
        if data.get("Response") != "True":
            raise DetailsNotFound(data.get("Error") or None)
        try:
            return DetailRecord.model_validate(data)
        except ValidationError as exc:
            raise DetailsNotFound(f"Incomplete details for {movie_id}.") from exc

    async def _get(
        self, params: dict[str, Any], *, failure_message: str
    ) -> dict[str, Any]:
        query = {"apikey": self._settings.omdb_api_key, **params}
        try:
            response = await self._client.get("/", params=query)
        except httpx.HTTPError as exc:
            logger.warning("OMDb request %s failed: %s", params, exc)
            raise NetworkError(failure_message) from exc

        try:
            data = response.json()
        except ValueError:
            data = None
        # OMDb reports bad keys and exhausted quotas as 401 with a JSON body.
        if isinstance(data, dict) and "Response" in data:
            return data

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("OMDb request %s failed: %s", params, exc)
            raise NetworkError(failure_message) from exc
        logger.warning("Unexpected OMDb response structure for %s", params)
        raise NetworkError(failure_message)
