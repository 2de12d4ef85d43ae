"""Pytest configuration and test helpers."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any

import httpx
import pytest


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import Settings  # noqa: E402

OMDB_TEST_URL = "https://omdb.example.com"


def movie(
    imdb_id: str,
    title: str,
    year: str,
    *,
    genre: str = "Drama",
    poster: str = "N/A",
) -> dict[str, Any]:
    """Return an OMDb detail payload for a fake title."""

    return {
        "Title": title,
        "Year": year,
        "imdbID": imdb_id,
        "Type": "movie",
        "Poster": poster,
        "Genre": genre,
        "Plot": f"The plot of {title}.",
        "Director": "Jane Doe",
        "Actors": "Actor One, Actor Two",
        "Runtime": "120 min",
        "imdbRating": "7.5",
        "imdbVotes": "1,234",
        "Ratings": [
            {"Source": "Internet Movie Database", "Value": "7.5/10"},
            {"Source": "Rotten Tomatoes", "Value": "88%"},
        ],
        "Response": "True",
    }


class FakeOMDb:
    """In-memory OMDb that answers through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.pages: dict[tuple[str, int], tuple[list[dict[str, Any]], int]] = {}
        self.details: dict[str, dict[str, Any]] = {}
        self.offline_ids: set[str] = set()
        self.offline_pages: set[int] = set()
        self.gates: dict[str, asyncio.Event] = {}

    def add_page(self, query: str, page: int, movies: list[dict[str, Any]], total: int) -> None:
        for entry in movies:
            self.details.setdefault(entry["imdbID"], entry)
        self.pages[(query, page)] = (movies, total)

    def add_results(self, query: str, movies: list[dict[str, Any]], *, page_size: int = 10) -> None:
        """Spread ``movies`` over consecutive remote pages."""

        for index in range(0, len(movies), page_size):
            self.add_page(query, index // page_size + 1, movies[index : index + page_size], len(movies))

    def search_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if "s" in request.url.params]

    def detail_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if "i" in request.url.params]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params
        if "s" in params:
            gate = self.gates.get(params["s"])
            if gate is not None:
                await gate.wait()
            page = int(params.get("page", "1"))
            if page in self.offline_pages:
                raise httpx.ConnectError("connection refused", request=request)
            entry = self.pages.get((params["s"], page))
            if entry is None:
                return httpx.Response(200, json={"Response": "False", "Error": "Movie not found!"})
            movies, total = entry
            stubs = [
                {key: item[key] for key in ("Title", "Year", "imdbID", "Type", "Poster")}
                for item in movies
            ]
            return httpx.Response(
                200,
                json={"Search": stubs, "totalResults": str(total), "Response": "True"},
            )
        if "i" in params:
            imdb_id = params["i"]
            if imdb_id in self.offline_ids:
                raise httpx.ConnectError("connection reset", request=request)
            payload = self.details.get(imdb_id)
            if payload is None:
                return httpx.Response(200, json={"Response": "False", "Error": "Incorrect IMDb ID."})
            return httpx.Response(200, json=payload)
        return httpx.Response(400, json={"Response": "False", "Error": "No parameters."})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport(), base_url=OMDB_TEST_URL)


def build_settings(**overrides: Any) -> Settings:
    """Return a settings object with defaults suitable for tests."""

    base: dict[str, Any] = {"OMDB_API_KEY": "test-key", "OMDB_API_URL": OMDB_TEST_URL}
    base.update(overrides)
    return Settings(_env_file=None, **base)  # type: ignore[arg-type]


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture
def fake_omdb() -> FakeOMDb:
    return FakeOMDb()


@pytest.fixture
def settings() -> Settings:
    return build_settings()
