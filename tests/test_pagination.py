"""Tests for assembling UI batches from remote pages."""

from __future__ import annotations

import pytest

from app.config import Settings
from app.errors import NetworkError
from app.services.omdb import OMDbClient
from app.services.pagination import PaginationAggregator
from conftest import FakeOMDb, movie


def _movies(count: int, *, start: int = 1) -> list[dict[str, object]]:
    return [
        movie(f"tt{index:07d}", f"Movie {index}", str(1990 + index % 30))
        for index in range(start, start + count)
    ]


@pytest.mark.parametrize(
    ("logical_page", "expected"),
    [(1, (1, 2)), (2, (3, 4)), (3, (5, 6)), (10, (19, 20))],
)
def test_remote_pages_jump_by_two(logical_page: int, expected: tuple[int, int]) -> None:
    assert PaginationAggregator.remote_pages(logical_page) == expected


def test_remote_pages_rejects_non_positive() -> None:
    with pytest.raises(ValueError):
        PaginationAggregator.remote_pages(0)


@pytest.mark.anyio
async def test_fetch_batch_concatenates_two_pages(fake_omdb: FakeOMDb, settings: Settings) -> None:
    first = _movies(10)
    second = _movies(8, start=11)
    fake_omdb.add_page("batman", 1, first, total=18)
    fake_omdb.add_page("batman", 2, second, total=18)

    async with fake_omdb.http_client() as http_client:
        aggregator = PaginationAggregator(settings, OMDbClient(settings, http_client))
        batch = await aggregator.fetch_batch("batman", 1)

    assert len(batch.items) == 18
    assert batch.total == 18
    assert [stub.id for stub in batch.items] == [entry["imdbID"] for entry in first + second]
    assert sorted(int(request.url.params["page"]) for request in fake_omdb.requests) == [1, 2]


@pytest.mark.anyio
async def test_fetch_batch_truncates_to_batch_size(fake_omdb: FakeOMDb, settings: Settings) -> None:
    fake_omdb.add_results("star", _movies(40))

    async with fake_omdb.http_client() as http_client:
        aggregator = PaginationAggregator(settings, OMDbClient(settings, http_client))
        batch = await aggregator.fetch_batch("star", 2)

    assert len(batch.items) == 18
    assert batch.items[0].id == "tt0000021"
    assert batch.total == 40
    assert sorted(int(request.url.params["page"]) for request in fake_omdb.requests) == [3, 4]


@pytest.mark.anyio
async def test_fetch_batch_takes_total_from_any_page(fake_omdb: FakeOMDb, settings: Settings) -> None:
    fake_omdb.add_page("alien", 1, _movies(7), total=7)

    async with fake_omdb.http_client() as http_client:
        aggregator = PaginationAggregator(settings, OMDbClient(settings, http_client))
        batch = await aggregator.fetch_batch("alien", 1)

    assert len(batch.items) == 7
    assert batch.total == 7


@pytest.mark.anyio
async def test_fetch_batch_no_results(fake_omdb: FakeOMDb, settings: Settings) -> None:
    async with fake_omdb.http_client() as http_client:
        aggregator = PaginationAggregator(settings, OMDbClient(settings, http_client))
        batch = await aggregator.fetch_batch("nothing", 1)

    assert batch.items == []
    assert batch.total == 0


@pytest.mark.anyio
async def test_fetch_batch_waits_for_both_before_failing(fake_omdb: FakeOMDb, settings: Settings) -> None:
    fake_omdb.add_page("batman", 2, _movies(10), total=20)
    fake_omdb.offline_pages.add(1)

    async with fake_omdb.http_client() as http_client:
        aggregator = PaginationAggregator(settings, OMDbClient(settings, http_client))
        with pytest.raises(NetworkError):
            await aggregator.fetch_batch("batman", 1)

    # The healthy sibling request still completed.
    assert sorted(int(request.url.params["page"]) for request in fake_omdb.requests) == [1, 2]
