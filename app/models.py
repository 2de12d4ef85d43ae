"""Pydantic models describing OMDb payloads and the browse view state."""

from __future__ import annotations

import re
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

MISSING = "N/A"

GENRES: tuple[str, ...] = (
    "Action",
    "Adventure",
    "Biography",
    "Comedy",
    "Crime",
    "Drama",
    "Horror",
    "History",
    "Romance",
    "Sci-Fi",
    "Thriller",
    "Animation",
)

LEADING_YEAR_RE = re.compile(r"\s*(\d+)")


def parse_year(value: str | None) -> int | None:
    """Return the leading integer of an OMDb year string such as ``2011–2019``."""

    if not value:
        return None
    match = LEADING_YEAR_RE.match(value)
    if not match:
        return None
    return int(match.group(1))


class SearchStub(BaseModel):
    """Lightweight search hit as returned inside OMDb's ``Search`` array."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(alias="imdbID", min_length=1)
    title: str = Field(default="", alias="Title")
    year: str = Field(default=MISSING, alias="Year")
    poster_url: str = Field(default=MISSING, alias="Poster")
    type: str = Field(default="movie", alias="Type")

    @property
    def sort_year(self) -> int | None:
        return parse_year(self.year)

    def poster_or_placeholder(self, placeholder: str) -> str:
        """Return the poster URL, or ``placeholder`` when OMDb has none."""

        poster = (self.poster_url or "").strip()
        if not poster or poster == MISSING:
            return placeholder
        return poster


class SourceRating(BaseModel):
    """One entry of OMDb's ``Ratings`` array."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    source: str = Field(alias="Source")
    value: str = Field(alias="Value")


class DetailRecord(SearchStub):
    """Full OMDb record for a single title."""

    genre: str = Field(default=MISSING, alias="Genre")
    plot: str = Field(default=MISSING, alias="Plot")
    director: str = Field(default=MISSING, alias="Director")
    actors: str = Field(default=MISSING, alias="Actors")
    runtime: str = Field(default=MISSING, alias="Runtime")
    rating: str = Field(default=MISSING, alias="imdbRating")
    vote_count: str = Field(default=MISSING, alias="imdbVotes")
    source_ratings: tuple[SourceRating, ...] = Field(
        default_factory=tuple,
        validation_alias=AliasChoices("Ratings", "source_ratings"),
    )

    @field_validator("source_ratings", mode="before")
    @classmethod
    def _drop_malformed_ratings(cls, value: Any) -> list[Any]:
        if not isinstance(value, (list, tuple)):
            return []
        return [
            entry
            for entry in value
            if isinstance(entry, SourceRating)
            or (isinstance(entry, dict) and {"Source", "Value"} <= entry.keys())
            or (isinstance(entry, dict) and {"source", "value"} <= entry.keys())
        ]

    def genres(self) -> list[str]:
        if self.genre == MISSING:
            return []
        return [part.strip() for part in self.genre.split(",") if part.strip()]


class SearchPage(BaseModel):
    """A page of search stubs together with the total OMDb reports."""

    items: list[SearchStub] = Field(default_factory=list)
    total: int = 0

    @classmethod
    def empty(cls) -> "SearchPage":
        return cls(items=[], total=0)


class BrowseState(BaseModel):
    """Everything the presentation layer needs to draw one frame."""

    query: str = ""
    displayed_items: list[DetailRecord] = Field(default_factory=list)
    loaded_count: int = 0
    selected_genre: str = ""
    loading: bool = False
    error: str | None = None
    has_searched: bool = False
    has_reached_end: bool = False
    total_available: int = 0
    selected_item: DetailRecord | None = None
    detail_loading: bool = False
    detail_error: str | None = None

    @model_validator(mode="after")
    def _count_covers_displayed(self) -> "BrowseState":
        """The filtered view never holds more than was loaded."""

        if self.loaded_count < len(self.displayed_items):
            self.loaded_count = len(self.displayed_items)
        return self
