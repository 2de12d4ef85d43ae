"""Exceptions raised while talking to the movie metadata API."""

from __future__ import annotations


class MovieSearchError(Exception):
    """Base error carrying a message that is safe to show to the user."""

    default_message = "An unknown error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NetworkError(MovieSearchError):
    """The request never produced a usable response."""

    default_message = "Failed to reach the movie database."


class SoftNotFound(MovieSearchError):
    """OMDb answered with ``Response: "False"``."""

    default_message = "No results found."


class DetailsNotFound(SoftNotFound):
    default_message = "Movie details not found."
