"""Utility helpers for the MovieGrid service."""

from __future__ import annotations

import re
from typing import Any


WHITESPACE_RE = re.compile(r"\s+")


def normalize_query(value: str | None) -> str:
    """Trim a free-text query and collapse internal whitespace."""

    if not value:
        return ""
    return WHITESPACE_RE.sub(" ", value).strip()


def coerce_int(value: Any, *, default: int = 0) -> int:
    """Parse integers OMDb sends as strings, falling back to ``default``."""

    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default
