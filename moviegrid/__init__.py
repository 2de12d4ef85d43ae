"""Launcher package re-exporting the MovieGrid FastAPI app."""

from __future__ import annotations

from app.main import app, build_registry, create_app

__all__ = ["app", "build_registry", "create_app"]
