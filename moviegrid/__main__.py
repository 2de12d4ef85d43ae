"""Module executed when running ``python -m moviegrid``."""

from __future__ import annotations

import logging
import sys

import uvicorn

from app.config import settings

logger = logging.getLogger("moviegrid")


def main() -> None:
    """Start the uvicorn server using the configured settings."""

    if not settings.omdb_api_key:
        logging.basicConfig(level=logging.INFO)
        logger.error("OMDB_API_KEY is not set; export it or add it to .env")
        sys.exit(1)

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    main()
