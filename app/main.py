"""Entry point for the FastAPI-hosted movie browser."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager

import httpx
from fastapi import FastAPI, Form, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from .config import Settings, settings
from .services.browser import BrowseSession, SessionRegistry
from .services.enrichment import DetailEnricher
from .services.omdb import OMDbClient
from .services.pagination import PaginationAggregator
from .web import render_browse_page

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SESSION_COOKIE = "moviegrid_session"

app: FastAPI


def build_registry(config: Settings, http_client: httpx.AsyncClient) -> SessionRegistry:
    """Wire the OMDb client, aggregator and enricher into a session registry."""

    client = OMDbClient(config, http_client)
    return SessionRegistry(
        client,
        PaginationAggregator(config, client),
        DetailEnricher(client),
        detail_plot=config.detail_plot,
    )


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    omdb_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.omdb_api_url),
            timeout=httpx.Timeout(settings.omdb_timeout_seconds),
        )
    )
    try:
        fastapi_app.state.registry = build_registry(settings, omdb_http_client)
    except ValueError:
        await exit_stack.aclose()
        raise
    fastapi_app.state.settings = settings

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Search and browse movies from OMDb",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_registry(fastapi_app: FastAPI) -> SessionRegistry:
    registry = getattr(fastapi_app.state, "registry", None)
    if not isinstance(registry, SessionRegistry):
        raise RuntimeError("Session registry not initialised")
    return registry


def get_app_settings(fastapi_app: FastAPI) -> Settings:
    configured = getattr(fastapi_app.state, "settings", None)
    if isinstance(configured, Settings):
        return configured
    return settings


def register_routes(fastapi_app: FastAPI) -> None:
    def _session(request: Request) -> tuple[str, BrowseSession]:
        registry = get_registry(fastapi_app)
        return registry.resolve(request.cookies.get(SESSION_COOKIE))

    def _with_cookie(response: Response, session_id: str) -> Response:
        response.set_cookie(
            SESSION_COOKIE,
            session_id,
            httponly=True,
            samesite="lax",
        )
        return response

    def _back_to_grid(session_id: str) -> Response:
        return _with_cookie(RedirectResponse("/", status_code=303), session_id)

    def _render(session_id: str, session: BrowseSession) -> Response:
        page = render_browse_page(session.snapshot(), get_app_settings(fastapi_app))
        return _with_cookie(HTMLResponse(page), session_id)

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/", response_class=HTMLResponse)
    async def browse_page(request: Request) -> Response:
        session_id, session = _session(request)
        return _render(session_id, session)

    @fastapi_app.post("/search")
    async def search(request: Request, query: str = Form(default="")) -> Response:
        session_id, session = _session(request)
        await session.new_search(query)
        return _back_to_grid(session_id)

    @fastapi_app.post("/genre")
    async def change_genre(request: Request, genre: str = Form(default="")) -> Response:
        session_id, session = _session(request)
        session.select_genre(genre)
        return _back_to_grid(session_id)

    @fastapi_app.post("/load-more")
    async def load_more(request: Request) -> Response:
        session_id, session = _session(request)
        await session.load_more()
        return _back_to_grid(session_id)

    @fastapi_app.get("/movies/{movie_id}", response_class=HTMLResponse)
    async def select_movie(request: Request, movie_id: str) -> Response:
        session_id, session = _session(request)
        await session.select_item(movie_id)
        return _render(session_id, session)

    @fastapi_app.post("/close")
    async def close_detail(request: Request) -> Response:
        session_id, session = _session(request)
        session.close_detail()
        return _back_to_grid(session_id)

    @fastapi_app.get("/api/state")
    async def browse_state(request: Request) -> Response:
        session_id, session = _session(request)
        payload = session.snapshot().model_dump(mode="json")
        return _with_cookie(JSONResponse(payload), session_id)


app = create_app()
