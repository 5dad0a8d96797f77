"""FastAPI application — entry point, middleware, lifespan, and routes.

Creates the word guessing game API with:
- API versioning via router prefix (/api/v1/)
- CORS middleware (origins from settings)
- Request logging middleware (raw ASGI — no response body buffering)
- Global exception handlers (HTTPException, validation, catch-all)
- Lifespan: preloads sessions and runs the expiry sweeper
- Landing and health endpoints

Categories are loaded inside create_app(). A missing or malformed words
file raises CategoryLoadError out of create_app(), so the process never
starts serving.

Run with: uvicorn wordguess.main:app --reload  (or the ``wordguess`` script)

Tier 3 orchestration module: imports from config (Tier 2), api.game (Tier 3),
hooks (Tier 2), game.loader (Tier 2), schemas (Tier 1). Each app keeps its
own session store on application.state.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import AsyncIterator
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from wordguess.config import Settings, get_settings
from wordguess.game.loader import CategoryLoadError, load_categories
from wordguess.hooks.sessions import InMemorySessionStore, run_session_sweeper
from wordguess.schemas import ApiError, ApiResponse, WelcomeView

logger = logging.getLogger("wordguess")


# ---------------------------------------------------------------------------
# Request logging middleware (raw ASGI — streaming-safe)
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware:
    """Logs method, path, status code, and duration for every request.

    Uses raw ASGI to avoid response body buffering. Does NOT log request
    bodies (guesses), query params, cookies, or client IPs.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Wraps the ASGI call to measure timing and capture status code."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "?")
        path = scope.get("path", "?")
        start = time.monotonic()
        status_code = 0

        async def logging_send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            await send(message)

        try:
            await self.app(scope, receive, logging_send)
        finally:
            duration_ms = (time.monotonic() - start) * 1000
            logger.info(
                "%s %s %d %.1fms", method, path, status_code, duration_ms
            )


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


def _http_exception_response(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wraps HTTPException in ApiResponse envelope.

    If the detail is already an ApiResponse dict (raised by our routes),
    returns it directly. Otherwise wraps in a generic error — this covers
    FastAPI's own 400 for an unparsable form body.
    """
    if isinstance(exc.detail, dict) and "ok" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse(
            ok=False,
            error=ApiError(code="HTTP_ERROR", message=str(exc.detail)),
        ).model_dump(),
    )


def _validation_error_response(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Wraps Pydantic validation errors in ApiResponse envelope.

    Returns a human-readable summary without leaking internal details.
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = " -> ".join(str(part) for part in first.get("loc", []))
        msg = first.get("msg", "Validation error")
        detail = f"{loc}: {msg}" if loc else msg
    else:
        detail = "Request validation failed."

    return JSONResponse(
        status_code=422,
        content=ApiResponse(
            ok=False,
            error=ApiError(code="VALIDATION_ERROR", message=detail),
        ).model_dump(),
    )


def _unhandled_exception_response(request: Request, exc: Exception) -> JSONResponse:
    """Catches all unhandled exceptions — never leaks internals to client.

    Logs the full traceback server-side. Returns a generic 500 response.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return JSONResponse(
        status_code=500,
        content=ApiResponse(
            ok=False,
            error=ApiError(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred.",
            ),
        ).model_dump(),
    )


# ---------------------------------------------------------------------------
# App creation
# ---------------------------------------------------------------------------


def _init_session_store(settings: Settings) -> InMemorySessionStore:
    """Loads categories and builds the session store for one app.

    Raises:
        CategoryLoadError: If the words file is missing or malformed.
    """
    try:
        categories = load_categories(settings.words_path)
    except CategoryLoadError as exc:
        logger.critical(
            "Cannot start: %s [%s] %s", exc.path, exc.error_type, exc.message
        )
        raise

    return InMemorySessionStore(categories, settings.game_rules())


def _make_lifespan(store: InMemorySessionStore, settings: Settings):
    """Builds the lifespan handler: preload on startup, sweep until shutdown."""

    @contextlib.asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        if settings.preload_count:
            await store.preload(settings.preload_count)

        sweeper = asyncio.create_task(
            run_session_sweeper(store, settings.sweep_interval_sec)
        )
        try:
            yield
        finally:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Creates and configures the FastAPI application."""
    settings = settings or get_settings()

    # Configure logging level
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    # -- Categories + session store (fatal on failure) --
    store = _init_session_store(settings)

    application = FastAPI(
        title="Word Guessing Game",
        description="Guess the hidden word from progressively revealed hints",
        version="0.1.0",
        lifespan=_make_lifespan(store, settings),
    )
    application.state.session_store = store

    # -- Middleware (order matters: last added = first executed) --

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging — raw ASGI, streaming-safe
    application.add_middleware(RequestLoggingMiddleware)

    # -- Exception handlers --
    application.add_exception_handler(StarletteHTTPException, _http_exception_response)
    application.add_exception_handler(RequestValidationError, _validation_error_response)
    application.add_exception_handler(Exception, _unhandled_exception_response)

    # -- Routers --
    _register_routes(application)

    logger.info(
        "Game ready: max_attempts=%d, case_sensitive=%s, ttl=%ss",
        settings.max_attempts,
        settings.case_sensitive,
        settings.session_ttl_sec,
    )
    return application


def _register_routes(application: FastAPI) -> None:
    """Registers all API routers on the application."""
    from fastapi import APIRouter

    @application.get("/")
    async def index() -> dict[str, Any]:
        return ApiResponse(ok=True, data=WelcomeView().model_dump()).model_dump()

    v1 = APIRouter(prefix="/api/v1")

    @v1.get("/health")
    async def health() -> dict[str, Any]:
        return ApiResponse(ok=True, data={"status": "healthy"}).model_dump()

    from wordguess.api.game import router as game_router

    v1.include_router(game_router, prefix="/game", tags=["game"])

    application.include_router(v1)


def run() -> None:
    """Console entry point — serves the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "wordguess.main:app",
        host="0.0.0.0",
        port=settings.app_port,
        timeout_keep_alive=settings.idle_timeout_sec,
        log_level=settings.log_level.lower(),
    )


app = create_app()
