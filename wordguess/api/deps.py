"""Shared FastAPI dependencies — session store injection and session ids.

The session store lives on app.state, set by create_app() in main.py once
categories are loaded, so two apps in one process never share a store.
Route handlers access it via FastAPI's Depends() system — never by
importing the store directly. Tests swap it with app.dependency_overrides.

Tier 2 service module: imports from hooks/interfaces (Tier 1) and
schemas (Tier 1).

Usage:
    from wordguess.api.deps import get_session_store

    @router.get("/something")
    async def do_thing(store: SessionStore = Depends(get_session_store)): ...
"""

import logging
import secrets

from fastapi import HTTPException, Request

from wordguess.hooks.interfaces import SessionStore
from wordguess.schemas import ApiError, ApiResponse

logger = logging.getLogger("wordguess")

SESSION_COOKIE = "session_id"


# ---------------------------------------------------------------------------
# Dependency providers
# ---------------------------------------------------------------------------


def get_session_store(request: Request) -> SessionStore:
    """Returns the session store of the app serving this request.

    Raises HTTPException(503) if the app has no store attached
    (startup not complete).
    """
    store: SessionStore | None = getattr(request.app.state, "session_store", None)
    if store is None:
        raise HTTPException(
            status_code=503,
            detail=ApiResponse(
                ok=False,
                error=ApiError(
                    code="SERVICE_UNAVAILABLE",
                    message="Session store is not yet available. Server is starting up.",
                ),
            ).model_dump(),
        )
    return store


# ---------------------------------------------------------------------------
# Session id resolution
# ---------------------------------------------------------------------------


def generate_session_id() -> str:
    """Returns a decimal string of a random non-negative 63-bit integer."""
    return str(secrets.randbits(63))


async def resolve_session_id(
    cookie_value: str | None, store: SessionStore
) -> tuple[str, bool]:
    """Maps an optional cookie value to a session id.

    A present, non-empty cookie is used as-is. Otherwise the visitor gets
    the next preloaded id, or a freshly generated one when the preload
    pool is used up.

    Args:
        cookie_value: The raw session cookie, if the browser sent one.
        store: The session store (source of preloaded ids).

    Returns:
        (session_id, is_new). is_new tells the caller to set the cookie.
    """
    if cookie_value:
        return cookie_value, False

    session_id = await store.claim_preloaded()
    if session_id is None:
        session_id = generate_session_id()
        logger.debug("Generated session id %s", session_id)
    else:
        logger.debug("Assigned preloaded session %s", session_id)
    return session_id, True
