"""Game API routes — show the current turn and submit guesses.

Two endpoints under /api/v1/game:
- GET:  resolve the player's session and return the current view
- POST: apply a form-submitted guess, then return the updated view

Players are identified by the ``session_id`` cookie. A visitor without one
is given a preloaded session id if any remain, otherwise a random id; the
cookie is set on the response either way.

All responses use the ApiResponse envelope.

Tier 3 orchestration module: imports from deps (Tier 2), game.engine
(Tier 1), hooks/interfaces (Tier 1), schemas (Tier 1).
"""

import logging

from fastapi import APIRouter, Cookie, Depends, Form, HTTPException, Response

from wordguess.api.deps import SESSION_COOKIE, get_session_store, resolve_session_id
from wordguess.game.engine import (
    GameFinishedError,
    GuessError,
    apply_guess,
    build_view,
    reveal_first_hint,
)
from wordguess.hooks.interfaces import SessionStore
from wordguess.schemas import ApiError, ApiResponse, GameView, WordSession

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _set_session_cookie(response: Response, session_id: str) -> None:
    """Session-lifetime cookie: no max-age, no expiry, whole site."""
    response.set_cookie(key=SESSION_COOKIE, value=session_id, path="/")


def _guess_rejected(exc: GuessError) -> HTTPException:
    """Maps a rejected guess to 400 (bad input) or 409 (game already over)."""
    status_code = 409 if isinstance(exc, GameFinishedError) else 400
    return HTTPException(
        status_code=status_code,
        detail=ApiResponse(
            ok=False,
            error=ApiError(code=exc.code, message=str(exc)),
        ).model_dump(),
    )


async def _resolve(
    response: Response, cookie_value: str | None, store: SessionStore
) -> str:
    session_id, is_new = await resolve_session_id(cookie_value, store)
    if is_new:
        _set_session_cookie(response, session_id)
    return session_id


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("")
async def show_game(
    response: Response,
    session_id: str | None = Cookie(default=None),
    store: SessionStore = Depends(get_session_store),
) -> dict:
    """Returns the current turn for the player's session.

    A new, won, exhausted or expired session is replaced with a fresh one
    first; the first hint is always revealed.
    """
    sid = await _resolve(response, session_id, store)
    rules = store.rules

    def _show(session: WordSession) -> GameView:
        return build_view(reveal_first_hint(session), rules)

    view = await store.update_session(sid, _show)
    return ApiResponse(ok=True, data=view.model_dump()).model_dump()


@router.post("")
async def submit_guess(
    response: Response,
    guess: str = Form(default=""),
    session_id: str | None = Cookie(default=None),
    store: SessionStore = Depends(get_session_store),
) -> dict:
    """Applies one guess to the player's session and returns the new view.

    An empty guess is rejected with 400 before any session is touched.
    """
    if not guess.strip():
        raise HTTPException(
            status_code=400,
            detail=ApiResponse(
                ok=False,
                error=ApiError(code="EMPTY_GUESS", message="Guess cannot be empty"),
            ).model_dump(),
        )

    sid = await _resolve(response, session_id, store)
    rules = store.rules

    def _play(session: WordSession) -> GameView:
        apply_guess(session, guess, rules)
        return build_view(reveal_first_hint(session), rules)

    try:
        view = await store.update_session(sid, _play)
    except GuessError as exc:
        raise _guess_rejected(exc) from exc

    if view.won:
        logger.info("Session %s won after %d attempt(s)", sid, view.attempts)
    return ApiResponse(ok=True, data=view.model_dump()).model_dump()
