"""Core data models — shared Pydantic types for the word guessing game.

Categories loaded at startup, per-player sessions, the view model returned
to the browser, and the API response envelope all flow through these types.

This is a Tier 1 leaf module: it imports only from pydantic and the stdlib.
No project imports allowed — everything else imports from here.

Usage:
    from wordguess.schemas import Category, WordSession, GameView, ApiResponse
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Word data
# ---------------------------------------------------------------------------


class Category(BaseModel):
    """One hidden keyword with its category name and ordered hints.

    Frozen — loaded once at startup and read-only for the process lifetime.
    """

    model_config = ConfigDict(frozen=True)

    category: str = Field(min_length=1)
    key_word: str = Field(min_length=1)
    hints: tuple[str, ...] = Field(min_length=1)


class WordsFile(BaseModel):
    """Top-level shape of the words file: {"categories": [...]}."""

    categories: list[Category] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class WordSession(BaseModel):
    """Ephemeral game state for one player and one keyword.

    Lives in SessionStore under the player's cookie value. The session does
    not know its own id; identity is the store's key.

    Mutable: updated in place on every guess. expires_at has no default;
    new_session derives it from GameRules.session_ttl.
    """

    category: str
    key_word: str
    hints: tuple[str, ...]
    hint_index: int = 0
    guesses: list[str] = Field(default_factory=list)
    extra_hints: list[str] = Field(default_factory=list)
    won: bool = False
    expires_at: datetime


# ---------------------------------------------------------------------------
# View model
# ---------------------------------------------------------------------------


class GameView(BaseModel):
    """Everything the game page needs to render one turn.

    key_word is None until the session is won.
    """

    model_config = ConfigDict(frozen=True)

    title: str = "Word Guessing Game"
    current_hint: str
    all_hints: list[str]
    extra_hints: list[str] = Field(default_factory=list)
    guesses: list[str]
    attempts: int
    max_attempts: int
    attempts_left: int
    won: bool
    key_word: str | None = None


class WelcomeView(BaseModel):
    """Landing page content."""

    model_config = ConfigDict(frozen=True)

    title: str = "Word Guessing Game"
    business_name: str = "Welcome to the Word Guessing Game!"
    slogan: str = "Test your vocabulary and have fun!"


# ---------------------------------------------------------------------------
# API envelope
# ---------------------------------------------------------------------------


class ApiError(BaseModel):
    """Error detail inside ApiResponse.error.

    code is an uppercase string like "EMPTY_GUESS" or "INTERNAL_ERROR".
    Not an enum — error codes grow with the API.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str


class ApiResponse(BaseModel):
    """Universal response envelope — every API endpoint returns this shape."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    data: Any | None = None
    error: ApiError | None = None
