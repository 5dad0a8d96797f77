"""Game engine — hint-reveal state machine for a single word session.

Pure functions over WordSession. No store access, no locking, no clock
reads except where a caller leaves ``now`` unset. Randomness is always
injected, so category selection is deterministic under a seeded
``random.Random``.

States:
    FRESH        hint_index == 0, nothing guessed or rendered yet
    IN_PROGRESS  hints revealed, not won, attempts remaining
    WON          a guess matched the keyword (terminal)
    EXHAUSTED    max_attempts guesses recorded without a match (terminal)
    EXPIRED      expires_at is in the past

Terminal and expired sessions are replaced by the session store on the
next access; the engine itself refuses to mutate them.

Tier 1 module: imports only from wordguess.schemas and the stdlib.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from wordguess.schemas import Category, GameView, WordSession


class GameState(str, Enum):
    """Lifecycle state of a WordSession."""

    FRESH = "fresh"
    IN_PROGRESS = "in_progress"
    WON = "won"
    EXHAUSTED = "exhausted"
    EXPIRED = "expired"


@dataclass(frozen=True)
class GameRules:
    """Game policy shared by the engine and the session store.

    Attributes:
        max_attempts: Guesses allowed per session before it is replaced.
        case_sensitive: Whether keyword comparison respects case.
        session_ttl: Lifetime of a new session.
        extra_hint_thresholds: Guess counts at which a supplementary clue
            is added. The k-th threshold yields the k-th clue.
    """

    max_attempts: int = 5
    case_sensitive: bool = False
    session_ttl: timedelta = timedelta(minutes=10)
    extra_hint_thresholds: tuple[int, ...] = ()


class GuessError(ValueError):
    """Base class for rejected guesses. Carries an API error code."""

    code = "INVALID_GUESS"


class EmptyGuessError(GuessError):
    """The submitted guess was empty or whitespace only."""

    code = "EMPTY_GUESS"


class GameFinishedError(GuessError):
    """The session is already won or out of attempts."""

    code = "GAME_FINISHED"


# Supplementary clues, in the order thresholds unlock them.
_EXTRA_CLUES: tuple[Callable[[WordSession], str], ...] = (
    lambda s: f"Category: {s.category}",
    lambda s: f"The word has {len(s.key_word)} letters",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Session creation
# ---------------------------------------------------------------------------


def choose_category(categories: Sequence[Category], rng: random.Random) -> Category:
    """Picks a category uniformly at random.

    Raises:
        ValueError: If categories is empty.
    """
    if not categories:
        raise ValueError("Cannot choose a category from an empty list")
    return categories[rng.randrange(len(categories))]


def new_session(
    category: Category, rules: GameRules, now: datetime | None = None
) -> WordSession:
    """Builds a FRESH session for the given category."""
    now = now or _utcnow()
    return WordSession(
        category=category.category,
        key_word=category.key_word,
        hints=category.hints,
        expires_at=now + rules.session_ttl,
    )


# ---------------------------------------------------------------------------
# State queries
# ---------------------------------------------------------------------------


def is_expired(session: WordSession, now: datetime | None = None) -> bool:
    return session.expires_at < (now or _utcnow())


def is_exhausted(session: WordSession, rules: GameRules) -> bool:
    return len(session.guesses) >= rules.max_attempts


def game_state(
    session: WordSession, rules: GameRules, now: datetime | None = None
) -> GameState:
    """Classifies a session. Win takes precedence over exhaustion and expiry."""
    if session.won:
        return GameState.WON
    if is_exhausted(session, rules):
        return GameState.EXHAUSTED
    if is_expired(session, now):
        return GameState.EXPIRED
    if session.hint_index == 0:
        return GameState.FRESH
    return GameState.IN_PROGRESS


def needs_replacement(
    session: WordSession, rules: GameRules, now: datetime | None = None
) -> bool:
    """True when the store must swap this session for a new one."""
    return game_state(session, rules, now) in (
        GameState.WON,
        GameState.EXHAUSTED,
        GameState.EXPIRED,
    )


def matches_keyword(guess: str, key_word: str, rules: GameRules) -> bool:
    """Compares a guess to the keyword under the case policy.

    Case-insensitive matching is per-character lowercasing, so multi-char
    foldings such as "ß" vs "SS" do not match.
    """
    if rules.case_sensitive:
        return guess == key_word
    return guess.lower() == key_word.lower()


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def apply_guess(session: WordSession, guess: str, rules: GameRules) -> WordSession:
    """Records a guess and advances the state machine in place.

    On a match the session is won. On a miss one more hint is revealed
    (never past the last hint) and, when the guess count hits a configured
    threshold exactly, the matching supplementary clue is appended.

    Args:
        session: The session to mutate.
        guess: Raw guess text. Surrounding whitespace is ignored.
        rules: Active game policy.

    Returns:
        The same session, for chaining.

    Raises:
        EmptyGuessError: If the guess is blank. The session is untouched.
        GameFinishedError: If the session is already won or exhausted.
            The session is untouched.
    """
    text = guess.strip()
    if not text:
        raise EmptyGuessError("Guess cannot be empty")
    if session.won or is_exhausted(session, rules):
        raise GameFinishedError("This game is already over")

    session.guesses.append(text)

    if matches_keyword(text, session.key_word, rules):
        session.won = True
        return session

    if session.hint_index < len(session.hints):
        session.hint_index += 1

    attempts = len(session.guesses)
    for position, threshold in enumerate(rules.extra_hint_thresholds):
        if attempts == threshold and position < len(_EXTRA_CLUES):
            session.extra_hints.append(_EXTRA_CLUES[position](session))

    return session


def reveal_first_hint(session: WordSession) -> WordSession:
    """Ensures at least one hint is revealed before the session is shown."""
    if session.hint_index == 0:
        session.hint_index = 1
    return session


# ---------------------------------------------------------------------------
# View
# ---------------------------------------------------------------------------


def build_view(session: WordSession, rules: GameRules) -> GameView:
    """Derives the render-ready view model.

    The display index is clamped to at least 1 so a FRESH session still
    shows its first hint. The keyword is only exposed once the game is won.
    """
    shown = max(session.hint_index, 1)
    attempts = len(session.guesses)
    return GameView(
        current_hint=session.hints[shown - 1],
        all_hints=list(session.hints[:shown]),
        extra_hints=list(session.extra_hints),
        guesses=list(session.guesses),
        attempts=attempts,
        max_attempts=rules.max_attempts,
        attempts_left=max(rules.max_attempts - attempts, 0),
        won=session.won,
        key_word=session.key_word if session.won else None,
    )
