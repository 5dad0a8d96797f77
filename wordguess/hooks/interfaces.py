"""Hook interfaces — abstract base classes for swappable services.

These ABCs define the contract between the game/HTTP logic and the storage
layer. The in-memory implementation lets the game run in a single process;
a shared store (Redis, etc.) would subclass the same ABC.

Tier 1 leaf module: imports only from abc, typing (stdlib),
wordguess.schemas and wordguess.game.engine (also Tier 1).

Python raises TypeError at instantiation if any abstract method is
missing — you'll know immediately what's left to do.

Usage:
    from wordguess.hooks.interfaces import SessionStore
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from typing import TypeVar

from wordguess.game.engine import GameRules
from wordguess.schemas import WordSession

T = TypeVar("T")

PRELOADED_PREFIX = "preloaded-"


# ---------------------------------------------------------------------------
# Session storage (ephemeral, TTL-bounded)
# ---------------------------------------------------------------------------


class SessionStore(ABC):
    """Ephemeral storage for word sessions, keyed by cookie value.

    Unlike a plain key-value store, a miss is never an error: get_session
    creates a new session from a random category whenever the stored one
    is missing, expired, won, or out of attempts. Callers never check
    those conditions themselves.

    Every method must be safe under concurrent requests: at most one
    mutator per session id at a time, and a sweep never observes a
    half-updated entry.

    Attributes:
        rules: The game policy used to decide when a session is finished.
    """

    rules: GameRules

    @abstractmethod
    async def get_session(self, session_id: str) -> WordSession:
        """Returns a playable session for the id, replacing it if needed.

        Args:
            session_id: The session identifier (cookie value).

        Returns:
            The stored session if it is still playable, otherwise a fresh
            session that now occupies the id.
        """
        ...

    @abstractmethod
    async def save_session(self, session_id: str, session: WordSession) -> None:
        """Creates or overwrites the session stored under session_id.

        Args:
            session_id: The session identifier.
            session: The WordSession to store.
        """
        ...

    @abstractmethod
    async def update_session(
        self, session_id: str, action: Callable[[WordSession], T]
    ) -> T:
        """Read-modify-write in one critical section.

        Resolves the session exactly as get_session does, runs action on
        it, stores the (possibly mutated) session, and returns whatever
        action returned. If action raises, the exception propagates and
        nothing new is stored beyond what get_session itself created.

        Args:
            session_id: The session identifier.
            action: Synchronous callable applied to the session.

        Returns:
            The action's return value.
        """
        ...

    @abstractmethod
    async def sweep(self, now: datetime | None = None) -> list[str]:
        """Removes every session whose expires_at is strictly before now.

        Args:
            now: Reference time. Defaults to the current UTC time.

        Returns:
            The ids that were removed.
        """
        ...

    @abstractmethod
    async def preload(self, count: int) -> list[str]:
        """Creates up to count sessions under reserved ids.

        Ids are "preloaded-1" .. "preloaded-n". Each uses a distinct
        category, so at most len(categories) sessions are created.

        Args:
            count: Number of sessions requested.

        Returns:
            The ids created, in order.
        """
        ...

    @abstractmethod
    async def claim_preloaded(self) -> str | None:
        """Hands out the first unexpired, unclaimed preloaded id.

        A claimed id is never handed out again.

        Returns:
            The claimed id, or None if the pool is empty.
        """
        ...
