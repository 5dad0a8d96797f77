"""In-memory session store — single-process implementation of SessionStore.

Python dict-backed storage for word sessions, guarded by one asyncio.Lock.
Every public method takes the lock, so request handlers and the background
sweeper never interleave on the shared dict. Data is lost on restart.

Expiry is handled twice: get_session replaces stale sessions on access, and
run_session_sweeper() periodically removes abandoned ones to bound memory.

Tier 2 service module: imports from wordguess.hooks.interfaces (Tier 1),
wordguess.game.engine (Tier 1) and wordguess.schemas (Tier 1).

Usage:
    from wordguess.hooks.sessions import InMemorySessionStore

    store = InMemorySessionStore(categories, rules)
    await store.preload(5)
    session = await store.get_session("1234567890")
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import TypeVar

from wordguess.game.engine import (
    GameRules,
    choose_category,
    is_expired,
    needs_replacement,
    new_session,
)
from wordguess.hooks.interfaces import PRELOADED_PREFIX, SessionStore
from wordguess.schemas import Category, WordSession

logger = logging.getLogger("wordguess.hooks.sessions")

T = TypeVar("T")


class InMemorySessionStore(SessionStore):
    """Dict-backed session storage, loses data on restart.

    Sessions are keyed by session id. A store-wide asyncio.Lock serialises
    all access; no per-session locks are needed because every mutation is
    a read-modify-write inside a single method call.

    Args:
        categories: Non-empty list of categories to draw sessions from.
        rules: Game policy (attempt limit, TTL, ...).
        rng: Randomness source for category selection. Inject a seeded
            random.Random for deterministic tests.

    Raises:
        ValueError: If categories is empty.
    """

    def __init__(
        self,
        categories: Sequence[Category],
        rules: GameRules | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if not categories:
            raise ValueError("InMemorySessionStore needs at least one category")
        self._categories: list[Category] = list(categories)
        self.rules = rules or GameRules()
        self._rng = rng or random.Random()
        self._sessions: dict[str, WordSession] = {}
        self._preloaded: list[str] = []
        self._claimed: set[str] = set()
        self._lock = asyncio.Lock()

    # -- internal (caller holds the lock) -----------------------------------

    def _resolve(self, session_id: str, now: datetime) -> WordSession:
        session = self._sessions.get(session_id)
        if session is None or needs_replacement(session, self.rules, now):
            category = choose_category(self._categories, self._rng)
            session = new_session(category, self.rules, now)
            self._sessions[session_id] = session
            logger.debug("Assigned new session %s", session_id)
        return session

    # -- SessionStore --------------------------------------------------------

    async def get_session(self, session_id: str) -> WordSession:
        """Returns the live session for the id, replacing it if finished."""
        async with self._lock:
            return self._resolve(session_id, datetime.now(timezone.utc))

    async def save_session(self, session_id: str, session: WordSession) -> None:
        """Stores a session under session_id. Creates or overwrites."""
        async with self._lock:
            self._sessions[session_id] = session

    async def update_session(
        self, session_id: str, action: Callable[[WordSession], T]
    ) -> T:
        """Resolves, mutates and stores a session under one lock hold."""
        async with self._lock:
            session = self._resolve(session_id, datetime.now(timezone.utc))
            result = action(session)
            self._sessions[session_id] = session
            return result

    async def sweep(self, now: datetime | None = None) -> list[str]:
        """Removes sessions that expired strictly before now."""
        now = now or datetime.now(timezone.utc)
        async with self._lock:
            expired = [
                session_id
                for session_id, session in self._sessions.items()
                if is_expired(session, now)
            ]
            for session_id in expired:
                del self._sessions[session_id]
                logger.info("Session %s expired and removed", session_id)
            if expired:
                gone = set(expired)
                self._preloaded = [sid for sid in self._preloaded if sid not in gone]
            return expired

    async def preload(self, count: int) -> list[str]:
        """Creates reserved sessions from shuffled, non-repeating categories."""
        now = datetime.now(timezone.utc)
        async with self._lock:
            chosen = self._rng.sample(
                self._categories, min(count, len(self._categories))
            )
            created: list[str] = []
            for number, category in enumerate(chosen, start=1):
                session_id = f"{PRELOADED_PREFIX}{number}"
                self._sessions[session_id] = new_session(category, self.rules, now)
                self._claimed.discard(session_id)
                created.append(session_id)
                logger.info(
                    "Preloaded session %s: %s", session_id, category.category
                )
            self._preloaded = created
            return list(created)

    async def claim_preloaded(self) -> str | None:
        """Returns the lowest-numbered unexpired preloaded id not yet claimed."""
        now = datetime.now(timezone.utc)
        async with self._lock:
            for session_id in self._preloaded:
                if session_id in self._claimed:
                    continue
                session = self._sessions.get(session_id)
                if session is None or is_expired(session, now):
                    continue
                self._claimed.add(session_id)
                return session_id
            return None

    # -- introspection -------------------------------------------------------

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions


async def run_session_sweeper(store: SessionStore, interval: float) -> None:
    """Sweeps expired sessions every ``interval`` seconds until cancelled."""
    logger.info("Session sweeper started (every %ss)", interval)
    while True:
        await asyncio.sleep(interval)
        removed = await store.sweep()
        if removed:
            logger.info("Sweep removed %d expired session(s)", len(removed))
