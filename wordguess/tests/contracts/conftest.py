"""Fixtures for contract tests — one parameterized fixture per hook interface.

Each fixture yields a fresh implementation instance. Today there's only the
in-memory store ("memory" param). A shared store (Redis, etc.) adds a second
param value and an elif branch.

To test an implementation against the contracts:
    1. Add its param string (e.g., "redis") to the params list.
    2. Add an elif branch that yields the implementation instance.
    3. Run: python -m pytest wordguess/tests/contracts/ -v
    All tests should pass. If any fail, the implementation doesn't satisfy
    the contract — read the failing test's docstring for what's expected.

Uses @pytest_asyncio.fixture (not @pytest.fixture) for async fixture support
in strict mode.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest_asyncio

from wordguess.game.engine import GameRules
from wordguess.hooks.sessions import InMemorySessionStore
from wordguess.schemas import Category, WordSession

CONTRACT_CATEGORIES = [
    Category(category="Nature", key_word="Ocean", hints=("Salty", "Deep")),
    Category(category="Fruit", key_word="Banana", hints=("Yellow",)),
    Category(category="Space", key_word="Saturn", hints=("Rings", "Gas giant")),
    Category(category="Music", key_word="Piano", hints=("Keys",)),
    Category(category="Sports", key_word="Tennis", hints=("Racket", "Net")),
]

CONTRACT_RULES = GameRules(max_attempts=5, session_ttl=timedelta(minutes=10))


# ---------------------------------------------------------------------------
# Interface fixtures (parameterized for future implementations)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(params=["memory"])
async def session_store(request):
    """Yields a SessionStore implementation over CONTRACT_CATEGORIES."""
    if request.param == "memory":
        yield InMemorySessionStore(
            CONTRACT_CATEGORIES, CONTRACT_RULES, rng=random.Random(99)
        )


# ---------------------------------------------------------------------------
# Helper fixtures (shared test data)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def sample_session():
    """An in-progress session with expires_at ten minutes in the future."""
    return WordSession(
        category="Nature",
        key_word="Ocean",
        hints=("Salty", "Deep"),
        hint_index=1,
        guesses=["river"],
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=10),
    )
