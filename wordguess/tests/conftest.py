"""Shared test fixtures for the word guessing game.

Factory-pattern fixtures that return callables accepting **overrides,
plus a seeded in-memory store so category selection is deterministic.

Fixtures:
    make_category: Factory for valid Category instances
    categories: Three distinct categories ("OCEAN" first)
    rules: Default GameRules
    make_session: Factory for valid WordSession instances (OCEAN by default)
    store: InMemorySessionStore over `categories` with a seeded rng
"""

import random
from datetime import datetime, timedelta, timezone

import pytest

from wordguess.game.engine import GameRules
from wordguess.hooks.sessions import InMemorySessionStore
from wordguess.schemas import Category, WordSession

OCEAN_HINTS = ("Found on Earth", "Salty", "Covers 70%")


# ---------------------------------------------------------------------------
# Category factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_category():
    """Returns a factory function for creating valid Category instances."""

    def _make(**overrides) -> Category:
        defaults = {
            "category": "Nature",
            "key_word": "OCEAN",
            "hints": OCEAN_HINTS,
        }
        defaults.update(overrides)
        return Category(**defaults)

    return _make


@pytest.fixture
def categories(make_category) -> list[Category]:
    """Three categories with distinct keywords."""
    return [
        make_category(),
        make_category(category="Fruit", key_word="Banana", hints=("Yellow", "Curved")),
        make_category(category="Space", key_word="Saturn", hints=("Has rings",)),
    ]


# ---------------------------------------------------------------------------
# Rules + sessions
# ---------------------------------------------------------------------------


@pytest.fixture
def rules() -> GameRules:
    return GameRules()


@pytest.fixture
def make_session():
    """Returns a factory function for creating valid WordSession instances.

    Defaults produce a FRESH "OCEAN" session expiring in ten minutes.
    Override any field via kwargs.
    """

    def _make(**overrides) -> WordSession:
        defaults = {
            "category": "Nature",
            "key_word": "OCEAN",
            "hints": OCEAN_HINTS,
            "expires_at": datetime.now(timezone.utc) + timedelta(minutes=10),
        }
        defaults.update(overrides)
        return WordSession(**defaults)

    return _make


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


@pytest.fixture
def store(categories, rules) -> InMemorySessionStore:
    """Fresh in-memory store with a seeded randomness source."""
    return InMemorySessionStore(categories, rules, rng=random.Random(1234))
