"""App configuration — environment variable loading with typed defaults.

Loads settings from .env file (via python-dotenv) and os.environ.
Real environment variables take precedence over .env file values.

Game policy values (attempt limit, case sensitivity, session TTL, extra-hint
thresholds) are bundled into a GameRules instance by Settings.game_rules(),
so the engine and the session store never read the environment themselves.

Usage:
    from wordguess.config import get_settings
    settings = get_settings()
    print(settings.max_attempts)  # 5
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

from wordguess.game.engine import GameRules

# Only load .env from the project root — don't traverse parent directories.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
_DOTENV_PATH = PROJECT_ROOT / ".env"

# Shipped as package data (pyproject.toml).
PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_WORDS_PATH = PACKAGE_DIR / "content" / "words.json"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Typed configuration for the word guessing game.

    All fields have sensible defaults for local development.
    """

    # App
    app_env: str
    app_port: int
    log_level: str
    cors_origins: list[str]
    idle_timeout_sec: int

    # Data
    words_path: Path

    # Game policy
    max_attempts: int
    case_sensitive: bool
    session_ttl_sec: int
    preload_count: int
    sweep_interval_sec: int
    extra_hint_thresholds: tuple[int, ...]

    def game_rules(self) -> GameRules:
        """Bundles the game policy fields into a GameRules instance."""
        return GameRules(
            max_attempts=self.max_attempts,
            case_sensitive=self.case_sensitive,
            session_ttl=timedelta(seconds=self.session_ttl_sec),
            extra_hint_thresholds=self.extra_hint_thresholds,
        )


def _split_csv(value: str) -> list[str]:
    """Splits a comma-separated string into a list of stripped, non-empty values."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_int(env_var: str, value: str, minimum: int = 0) -> int:
    """Parses an integer env value, enforcing a lower bound.

    Raises:
        ValueError: If the value is not an integer or is below minimum.
    """
    try:
        parsed = int(value)
    except ValueError:
        raise ValueError(
            f"Invalid value for {env_var}: {value!r}. Expected an integer."
        ) from None
    if parsed < minimum:
        raise ValueError(
            f"Invalid value for {env_var}: {value!r}. Must be >= {minimum}."
        )
    return parsed


def _parse_bool(env_var: str, value: str) -> bool:
    """Parses a boolean env value ("true"/"false", "1"/"0", "yes"/"no", "on"/"off")."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(
        f"Invalid value for {env_var}: {value!r}. Expected true or false."
    )


def _parse_thresholds(env_var: str, value: str) -> tuple[int, ...]:
    """Parses a comma-separated list of positive guess counts, keeping order."""
    return tuple(_parse_int(env_var, item, minimum=1) for item in _split_csv(value))


def _load_settings() -> Settings:
    """Loads configuration from .env file and environment variables.

    Returns:
        A fully resolved Settings instance.

    Raises:
        ValueError: If any value cannot be parsed.
    """
    load_dotenv(_DOTENV_PATH)

    port = os.environ.get("APP_PORT") or os.environ.get("PORT") or "8080"

    return Settings(
        # App
        app_env=os.environ.get("APP_ENV", "development"),
        app_port=_parse_int("APP_PORT", port, minimum=1),
        log_level=os.environ.get("LOG_LEVEL", "info"),
        cors_origins=_split_csv(
            os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
        ),
        idle_timeout_sec=_parse_int(
            "IDLE_TIMEOUT_SEC", os.environ.get("IDLE_TIMEOUT_SEC", "15"), minimum=1
        ),
        # Data
        words_path=Path(os.environ.get("WORDS_PATH", str(DEFAULT_WORDS_PATH))),
        # Game policy
        max_attempts=_parse_int(
            "MAX_ATTEMPTS", os.environ.get("MAX_ATTEMPTS", "5"), minimum=1
        ),
        case_sensitive=_parse_bool(
            "CASE_SENSITIVE", os.environ.get("CASE_SENSITIVE", "false")
        ),
        session_ttl_sec=_parse_int(
            "SESSION_TTL_SEC", os.environ.get("SESSION_TTL_SEC", "600"), minimum=1
        ),
        preload_count=_parse_int(
            "PRELOAD_COUNT", os.environ.get("PRELOAD_COUNT", "5")
        ),
        sweep_interval_sec=_parse_int(
            "SWEEP_INTERVAL_SEC", os.environ.get("SWEEP_INTERVAL_SEC", "60"), minimum=1
        ),
        extra_hint_thresholds=_parse_thresholds(
            "EXTRA_HINT_THRESHOLDS", os.environ.get("EXTRA_HINT_THRESHOLDS", "")
        ),
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Returns the singleton Settings instance. Loads .env on first call."""
    global _settings
    if _settings is None:
        _settings = _load_settings()
    return _settings
