"""Category loader — reads the words file and produces validated Category records.

The words file is JSON of the form::

    {"categories": [{"category": "...", "key_word": "...", "hints": ["..."]}]}

Loading happens once at startup. Any failure is fatal: the app factory lets
``CategoryLoadError`` propagate so the process never accepts traffic
without words to serve.

Tier 2 module: imports from ``wordguess.schemas`` (Tier 1) + stdlib.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from wordguess.schemas import Category, WordsFile

logger = logging.getLogger("wordguess.game.loader")


class CategoryLoadError(Exception):
    """Fatal failure reading the words file.

    Attributes:
        path: The words file that was being loaded (as string).
        error_type: One of ``"missing_file"``, ``"invalid_json"``,
            ``"validation_error"``.
        message: Human-readable error description.
    """

    def __init__(self, path: str, error_type: str, message: str) -> None:
        self.path = path
        self.error_type = error_type
        self.message = message
        super().__init__(message)


def load_categories(words_path: Path) -> list[Category]:
    """Reads, parses, and validates the words file.

    Args:
        words_path: Path to the JSON words file.

    Returns:
        The categories in file order. Never empty.

    Raises:
        CategoryLoadError: If the file is missing, is not valid JSON, or
            does not match the expected shape (including an empty
            category list or a category without hints).
    """
    path_str = str(words_path)

    try:
        with open(words_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise CategoryLoadError(
            path=path_str,
            error_type="missing_file",
            message=f"Words file not found: {path_str}",
        )
    except json.JSONDecodeError as exc:
        raise CategoryLoadError(
            path=path_str,
            error_type="invalid_json",
            message=f"Invalid JSON in {path_str}: {exc}",
        )

    try:
        words = WordsFile.model_validate(data)
    except ValidationError as exc:
        raise CategoryLoadError(
            path=path_str,
            error_type="validation_error",
            message=f"Schema validation failed for {path_str}: {exc}",
        )

    logger.info("Loaded %d categories from %s", len(words.categories), path_str)
    return list(words.categories)
