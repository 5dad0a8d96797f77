"""Tests for wordguess.game.loader — reading and validating the words file."""

import json
from pathlib import Path

import pytest

from wordguess.config import DEFAULT_WORDS_PATH
from wordguess.game.loader import CategoryLoadError, load_categories


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadCategories:
    """Happy path."""

    def test_loads_in_file_order(self, tmp_path: Path) -> None:
        words = _write(
            tmp_path / "words.json",
            {
                "categories": [
                    {"category": "Nature", "key_word": "Ocean", "hints": ["Salty"]},
                    {"category": "Fruit", "key_word": "Banana", "hints": ["Yellow", "Curved"]},
                ]
            },
        )
        categories = load_categories(words)
        assert [c.key_word for c in categories] == ["Ocean", "Banana"]
        assert categories[1].hints == ("Yellow", "Curved")

    def test_bundled_words_file_is_valid(self) -> None:
        categories = load_categories(DEFAULT_WORDS_PATH)
        assert len(categories) >= 5
        assert all(c.hints for c in categories)


class TestLoadErrors:
    """Every failure is a CategoryLoadError with a typed reason."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CategoryLoadError) as exc_info:
            load_categories(tmp_path / "nope.json")
        assert exc_info.value.error_type == "missing_file"
        assert "nope.json" in exc_info.value.path

    def test_invalid_json(self, tmp_path: Path) -> None:
        words = tmp_path / "words.json"
        words.write_text("{not json", encoding="utf-8")
        with pytest.raises(CategoryLoadError) as exc_info:
            load_categories(words)
        assert exc_info.value.error_type == "invalid_json"

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"categories": []},
            {"categories": [{"category": "Nature", "key_word": "Ocean", "hints": []}]},
            {"categories": [{"category": "Nature", "key_word": "", "hints": ["Salty"]}]},
            {"categories": [{"category": "Nature", "hints": ["Salty"]}]},
            ["not", "an", "object"],
        ],
        ids=["no-key", "empty-list", "no-hints", "empty-keyword", "missing-keyword", "array"],
    )
    def test_schema_violations(self, tmp_path: Path, data: object) -> None:
        words = _write(tmp_path / "words.json", data)
        with pytest.raises(CategoryLoadError) as exc_info:
            load_categories(words)
        assert exc_info.value.error_type == "validation_error"
