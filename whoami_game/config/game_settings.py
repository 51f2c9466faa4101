"""
Game Configuration Module

Holds the word catalog and the game rules. The catalog is a fixed list of
``{word, hint}`` entries grouped by category and loaded once from
``words.json``; the rules are built from the Flask config so every knob the
round logic uses lives in one place.
"""

import json
import os
from dataclasses import dataclass
from typing import Dict, Final, List, Mapping, Optional

from ..models.room import WordEntry

ROUND_END_LOBBY: Final[str] = "lobby"
ROUND_END_AUTO_RESTART: Final[str] = "auto_restart"

DEFAULT_CUSTOM_HINT: Final[str] = "Custom word"
"""Hint shown for a custom word submitted without one."""


def _load_word_catalog() -> Dict[str, List[WordEntry]]:
    """
    Load the categorized word catalog from words.json.

    Returns:
        Dict[str, List[WordEntry]]: category name -> entries

    Raises:
        FileNotFoundError: If words.json file is not found
        ValueError: If the file is malformed or a category is empty
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'words.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            raw_catalog = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word catalog file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in words.json: {e}")

    if not isinstance(raw_catalog, dict) or not raw_catalog:
        raise ValueError("words.json must contain an object of categories")

    catalog: Dict[str, List[WordEntry]] = {}
    for category, entries in raw_catalog.items():
        if not isinstance(entries, list) or not entries:
            raise ValueError(f"Category '{category}' must be a non-empty array")
        catalog[category] = [
            WordEntry(word=entry['word'].strip(), hint=entry['hint'].strip())
            for entry in entries
        ]
    return catalog


WORD_CATALOG: Final[Dict[str, List[WordEntry]]] = _load_word_catalog()

ALL_WORDS: Final[List[WordEntry]] = [
    entry for entries in WORD_CATALOG.values() for entry in entries
]

_WORDS_BY_TEXT: Final[Dict[str, WordEntry]] = {}
for _entry in ALL_WORDS:
    _WORDS_BY_TEXT.setdefault(_entry.word, _entry)


def find_word(word: str) -> Optional[WordEntry]:
    """Return the catalog entry whose text is exactly ``word``."""
    if not isinstance(word, str):
        return None
    return _WORDS_BY_TEXT.get(word)


def validate_word_catalog_integrity() -> bool:
    """
    Validates the integrity of the word catalog.

    Every entry needs a non-empty word and hint, and a word may appear only
    once across all categories.

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not ALL_WORDS:
        raise ValueError("Word catalog cannot be empty")

    for category, entries in WORD_CATALOG.items():
        for index, entry in enumerate(entries):
            if not entry.word:
                raise ValueError(f"Entry {index} in '{category}' has an empty word")
            if not entry.hint:
                raise ValueError(f"Entry '{entry.word}' in '{category}' has an empty hint")

    words = [entry.word for entry in ALL_WORDS]
    if len(words) != len(set(words)):
        duplicates = sorted({word for word in words if words.count(word) > 1})
        raise ValueError(f"Duplicate words found in catalog: {duplicates}")

    return True


def get_catalog_statistics() -> dict:
    """Per-category entry counts, used by the startup banner."""
    return {
        "total_words": len(ALL_WORDS),
        "categories": {category: len(entries) for category, entries in WORD_CATALOG.items()},
    }


@dataclass(frozen=True)
class GameRules:
    """Tunable rules of a round, read from the Flask config."""
    max_players: int = 10
    min_players: int = 2
    turn_duration: float = 45.0
    round_end_delay: float = 5.0
    round_end_mode: str = ROUND_END_LOBBY
    hint_skip_threshold: int = 12
    word_choices: int = 6
    pairing_attempts: int = 50
    room_code_length: int = 6
    room_code_attempts: int = 100
    max_name_length: int = 24

    @classmethod
    def from_config(cls, config: Mapping) -> "GameRules":
        mode = config.get('ROUND_END_MODE', ROUND_END_LOBBY)
        if mode not in (ROUND_END_LOBBY, ROUND_END_AUTO_RESTART):
            raise ValueError(f"Unknown ROUND_END_MODE '{mode}'")
        return cls(
            max_players=int(config.get('MAX_PLAYERS_PER_ROOM', cls.max_players)),
            min_players=max(2, int(config.get('MIN_PLAYERS', cls.min_players))),
            turn_duration=float(config.get('TURN_DURATION_SECONDS', cls.turn_duration)),
            round_end_delay=float(config.get('ROUND_END_DELAY_SECONDS', cls.round_end_delay)),
            round_end_mode=mode,
            hint_skip_threshold=int(config.get('HINT_SKIP_THRESHOLD', cls.hint_skip_threshold)),
            word_choices=int(config.get('WORD_CHOICES_COUNT', cls.word_choices)),
            pairing_attempts=int(config.get('PAIRING_MAX_ATTEMPTS', cls.pairing_attempts)),
            room_code_length=int(config.get('ROOM_CODE_LENGTH', cls.room_code_length)),
            room_code_attempts=int(config.get('ROOM_CODE_MAX_ATTEMPTS', cls.room_code_attempts)),
            max_name_length=int(config.get('MAX_NAME_LENGTH', cls.max_name_length)),
        )


if __name__ == "__main__":

    try:
        validate_word_catalog_integrity()
        print(" Word catalog validation passed")
        print(f" Catalog statistics: {get_catalog_statistics()}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
