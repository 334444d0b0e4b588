"""
Game Configuration Constants Module

This module defines all game rule constants for the drawing-and-guessing game.
All round, scoring and guesser parameters are centralized here so the state
machine and the guess simulator read them from one place.

"""

import json
import os
from typing import Dict, Final, List, Tuple

# Round timing
ROUND_SECONDS: Final[int] = 60
"""
Length of a round in seconds. The timer ticks once per second while playing.
"""

# Guesser tuning
MAX_GUESSES: Final[int] = 15
"""
Attempt count at which the attempt factor of the correctness probability saturates.
"""

MIN_GUESSES_BEFORE_CORRECT: Final[int] = 3
MAX_CORRECT_PROBABILITY: Final[float] = 0.95
PROGRESS_WEIGHT: Final[float] = 0.3
ATTEMPT_WEIGHT: Final[float] = 0.7
MIXED_POOL_SIZE: Final[int] = 20
EXHAUSTED_CONFIDENCE: Final[int] = 95

# Guess scheduling
GUESS_START_PROGRESS: Final[int] = 10
GUESS_DELAY_RANGE: Final[Tuple[float, float]] = (2.0, 4.0)

# Drawing progress
PROGRESS_PER_STROKE: Final[int] = 2
MAX_PROGRESS: Final[int] = 100

# Scoring
HINT_COST: Final[int] = 50
TIME_BONUS_PER_SECOND: Final[int] = 10
ROUND_BONUS: Final[int] = 50

# Fixed display labels for the closed category set
CATEGORY_LABELS: Final[Dict[str, str]] = {
    "animals": "动物",
    "food": "食物",
    "objects": "物品",
    "nature": "自然",
    "people": "人物",
    "activities": "活动",
}


def _load_word_catalog() -> Dict[str, List[str]]:
    """
    Load the categorized word catalog from word_catalog.json.

    Returns:
        Dict[str, List[str]]: Category name mapped to its ordered word list

    Raises:
        FileNotFoundError: If word_catalog.json file is not found
        ValueError: If the JSON is malformed or the catalog shape is invalid
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'word_catalog.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            catalog = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word catalog file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in word_catalog.json: {e}")

    if not isinstance(catalog, dict):
        raise ValueError("JSON file must contain an object of category -> words")

    for category, words in catalog.items():
        if not isinstance(words, list):
            raise ValueError(f"Category '{category}' must map to an array of words")
        for word in words:
            if not isinstance(word, str) or not word.strip():
                raise ValueError(f"Category '{category}' contains an invalid word: {word!r}")

    return {category: list(words) for category, words in catalog.items()}


def validate_word_catalog_integrity(catalog: Dict[str, List[str]] = None) -> bool:
    """
    Validates the integrity and consistency of a word catalog.

    This function performs validation to ensure:
    1. The catalog has at least one category
    2. Every category is non-empty
    3. Uniqueness: a word appears exactly once across the whole catalog
    4. Every category of the packaged catalog has a display label

    Args:
        catalog: Catalog to check, defaults to the packaged WORD_CATALOG

    Returns:
        bool: True if the catalog passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if catalog is None:
        catalog = WORD_CATALOG
        check_labels = True
    else:
        check_labels = False

    if not catalog:
        raise ValueError("Word catalog cannot be empty")

    seen: Dict[str, str] = {}
    for category, words in catalog.items():
        if not words:
            raise ValueError(f"Category '{category}' cannot be empty")

        if check_labels and category not in CATEGORY_LABELS:
            raise ValueError(f"Category '{category}' has no display label")

        for word in words:
            if word in seen:
                raise ValueError(
                    f"Word '{word}' appears in both '{seen[word]}' and '{category}'"
                    if seen[word] != category
                    else f"Duplicate word '{word}' in category '{category}'"
                )
            seen[word] = category

    return True


# Curated word catalog loaded from JSON file
WORD_CATALOG: Final[Dict[str, List[str]]] = _load_word_catalog()


def get_word_statistics() -> dict:
    """
    Summarises the packaged catalog for health checks and balancing.

    Returns:
        dict: total_words, category_count, words_per_category,
        avg_word_length and longest_word
    """
    all_words = [word for words in WORD_CATALOG.values() for word in words]
    if not all_words:
        return {"error": "Word catalog is empty"}

    return {
        "total_words": len(all_words),
        "category_count": len(WORD_CATALOG),
        "words_per_category": {category: len(words) for category, words in WORD_CATALOG.items()},
        "avg_word_length": round(sum(len(word) for word in all_words) / len(all_words), 2),
        "longest_word": max(all_words, key=len),
    }


validate_word_catalog_integrity()
