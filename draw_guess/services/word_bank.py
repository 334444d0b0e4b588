"""
Word Bank

Categorized vocabulary the rounds draw their target words from.
"""

import random
from typing import Dict, List, Optional, Tuple
from ..config.game_settings import CATEGORY_LABELS, WORD_CATALOG, validate_word_catalog_integrity


class WordBank:
    """
    Read-only view over a categorized word catalog.

    Word selection is two-stage: a category is picked uniformly, then a word
    uniformly within it. Small categories are therefore over-represented
    compared to a flat pick over all words.
    """

    def __init__(self, catalog: Optional[Dict[str, List[str]]] = None,
                 labels: Optional[Dict[str, str]] = None):
        source = WORD_CATALOG if catalog is None else catalog
        validate_word_catalog_integrity(source)

        self._catalog: Dict[str, Tuple[str, ...]] = {
            category: tuple(words) for category, words in source.items()
        }
        self._labels = dict(CATEGORY_LABELS if labels is None else labels)
        self._all_words: Tuple[str, ...] = tuple(
            word for words in self._catalog.values() for word in words
        )
        self._word_to_category = {
            word: category for category, words in self._catalog.items() for word in words
        }

    @property
    def categories(self) -> List[str]:
        return list(self._catalog)

    def random_word(self, rng: Optional[random.Random] = None) -> Tuple[str, str]:
        """Returns (word, category) using the category-first selection."""
        rng = rng or random
        category = rng.choice(self.categories)
        word = rng.choice(self._catalog[category])
        return word, category

    def words_in_category(self, category: str) -> List[str]:
        return list(self._catalog.get(category, ()))

    def all_words(self) -> List[str]:
        return list(self._all_words)

    def category_of(self, word: str) -> Optional[str]:
        return self._word_to_category.get(word)

    def category_label(self, category: Optional[str]) -> Optional[str]:
        if category is None:
            return None
        return self._labels.get(category, category)

    def __contains__(self, word: str) -> bool:
        return word in self._word_to_category

    def __len__(self) -> int:
        return len(self._all_words)


# Global word bank instance
_word_bank = None


def get_word_bank() -> WordBank:
    """Get the shared word bank built from the packaged catalog."""
    global _word_bank
    if _word_bank is None:
        _word_bank = WordBank()
    return _word_bank
