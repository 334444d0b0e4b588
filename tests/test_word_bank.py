import random
from collections import Counter

import pytest

from draw_guess.config.game_settings import CATEGORY_LABELS, WORD_CATALOG, validate_word_catalog_integrity
from draw_guess.services.word_bank import WordBank, get_word_bank


def test_packaged_catalog_is_valid():
    assert validate_word_catalog_integrity() is True
    assert set(WORD_CATALOG) == set(CATEGORY_LABELS)
    assert all(len(words) == 20 for words in WORD_CATALOG.values())


def test_all_words_is_flattened_in_catalog_order():
    bank = get_word_bank()
    words = bank.all_words()

    assert len(words) == 120
    assert words[:3] == ["猫", "狗", "鸟"]
    assert words[20] == "苹果"
    assert len(set(words)) == len(words)


def test_words_in_category_and_lookup():
    bank = get_word_bank()

    assert bank.words_in_category("food")[0] == "苹果"
    assert bank.words_in_category("unknown") == []
    assert bank.category_of("熊猫") == "animals"
    assert bank.category_of("不存在") is None
    assert bank.category_label("nature") == "自然"
    assert "猫" in bank


def test_returned_lists_are_copies():
    bank = get_word_bank()
    bank.words_in_category("animals").clear()
    bank.all_words().clear()

    assert len(bank.words_in_category("animals")) == 20
    assert len(bank) == 120


def test_random_word_returns_matching_category(rng):
    bank = get_word_bank()
    for _ in range(200):
        word, category = bank.random_word(rng)
        assert word in bank.words_in_category(category)


def test_random_word_picks_category_before_word():
    # One category holds a single word, the other holds nine: category-first
    # selection gives the lone word about half of all picks.
    bank = WordBank({"a": ["x"], "b": [f"w{i}" for i in range(9)]}, labels={"a": "A", "b": "B"})
    rng = random.Random(99)

    counts = Counter(bank.random_word(rng)[0] for _ in range(4000))

    assert 0.4 < counts["x"] / 4000 < 0.6


def test_duplicate_words_across_categories_are_rejected():
    with pytest.raises(ValueError, match="appears in both"):
        WordBank({"a": ["猫"], "b": ["猫"]})


def test_empty_category_is_rejected():
    with pytest.raises(ValueError, match="cannot be empty"):
        WordBank({"a": ["猫"], "b": []})


def test_empty_catalog_is_rejected():
    with pytest.raises(ValueError):
        WordBank({})
