"""
Guess Simulator

Produces the simulated guesser's answers for one round. Guesses are driven by
drawing progress and attempt count only; nothing looks at the drawing itself.
"""

import random
import time
from typing import Callable, List, Optional, Set
from ..config.game_settings import (
    ATTEMPT_WEIGHT,
    EXHAUSTED_CONFIDENCE,
    MAX_CORRECT_PROBABILITY,
    MAX_GUESSES,
    MAX_PROGRESS,
    MIN_GUESSES_BEFORE_CORRECT,
    MIXED_POOL_SIZE,
    PROGRESS_WEIGHT,
)
from ..models.game import GuessPhase, GuessRecord
from .word_bank import WordBank, get_word_bank


class GuessSimulator:
    """
    Stateful guesser owned by a single round.

    This class handles:
    - Correctness probability rising with progress and attempt count
    - Phase-dependent candidate pools (exploration, mixed, warming up)
    - The no-repeat rule for wrong guesses within a round
    - Escalating hints about the target word
    """

    def __init__(self, target_word: str,
                 word_bank: Optional[WordBank] = None,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.time,
                 max_guesses: int = MAX_GUESSES):
        self.word_bank = word_bank or get_word_bank()
        self.rng = rng or random.Random()
        self.clock = clock
        self.max_guesses = max_guesses
        self.reset(target_word)

    @property
    def target_word(self) -> str:
        return self._target_word

    @property
    def guess_count(self) -> int:
        return self._guess_count

    @property
    def hint_level(self) -> int:
        return self._hint_level

    @property
    def used_guesses(self) -> Set[str]:
        return set(self._used)

    @property
    def phase(self) -> GuessPhase:
        """Phase the current attempt count falls in."""
        return self._phase_for(self._guess_count)

    @staticmethod
    def _phase_for(count: int) -> GuessPhase:
        if count <= 2:
            return GuessPhase.EXPLORATION
        if count <= 5:
            return GuessPhase.MIXED
        return GuessPhase.WARMING_UP

    def correct_probability(self, progress: int) -> float:
        progress_factor = progress / MAX_PROGRESS
        attempt_factor = self._guess_count / self.max_guesses
        return min(MAX_CORRECT_PROBABILITY,
                   progress_factor * PROGRESS_WEIGHT + attempt_factor * ATTEMPT_WEIGHT)

    def guess(self, progress: int) -> GuessRecord:
        """
        Makes the next guess for the given drawing progress.

        Args:
            progress: Drawing progress, clamped to 0-100

        Returns:
            GuessRecord for this attempt
        """
        progress = max(0, min(MAX_PROGRESS, int(progress)))
        self._guess_count += 1

        # The draw is consumed even when the floor forbids a correct answer
        draw = self.rng.random()
        if draw < self.correct_probability(progress) and self._guess_count >= MIN_GUESSES_BEFORE_CORRECT:
            return self._record(self._target_word, int(80 + self.rng.random() * 20), True)

        pool = self._candidate_pool()
        if not pool:
            # Catalog exhausted: the guesser always ends up naming the word
            return self._record(self._target_word, EXHAUSTED_CONFIDENCE, True)

        guess = self.rng.choice(pool)
        self._used.add(guess)

        confidence = int(30 + (progress / MAX_PROGRESS) * 40 + self.rng.random() * 20)
        return self._record(guess, min(75, confidence), False)

    def _record(self, guess: str, confidence: int, is_correct: bool) -> GuessRecord:
        return GuessRecord(guess=guess, confidence=confidence,
                           is_correct=is_correct, timestamp=self.clock())

    def _similar_words(self) -> List[str]:
        category = self.word_bank.category_of(self._target_word)
        if category is None:
            return []
        return [w for w in self.word_bank.words_in_category(category) if w != self._target_word]

    def _exploration_pool(self) -> List[str]:
        return [w for w in self.word_bank.all_words()
                if w not in self._used and w != self._target_word]

    def _candidate_pool(self) -> List[str]:
        phase = self.phase

        if phase is GuessPhase.EXPLORATION:
            return self._exploration_pool()

        if phase is GuessPhase.MIXED:
            # Ordered union of category words and the catalog head
            mixed = dict.fromkeys(self._similar_words() + self.word_bank.all_words()[:MIXED_POOL_SIZE])
            return [w for w in mixed if w not in self._used and w != self._target_word]

        pool = [w for w in self._similar_words() if w not in self._used]
        return pool or self._exploration_pool()

    def hint(self) -> str:
        """Advances the hint level and returns the matching disclosure."""
        self._hint_level += 1
        word = self._target_word

        if self._hint_level == 1:
            category = self.word_bank.category_of(word)
            if category is None:
                return "提示不可用"
            return f"这是一个{self.word_bank.category_label(category)}"

        if self._hint_level == 2:
            return f"这个词有 {len(word)} 个字"

        if self._hint_level == 3:
            return f'第一个字是"{word[0]}"'

        reveal_count = min(self._hint_level - 2, len(word) - 1)
        return f'开头是"{word[:reveal_count]}"'

    def reset(self, new_target_word: str) -> None:
        """Reinitializes all per-round counters for a new target word."""
        self._target_word = new_target_word
        self._used: Set[str] = set()
        self._guess_count = 0
        self._hint_level = 0
