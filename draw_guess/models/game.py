"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from ..services.guess_simulator import GuessSimulator


class GameStatus(Enum):
    """Round lifecycle status."""
    IDLE = "idle"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class GuessPhase(Enum):
    """Candidate pool policy, selected by attempt count."""
    EXPLORATION = "exploration"
    MIXED = "mixed"
    WARMING_UP = "warming_up"


@dataclass(frozen=True)
class GuessRecord:
    """A single guess produced by the simulated guesser."""
    guess: str
    confidence: int
    is_correct: bool
    timestamp: float

    @property
    def confidence_level(self) -> str:
        if self.confidence >= 70:
            return "high"
        if self.confidence >= 40:
            return "medium"
        return "low"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "guess": self.guess,
            "confidence": self.confidence,
            "confidence_level": self.confidence_level,
            "is_correct": self.is_correct,
            "timestamp": self.timestamp,
        }


@dataclass
class Round:
    """Per-round state, created fresh by every start and never reused."""
    round_id: int
    target_word: str
    category: str
    started_at: float
    time_remaining: int
    simulator: "GuessSimulator"
    status: GameStatus = GameStatus.PLAYING
    stroke_count: int = 0
    drawing_progress: int = 0
    guesses: List[GuessRecord] = field(default_factory=list)
    word_revealed: bool = False

    @property
    def is_over(self) -> bool:
        return self.status in (GameStatus.WON, GameStatus.LOST)


@dataclass
class GameState:
    """Snapshot of a game session handed to the presentation layer."""
    game_id: str
    status: str  # "idle", "playing", "won", "lost"
    round_number: int
    score: int
    time_remaining: int
    drawing_progress: int
    category: Optional[str]
    category_label: Optional[str]
    guesses: List[Dict[str, Any]]
    guess_count: int
    hints_used: int
    word_revealed: bool
    target_word: Optional[str] = None  # Only included when revealed or the round is over
