"""
Game Service

Contains the round/game state machine for the drawing game and the registry
of active single-player sessions.
"""

import random
import threading
import uuid
from typing import Callable, Dict, List, Optional
from ..config.game_settings import (
    GUESS_DELAY_RANGE,
    GUESS_START_PROGRESS,
    HINT_COST,
    MAX_PROGRESS,
    PROGRESS_PER_STROKE,
    ROUND_BONUS,
    ROUND_SECONDS,
    TIME_BONUS_PER_SECOND,
)
from ..models.game import GameState, GameStatus, GuessRecord, Round
from ..utils.game_logger import game_logger
from .guess_simulator import GuessSimulator
from .scheduler import ScheduledCall, Scheduler, ThreadingScheduler
from .word_bank import WordBank, get_word_bank

StateListener = Callable[[str, str, GameState], None]


class GameSession:
    """
    State machine for one player's game.

    Status moves idle -> playing -> won/lost, back to playing through
    next_round(), or to a fresh playing round 1 through reset_game().
    While playing, two timers run on the injected scheduler: a one second
    round clock and a self-rescheduling guess timer. Both are cancelled on
    every transition out of playing, and each callback is bound to the round
    it was armed for so it can never touch a later round.
    """

    def __init__(self, game_id: str,
                 scheduler: Scheduler,
                 word_bank: Optional[WordBank] = None,
                 rng: Optional[random.Random] = None,
                 listener: Optional[StateListener] = None):
        self.game_id = game_id
        self.scheduler = scheduler
        self.word_bank = word_bank or get_word_bank()
        self.rng = rng or random.Random()
        self._listener = listener
        self._lock = threading.RLock()

        self._score = 0
        self._round_number = 1
        self._round: Optional[Round] = None
        self._rounds_started = 0
        self._tick_call: Optional[ScheduledCall] = None
        self._guess_call: Optional[ScheduledCall] = None
        self._closed = False

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def status(self) -> GameStatus:
        if self._round is None:
            return GameStatus.IDLE
        return self._round.status

    @property
    def score(self) -> int:
        return self._score

    @property
    def round_number(self) -> int:
        return self._round_number

    @property
    def time_remaining(self) -> int:
        if self._round is None:
            return ROUND_SECONDS
        return self._round.time_remaining

    @property
    def drawing_progress(self) -> int:
        if self._round is None:
            return 0
        return self._round.drawing_progress

    @property
    def guesses(self) -> List[GuessRecord]:
        if self._round is None:
            return []
        return list(self._round.guesses)

    @property
    def target_word(self) -> Optional[str]:
        return self._round.target_word if self._round else None

    @property
    def category(self) -> Optional[str]:
        return self._round.category if self._round else None

    @property
    def current_round(self) -> Optional[Round]:
        return self._round

    @property
    def guess_pending(self) -> bool:
        return self._guess_call is not None

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def start(self) -> GameState:
        """Starts a round from idle, won or lost. Does nothing while playing."""
        with self._lock:
            if self.status is not GameStatus.PLAYING:
                self._begin_round()
            return self._snapshot()

    def next_round(self) -> GameState:
        """Moves a finished round on to the next one."""
        with self._lock:
            if self._round is not None and self._round.is_over:
                self._round_number += 1
                self._begin_round()
            return self._snapshot()

    def reset_game(self) -> GameState:
        """Back to round 1 with a zero score, from any state."""
        with self._lock:
            self._score = 0
            self._round_number = 1
            game_logger.log_game_event(self.game_id, 'game_reset')
            self._begin_round()
            return self._snapshot()

    def report_draw_action(self) -> GameState:
        """Registers one drawing action from the canvas."""
        with self._lock:
            round_ = self._round
            if round_ is not None and round_.status is GameStatus.PLAYING:
                round_.stroke_count += 1
                progress = min(MAX_PROGRESS, round_.stroke_count * PROGRESS_PER_STROKE)
                round_.drawing_progress = max(round_.drawing_progress, progress)
                self._schedule_guess()
            return self._snapshot()

    def request_hint(self) -> Optional[str]:
        """
        Returns the next hint and charges HINT_COST points (score floors at 0).

        Returns:
            The hint text, or None when no round is being played
        """
        with self._lock:
            round_ = self._round
            if round_ is None or round_.status is not GameStatus.PLAYING:
                return None

            hint = round_.simulator.hint()
            self._score = max(0, self._score - HINT_COST)
            game_logger.log_game_event(
                self.game_id, 'hint_requested',
                hint_level=round_.simulator.hint_level, score=self._score
            )
            return hint

    def reveal_word(self) -> GameState:
        """Lets the snapshot carry the target word for the current round."""
        with self._lock:
            if self._round is not None:
                self._round.word_revealed = True
            return self._snapshot(include_word=True)

    def get_state(self, include_word: bool = False) -> GameState:
        with self._lock:
            return self._snapshot(include_word)

    def close(self) -> None:
        """Cancels outstanding timers for good; used when the session is discarded."""
        with self._lock:
            self._closed = True
            self._cancel_timers()

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _begin_round(self) -> None:
        self._cancel_timers()

        word, category = self.word_bank.random_word(self.rng)
        self._rounds_started += 1
        self._round = Round(
            round_id=self._rounds_started,
            target_word=word,
            category=category,
            started_at=self.scheduler.now(),
            time_remaining=ROUND_SECONDS,
            simulator=GuessSimulator(word, self.word_bank, self.rng, clock=self.scheduler.now),
        )
        self._arm_tick(self._round.round_id)

        game_logger.log_game_event(
            self.game_id, 'round_started',
            round_number=self._round_number, category=category
        )

    def _finish_round(self, status: GameStatus) -> None:
        self._round.status = status
        self._cancel_timers()

    def _cancel_timers(self) -> None:
        if self._tick_call is not None:
            self._tick_call.cancel()
            self._tick_call = None
        if self._guess_call is not None:
            self._guess_call.cancel()
            self._guess_call = None

    def _is_live(self, round_id: int) -> bool:
        # A callback already running when close() took the lock lands here
        return (not self._closed
                and self._round is not None
                and self._round.round_id == round_id
                and self._round.status is GameStatus.PLAYING)

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _arm_tick(self, round_id: int) -> None:
        if self._closed:
            return
        # Due at the next whole second counted from the round start
        round_ = self._round
        elapsed_ticks = ROUND_SECONDS - round_.time_remaining
        due = round_.started_at + elapsed_ticks + 1
        delay = max(0.0, due - self.scheduler.now())
        self._tick_call = self.scheduler.call_later(delay, lambda: self._on_tick(round_id))

    def _on_tick(self, round_id: int) -> None:
        with self._lock:
            if not self._is_live(round_id):
                return

            round_ = self._round
            round_.time_remaining = max(0, round_.time_remaining - 1)
            if round_.time_remaining == 0:
                self._tick_call = None
                self._finish_round(GameStatus.LOST)
                game_logger.log_game_event(
                    self.game_id, 'round_lost',
                    round_number=self._round_number, target_word=round_.target_word,
                    guesses_made=len(round_.guesses), score=self._score
                )
                event = 'round_lost'
            else:
                self._arm_tick(round_id)
                event = 'tick'
            state = self._snapshot()

        self._notify(event, state)

    def _schedule_guess(self) -> None:
        round_ = self._round
        if (self._closed
                or self._guess_call is not None
                or round_ is None
                or round_.status is not GameStatus.PLAYING
                or round_.drawing_progress < GUESS_START_PROGRESS):
            return

        low, high = GUESS_DELAY_RANGE
        delay = low + self.rng.random() * (high - low)
        round_id = round_.round_id
        self._guess_call = self.scheduler.call_later(delay, lambda: self._on_guess(round_id))

    def _on_guess(self, round_id: int) -> None:
        with self._lock:
            if not self._is_live(round_id):
                return

            self._guess_call = None
            round_ = self._round
            if round_.drawing_progress < GUESS_START_PROGRESS:
                return

            record = round_.simulator.guess(round_.drawing_progress)
            round_.guesses.append(record)

            if record.is_correct:
                award = round_.time_remaining * TIME_BONUS_PER_SECOND + self._round_number * ROUND_BONUS
                self._score += award
                self._finish_round(GameStatus.WON)
                game_logger.log_game_event(
                    self.game_id, 'round_won',
                    round_number=self._round_number, target_word=round_.target_word,
                    guesses_made=len(round_.guesses), time_remaining=round_.time_remaining,
                    award=award, score=self._score
                )
                event = 'round_won'
            else:
                self._schedule_guess()
                event = 'guess'
            state = self._snapshot()

        self._notify(event, state)

    def _notify(self, event: str, state: GameState) -> None:
        if self._listener is not None:
            self._listener(self.game_id, event, state)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def _snapshot(self, include_word: bool = False) -> GameState:
        round_ = self._round
        if round_ is None:
            return GameState(
                game_id=self.game_id,
                status=GameStatus.IDLE.value,
                round_number=self._round_number,
                score=self._score,
                time_remaining=ROUND_SECONDS,
                drawing_progress=0,
                category=None,
                category_label=None,
                guesses=[],
                guess_count=0,
                hints_used=0,
                word_revealed=False,
            )

        show_word = include_word or round_.word_revealed or round_.is_over
        return GameState(
            game_id=self.game_id,
            status=round_.status.value,
            round_number=self._round_number,
            score=self._score,
            time_remaining=round_.time_remaining,
            drawing_progress=round_.drawing_progress,
            category=round_.category,
            category_label=self.word_bank.category_label(round_.category),
            guesses=[record.to_dict() for record in round_.guesses],
            guess_count=len(round_.guesses),
            hints_used=round_.simulator.hint_level,
            word_revealed=round_.word_revealed,
            target_word=round_.target_word if show_word else None,
        )


class GameService:
    """
    Registry of independent single-player sessions.

    Every session shares the scheduler and word bank and receives its own
    random source, derived from the service seed so a seeded server replays
    identically.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None,
                 word_bank: Optional[WordBank] = None,
                 seed: Optional[int] = None):
        self.games: Dict[str, GameSession] = {}
        self.scheduler = scheduler or ThreadingScheduler()
        self.word_bank = word_bank or get_word_bank()
        self._seed_source = random.Random(seed)
        self._state_listener: Optional[StateListener] = None
        self._lock = threading.Lock()

    def set_state_listener(self, listener: Optional[StateListener]) -> None:
        """Registers the callback that receives timer-driven state changes."""
        self._state_listener = listener

    @property
    def state_listener(self) -> Optional[StateListener]:
        return self._state_listener

    def _dispatch(self, game_id: str, event: str, state: GameState) -> None:
        if self._state_listener is not None:
            self._state_listener(game_id, event, state)

    def create_new_game(self) -> str:
        """
        Creates an idle game session.

        Returns:
            str: Unique game ID for this session
        """
        game_id = str(uuid.uuid4())
        with self._lock:
            rng = random.Random(self._seed_source.getrandbits(64))
            self.games[game_id] = GameSession(
                game_id, self.scheduler, self.word_bank, rng, listener=self._dispatch
            )
        return game_id

    def get_session(self, game_id: str) -> Optional[GameSession]:
        return self.games.get(game_id)

    def get_game_state(self, game_id: str) -> Optional[GameState]:
        """
        Returns the current state for a session (without revealing the word).

        Args:
            game_id: Unique game identifier

        Returns:
            GameState object or None if game not found
        """
        session = self.games.get(game_id)
        if session is None:
            return None
        return session.get_state()

    def delete_game(self, game_id: str) -> bool:
        """
        Stops a session's timers and removes it from memory.

        Args:
            game_id: Unique game identifier

        Returns:
            bool: True if game was deleted, False if not found
        """
        with self._lock:
            session = self.games.pop(game_id, None)
        if session is None:
            return False
        session.close()
        return True


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(scheduler: Optional[Scheduler] = None,
                            word_bank: Optional[WordBank] = None,
                            seed: Optional[int] = None) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    previous = _game_service
    _game_service = GameService(scheduler=scheduler, word_bank=word_bank, seed=seed)
    # Carry the adapter listener over to the new instance
    if previous is not None:
        _game_service.set_state_listener(previous.state_listener)
    return _game_service
