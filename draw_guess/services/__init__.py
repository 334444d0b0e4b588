"""
Services Package

Contains all business logic and service classes.
"""

from .word_bank import WordBank, get_word_bank
from .guess_simulator import GuessSimulator
from .scheduler import ManualScheduler, Scheduler, ThreadingScheduler
from .game_service import GameService, GameSession, get_game_service, initialize_game_service

__all__ = [
    'WordBank', 'get_word_bank',
    'GuessSimulator',
    'Scheduler', 'ThreadingScheduler', 'ManualScheduler',
    'GameService', 'GameSession', 'get_game_service', 'initialize_game_service'
]
