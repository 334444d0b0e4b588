"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import GameState, GameStatus, GuessPhase, GuessRecord, Round

__all__ = ['GameState', 'GameStatus', 'GuessPhase', 'GuessRecord', 'Round']
