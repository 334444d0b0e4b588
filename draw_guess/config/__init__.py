"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules, scoring constants and the word catalog
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    CATEGORY_LABELS,
    ROUND_SECONDS,
    WORD_CATALOG,
    get_word_statistics,
    validate_word_catalog_integrity,
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'WORD_CATALOG', 'CATEGORY_LABELS', 'ROUND_SECONDS',
    'validate_word_catalog_integrity', 'get_word_statistics'
]
