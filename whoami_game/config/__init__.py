"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: word catalog and game rules (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    ALL_WORDS,
    DEFAULT_CUSTOM_HINT,
    ROUND_END_AUTO_RESTART,
    ROUND_END_LOBBY,
    WORD_CATALOG,
    GameRules,
    find_word,
    get_catalog_statistics,
    validate_word_catalog_integrity,
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'WORD_CATALOG', 'ALL_WORDS', 'DEFAULT_CUSTOM_HINT', 'ROUND_END_LOBBY',
    'ROUND_END_AUTO_RESTART', 'GameRules', 'find_word',
    'validate_word_catalog_integrity', 'get_catalog_statistics'
]
