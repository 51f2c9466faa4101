"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 3000))
    CORS_ALLOWED_ORIGINS = os.getenv('CORS_ALLOWED_ORIGINS', '*')

    # Room Settings
    MAX_PLAYERS_PER_ROOM = int(os.getenv('MAX_PLAYERS_PER_ROOM', 10))
    MIN_PLAYERS = int(os.getenv('MIN_PLAYERS', 2))
    ROOM_CODE_LENGTH = int(os.getenv('ROOM_CODE_LENGTH', 6))
    ROOM_CODE_MAX_ATTEMPTS = int(os.getenv('ROOM_CODE_MAX_ATTEMPTS', 100))
    MAX_NAME_LENGTH = int(os.getenv('MAX_NAME_LENGTH', 24))

    # Game Settings
    TURN_DURATION_SECONDS = float(os.getenv('TURN_DURATION_SECONDS', 45))
    ROUND_END_DELAY_SECONDS = float(os.getenv('ROUND_END_DELAY_SECONDS', 5))
    ROUND_END_MODE = os.getenv('ROUND_END_MODE', 'lobby')  # "lobby" or "auto_restart"
    HINT_SKIP_THRESHOLD = int(os.getenv('HINT_SKIP_THRESHOLD', 12))
    WORD_CHOICES_COUNT = int(os.getenv('WORD_CHOICES_COUNT', 6))
    PAIRING_MAX_ATTEMPTS = int(os.getenv('PAIRING_MAX_ATTEMPTS', 50))

    # Scheduler never sleeps in tests unless explicitly enabled
    ENABLE_SCHEDULER_IN_TESTS = False

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    SECRET_KEY = 'test-secret'


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
