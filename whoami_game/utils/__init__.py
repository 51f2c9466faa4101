"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .game_logger import game_logger
from .helpers import extract_room_id, payload_value

__all__ = ['game_logger', 'extract_room_id', 'payload_value']
