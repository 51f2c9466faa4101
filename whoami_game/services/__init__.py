"""
Services Package

Contains all business logic and service classes.
"""

from .broadcaster import RoomBroadcaster
from .errors import (
    GameError,
    GameInProgressError,
    InvalidActorError,
    InvalidPayloadError,
    NotEnoughPlayersError,
    RoomCapacityError,
    RoomFullError,
    RoomNotFoundError,
)
from .game_service import GameService, all_ready, choose_turn_order, cyclic_pairs
from .room_directory import RoomDirectory
from .turn_scheduler import TurnScheduler

__all__ = [
    'GameService', 'RoomDirectory', 'TurnScheduler', 'RoomBroadcaster',
    'all_ready', 'choose_turn_order', 'cyclic_pairs',
    'GameError', 'RoomNotFoundError', 'RoomFullError', 'GameInProgressError',
    'NotEnoughPlayersError', 'InvalidActorError', 'InvalidPayloadError',
    'RoomCapacityError'
]
