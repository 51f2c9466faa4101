"""
Socket Event Decorators

Wraps WebSocket handlers with action logging and the error reporting policy:
game errors go back to the acting connection only, role violations are
dropped quietly, nothing ever tears down a room.
"""

from functools import wraps
from flask import request
from flask_socketio import emit

from ..services.errors import GameError, InvalidActorError
from .game_logger import game_logger
from .helpers import extract_room_id


def socket_action(action: str, error_event: str = 'gameError', report_invalid_actor: bool = False):
    """
    Decorator for inbound game events.

    Args:
        action: Event name used in the logs
        error_event: Event used to report a GameError to the actor
        report_invalid_actor: Also report InvalidActorError instead of dropping it
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(data=None):
            sid = request.sid
            room_id = extract_room_id(data)
            game_logger.log_player_action(sid, action, room_id)
            try:
                return f(data)
            except InvalidActorError as e:
                game_logger.log_rejected_action(sid, action, e.message, room_id)
                if report_invalid_actor:
                    emit(error_event, {'message': e.message})
            except GameError as e:
                game_logger.log_rejected_action(sid, action, e.message, room_id)
                emit(error_event, {'message': e.message})
            except Exception as e:
                game_logger.log_error(e, action, room_id=room_id, player_id=sid)
                emit('gameError', {'message': 'Something went wrong, please try again.'})

        return decorated_function

    return decorator
