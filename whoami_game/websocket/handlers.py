"""
WebSocket Event Handlers

Inbound side of the connection registry: resolves each Socket.IO event to
the acting connection (its sid) and hands it to the game service.
"""

from flask import request

from ..utils.decorators import socket_action
from ..utils.game_logger import game_logger
from ..utils.helpers import extract_room_id, payload_value


def register_websocket_handlers(socketio, game_service):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        game_logger.log_player_action(request.sid, 'connect')

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Handle WebSocket disconnection."""
        sid = request.sid
        try:
            room_id = game_service.handle_disconnect(sid)
            game_logger.log_player_action(sid, 'disconnect', room_id)
        except Exception as e:
            game_logger.log_error(e, 'disconnect', player_id=sid)

    @socketio.on('createRoom')
    @socket_action('createRoom', error_event='joinError', report_invalid_actor=True)
    def handle_create_room(data):
        game_service.create_room(request.sid, payload_value(data, 'playerName'))

    @socketio.on('joinRoom')
    @socket_action('joinRoom', error_event='joinError', report_invalid_actor=True)
    def handle_join_room(data):
        game_service.join_room(request.sid, payload_value(data, 'roomId'), payload_value(data, 'playerName'))

    @socketio.on('startGame')
    @socket_action('startGame')
    def handle_start_game(data):
        game_service.start_game(request.sid, extract_room_id(data))

    @socketio.on('startAgain')
    @socket_action('startAgain')
    def handle_start_again(data):
        game_service.start_again(request.sid, extract_room_id(data))

    @socketio.on('submitWord')
    @socket_action('submitWord')
    def handle_submit_word(data):
        game_service.submit_word(request.sid, extract_room_id(data), payload_value(data, 'word'))

    @socketio.on('submitCustomWord')
    @socket_action('submitCustomWord')
    def handle_submit_custom_word(data):
        game_service.submit_custom_word(
            request.sid,
            extract_room_id(data),
            payload_value(data, 'customWord'),
            payload_value(data, 'customHint'),
        )

    @socketio.on('setReady')
    @socket_action('setReady')
    def handle_set_ready(data):
        game_service.set_ready(request.sid, extract_room_id(data))

    @socketio.on('setUnready')
    @socket_action('setUnready')
    def handle_set_unready(data):
        game_service.set_unready(request.sid, extract_room_id(data))

    @socketio.on('makeGuess')
    @socket_action('makeGuess')
    def handle_make_guess(data):
        game_service.make_guess(request.sid, extract_room_id(data), payload_value(data, 'guess'))

    @socketio.on('skipTurn')
    @socket_action('skipTurn')
    def handle_skip_turn(data):
        game_service.skip_turn(request.sid, extract_room_id(data))

    @socketio.on('getHint')
    @socket_action('getHint')
    def handle_get_hint(data):
        game_service.get_hint(request.sid, extract_room_id(data))
