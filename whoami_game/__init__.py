"""
Who Am I? Game Server Application Package

Real-time party game server: players join a room, every player gets a secret
identity picked by a partner, and turns rotate until everybody has guessed
their own.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config, GameRules


def _cors_origins(value):
    if not value or value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use

    Returns:
        Tuple of the Flask application and its SocketIO instance, with the
        room directory, turn scheduler and game service wired in
    """
    from .services.broadcaster import RoomBroadcaster
    from .services.game_service import GameService
    from .services.room_directory import RoomDirectory
    from .services.turn_scheduler import TurnScheduler

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    origins = _cors_origins(app.config.get('CORS_ALLOWED_ORIGINS'))
    CORS(app, origins=origins)
    socketio = SocketIO(app, cors_allowed_origins=origins, logger=False, engineio_logger=False)

    # Game services
    rules = GameRules.from_config(app.config)
    scheduler_enabled = not app.config.get('TESTING') or app.config.get('ENABLE_SCHEDULER_IN_TESTS', False)
    directory = RoomDirectory(rules)
    scheduler = TurnScheduler(socketio.start_background_task, socketio.sleep, enabled=scheduler_enabled)
    game_service = GameService(directory, scheduler, RoomBroadcaster(socketio), rules)

    # Register blueprints
    from .controllers.health_controller import health_bp
    app.register_blueprint(health_bp)

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio, game_service)

    # Store instances for use in other modules
    app.socketio = socketio
    app.game_service = game_service

    return app, socketio
