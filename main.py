"""
Who Am I? Game Server - Main Entry Point

This is the main entry point for the game server.
It validates the word catalog and starts the Flask-SocketIO application.
"""

import os

from whoami_game import create_app
from whoami_game.config import config, get_catalog_statistics, validate_word_catalog_integrity
from whoami_game.utils.game_logger import game_logger


def main():
    """Main function to validate configuration and start the server."""
    try:
        config_name = os.getenv('APP_ENV', 'default')
        config_class = config.get(config_name, config['default'])

        print("Validating word catalog...")
        validate_word_catalog_integrity()
        stats = get_catalog_statistics()
        print(f"✓ Word catalog loaded: {stats['total_words']} words in {len(stats['categories'])} categories")

        # Create Flask app
        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        print("✓ Flask application created successfully")

        game_logger.logger.info(f"Who Am I? server starting with '{config_name}' configuration")

        print(f"\nStarting Who Am I? Game Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print(f"Turn duration: {config_class.TURN_DURATION_SECONDS}s, round end mode: {config_class.ROUND_END_MODE}")
        print("=" * 50)

        # Start the server
        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG,
                     allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Who Am I? server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
