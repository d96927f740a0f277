"""
Word Pyramid Game Server - Main Entry Point

This is the main entry point for the Word Pyramid game server.
It loads the puzzle deck, initializes the game service and starts the
Flask-SocketIO application.
"""

import os
from word_pyramid import create_app
from word_pyramid.config import config
from word_pyramid.services.game_service import initialize_game_service
from word_pyramid.services.puzzle_loader import load_puzzles
from word_pyramid.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    config_class = config[os.getenv('APP_ENV', 'default')]
    try:
        print("Initializing services...")

        # Load the puzzle deck; an empty deck is served as "no puzzles available"
        puzzles = load_puzzles(config_class.PUZZLE_FILE)
        if puzzles:
            print(f"✓ Loaded {len(puzzles)} puzzles")
        else:
            print("✗ No puzzles loaded - clients will see an empty deck")
            game_logger.logger.warning("Puzzle deck is empty")

        # Initialize game service
        game_service = initialize_game_service(
            puzzles,
            transition_delay_seconds=config_class.TRANSITION_DELAY_SECONDS,
            letter_glow_seconds=config_class.LETTER_GLOW_SECONDS
        )
        if game_service:
            print("✓ Game service initialized successfully")
        else:
            print("✗ Failed to initialize game service")

        # Create Flask app
        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        print("✓ Flask application created successfully")

        game_logger.logger.info(f"Word Pyramid Server Starting with {len(puzzles)} puzzles")

        print(f"\nStarting Word Pyramid Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print("=" * 50)

        # Start the server
        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Word Pyramid Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
