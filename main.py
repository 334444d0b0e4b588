"""
Draw & Guess Game Server - Main Entry Point

This is the main entry point for the game server.
It initializes the game service and starts the Flask-SocketIO application.
"""

from draw_guess import create_app
from draw_guess.config import Config, validate_word_catalog_integrity
from draw_guess.services.game_service import initialize_game_service
from draw_guess.services.scheduler import ThreadingScheduler
from draw_guess.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")

        validate_word_catalog_integrity()
        print("✓ Word catalog validated")

        game_service = initialize_game_service(scheduler=ThreadingScheduler(), seed=Config.RANDOM_SEED)
        print(f"✓ Game service initialized ({len(game_service.word_bank)} words, "
              f"seed={'random' if Config.RANDOM_SEED is None else Config.RANDOM_SEED})")

        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        game_logger.logger.info("Draw & Guess Server Starting")

        print(f"\nStarting Draw & Guess Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG,
                     allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Draw & Guess Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
