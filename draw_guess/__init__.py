"""
Draw & Guess Game Server Application Package

A single-player drawing game: the player draws a secret word while a simulated
guesser works towards it from drawing progress and attempt count. The package
holds the word bank, the guess simulator, the round state machine and the
HTTP / WebSocket adapters used by the canvas front end.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use

    Returns:
        Flask application instance with all extensions initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app, origins=config_class.CORS_ALLOWED_ORIGINS)
    socketio = SocketIO(
        app,
        cors_allowed_origins=config_class.CORS_ALLOWED_ORIGINS,
        async_mode='threading',
        logger=False,
        engineio_logger=False
    )

    # Register blueprints
    from .controllers.game_controller import game_bp

    app.register_blueprint(game_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
