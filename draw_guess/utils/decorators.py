"""
Session Decorators

Contains decorators that resolve the game session for HTTP and WebSocket handlers.
"""

from functools import wraps
from flask import jsonify
from flask_socketio import emit


def require_game_session(f):
    """
    Decorator for HTTP endpoints taking a <game_id> URL parameter.
    Passes the resolved GameSession as the `session` keyword argument.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.game_service import get_game_service

        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        session = game_service.get_session(kwargs.get('game_id'))
        if session is None:
            return jsonify({
                'success': False,
                'error': 'Game not found'
            }), 404

        kwargs['session'] = session
        return f(*args, **kwargs)

    return decorated_function


def websocket_session_required(f):
    """Decorator for WebSocket events whose payload carries a game_id."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.game_service import get_game_service

        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return

        data = args[0] if args and isinstance(args[0], dict) else {}
        game_id = data.get('game_id')
        if not game_id:
            emit('error', {'error': 'Game ID is required'})
            return

        session = game_service.get_session(game_id)
        if session is None:
            emit('error', {'error': 'Game not found', 'game_id': game_id})
            return

        kwargs['session'] = session
        return f(*args, **kwargs)

    return decorated_function
