"""
WebSocket Event Handlers

Handles the real-time channel between the drawing canvas and game sessions:
inbound player actions and outbound state pushes for timer-driven changes.
"""

from dataclasses import asdict
from flask import request
from flask_socketio import emit, join_room, leave_room
from ..services.game_service import get_game_service
from ..utils.decorators import websocket_session_required
from ..utils.game_logger import game_logger

# Games each connected socket has joined
connected_clients = {}  # sid -> set of game_ids


def game_room(game_id):
    return f"game_{game_id}"


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    def broadcast_state(game_id, event, state):
        socketio.emit('game_state_update', {
            'game_id': game_id,
            'event': event,
            'state': asdict(state)
        }, room=game_room(game_id))

    game_service = get_game_service()
    if game_service:
        game_service.set_state_listener(broadcast_state)

    def run_action(action, session, operation):
        game_logger.log_user_action(request, action, session.game_id)
        state = operation()
        broadcast_state(session.game_id, action, state)
        return state

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        connected_clients[request.sid] = set()

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Close every game the socket joined so no timer outlives its player."""
        game_ids = connected_clients.pop(request.sid, set())
        game_service = get_game_service()
        if not game_service:
            return

        for game_id in game_ids:
            if game_service.delete_game(game_id):
                game_logger.log_game_event(
                    game_id, 'player_disconnected', request.sid, reason='socket_closed'
                )

    @socketio.on('join_game')
    @websocket_session_required
    def handle_join_game(data, session=None):
        """Join a game's room and receive its current state."""
        try:
            game_service = get_game_service()
            if game_service.state_listener is not broadcast_state:
                game_service.set_state_listener(broadcast_state)

            join_room(game_room(session.game_id))
            connected_clients.setdefault(request.sid, set()).add(session.game_id)
            game_logger.log_user_action(request, 'join_game', session.game_id)

            emit('game_state_update', {
                'game_id': session.game_id,
                'event': 'joined',
                'state': asdict(session.get_state())
            })
        except Exception as e:
            game_logger.log_error(request, e, 'join_game', session.game_id)
            emit('error', {'error': str(e)})

    @socketio.on('leave_game')
    @websocket_session_required
    def handle_leave_game(data, session=None):
        """Stop receiving updates for a game without closing it."""
        leave_room(game_room(session.game_id))
        connected_clients.get(request.sid, set()).discard(session.game_id)
        emit('left_game', {'game_id': session.game_id})

    @socketio.on('start_game')
    @websocket_session_required
    def handle_start_game(data, session=None):
        try:
            run_action('start', session, session.start)
        except Exception as e:
            game_logger.log_error(request, e, 'start', session.game_id)
            emit('error', {'error': str(e)})

    @socketio.on('next_round')
    @websocket_session_required
    def handle_next_round(data, session=None):
        try:
            run_action('next_round', session, session.next_round)
        except Exception as e:
            game_logger.log_error(request, e, 'next_round', session.game_id)
            emit('error', {'error': str(e)})

    @socketio.on('reset_game')
    @websocket_session_required
    def handle_reset_game(data, session=None):
        try:
            run_action('reset_game', session, session.reset_game)
        except Exception as e:
            game_logger.log_error(request, e, 'reset_game', session.game_id)
            emit('error', {'error': str(e)})

    @socketio.on('draw_action')
    @websocket_session_required
    def handle_draw_action(data, session=None):
        """One atomic drawing action on the canvas. Only the sender gets the new state."""
        try:
            state = session.report_draw_action()
            emit('game_state_update', {
                'game_id': session.game_id,
                'event': 'draw_action',
                'state': asdict(state)
            })
        except Exception as e:
            game_logger.log_error(request, e, 'draw_action', session.game_id)
            emit('error', {'error': str(e)})

    @socketio.on('reveal_word')
    @websocket_session_required
    def handle_reveal_word(data, session=None):
        try:
            game_logger.log_user_action(request, 'reveal_word', session.game_id)
            emit('game_state_update', {
                'game_id': session.game_id,
                'event': 'reveal_word',
                'state': asdict(session.reveal_word())
            })
        except Exception as e:
            game_logger.log_error(request, e, 'reveal_word', session.game_id)
            emit('error', {'error': str(e)})

    @socketio.on('request_hint')
    @websocket_session_required
    def handle_request_hint(data, session=None):
        try:
            game_logger.log_user_action(request, 'request_hint', session.game_id)
            hint = session.request_hint()
            if hint is None:
                emit('error', {'error': 'Hints are only available during a round'})
                return

            emit('hint', {'game_id': session.game_id, 'hint': hint})
            broadcast_state(session.game_id, 'request_hint', session.get_state())
        except Exception as e:
            game_logger.log_error(request, e, 'request_hint', session.game_id)
            emit('error', {'error': str(e)})
