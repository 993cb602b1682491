from flask import current_app
from flask_login import current_user
from flask_socketio import SocketIO, emit, join_room, leave_room

from .errors import NotFound
from .models import Role
from .permissions import has_rank, resolve_role

socketio = SocketIO()


def board_room(board_id):
    return f"board_{board_id}"


def notify_board(board_id):
    # ids only, subscribers re-fetch through the API
    socketio.emit('refresh_board', {'board_id': board_id}, to=board_room(board_id))


def notify_dashboard():
    socketio.emit('refresh_dashboard')


# ------------------ SOCKET.IO EVENTS ------------------
@socketio.on('join_board')
def handle_join(data):
    board_id = (data or {}).get('board_id')
    if not current_user.is_authenticated or not isinstance(board_id, int):
        emit('board_error', {'board_id': board_id, 'message': 'Access denied'})
        return
    try:
        role = resolve_role(board_id, current_user.id)
    except NotFound:
        role = None
    if not has_rank(role, Role.VIEWER):
        current_app.logger.warning("Denied board room %s to user %d", board_id, current_user.id)
        emit('board_error', {'board_id': board_id, 'message': 'Access denied'})
        return
    join_room(board_room(board_id))
    emit('joined_board', {'board_id': board_id})


@socketio.on('leave_board')
def handle_leave(data):
    board_id = (data or {}).get('board_id')
    leave_room(board_room(board_id))
