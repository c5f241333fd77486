from flask import current_app, request
from flask_socketio import emit

from songwars import socketio
from songwars.exceptions import InvalidPayload, SongWarsError


def _actions():
    return current_app.extensions['songwars']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidPayload('Payload must be an object')
    return data


def _error(exc: SongWarsError):
    emit('error', {'message': exc.message, 'code': exc.code})


def handle_connect(auth=None):
    emit('connected', {'id': _get_sid()})


def handle_disconnect(reason=None):
    _actions().disconnect(_get_sid())


def handle_create_room(data=None):
    sid = _get_sid()
    try:
        room = _actions().create_room(sid, _payload(data).get('hostName'))
    except SongWarsError as exc:
        _error(exc)
        return
    emit('room_created', {'success': True, 'roomCode': room.code, 'role': 'host', 'playerId': sid})


def handle_join_room(data=None):
    try:
        data = _payload(data)
        _actions().join_room(_get_sid(), data.get('roomCode'), data.get('playerName'))
    except SongWarsError as exc:
        emit('join_failed', {'error': exc.message, 'code': exc.code})


def handle_get_room_state(data=None):
    try:
        state = _actions().room_state(_get_sid())
    except SongWarsError as exc:
        emit('room_state', {'error': exc.message})
        return
    emit('room_state', state)


def handle_update_settings(data=None):
    try:
        _actions().update_settings(_get_sid(), _payload(data))
    except SongWarsError as exc:
        _error(exc)


def handle_start_game(data=None):
    try:
        _actions().start_game(_get_sid())
    except SongWarsError as exc:
        _error(exc)


def handle_submit_song(data=None):
    try:
        data = _payload(data)
        _actions().submit_song(_get_sid(), data.get('title'), data.get('artist'))
    except SongWarsError as exc:
        _error(exc)


def handle_submit_vote(data=None):
    try:
        _actions().submit_vote(_get_sid(), _payload(data).get('votedPlayerId'))
    except SongWarsError as exc:
        _error(exc)


def handle_next_battle(data=None):
    try:
        _actions().next_battle(_get_sid())
    except SongWarsError as exc:
        _error(exc)


HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'create_room': handle_create_room,
    'join_room': handle_join_room,
    'get_room_state': handle_get_room_state,
    'update_settings': handle_update_settings,
    'start_game': handle_start_game,
    'submit_song': handle_submit_song,
    'submit_vote': handle_submit_vote,
    'next_battle': handle_next_battle,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register every game event handler on the given namespace."""
    for event, handler in HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
