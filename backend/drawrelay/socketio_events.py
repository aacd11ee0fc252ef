from flask import current_app, request
from drawrelay import socketio
from drawrelay.turns import (
    TurnRouter,
    JOIN_ROOM,
    PASS_TURN,
    START_DRAWING,
    DRAWING,
    FINISH_DRAWING,
    CLEAR_CANVAS,
)


def _get_sid() -> str:
    return request.sid  # type: ignore


def _router() -> TurnRouter:
    return current_app.extensions['drawrelay']


def handle_connect():
    _router().on_connect(_get_sid())


def handle_disconnect(reason=None):
    _router().on_disconnect(_get_sid())


def handle_join_room(room_name=None):
    _router().on_join(_get_sid(), room_name)


def handle_pass_turn(data=None):
    _router().on_pass_turn(_get_sid(), data)


def handle_start_drawing(data=None):
    _router().on_start_drawing(_get_sid(), data)


def handle_drawing(data=None):
    _router().on_drawing(_get_sid(), data)


def handle_finish_drawing(data=None):
    _router().on_finish_drawing(_get_sid(), data)


def handle_clear_canvas(data=None):
    _router().on_clear_canvas(_get_sid(), data)


def handle_error(exc):
    event = (getattr(request, 'event', None) or {}).get('message')
    current_app.logger.exception(f"[socketio-error] sid={_get_sid()} event={event}: {exc}")


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event(JOIN_ROOM, handle_join_room, namespace=namespace)
    socketio.on_event(PASS_TURN, handle_pass_turn, namespace=namespace)
    socketio.on_event(START_DRAWING, handle_start_drawing, namespace=namespace)
    socketio.on_event(DRAWING, handle_drawing, namespace=namespace)
    socketio.on_event(FINISH_DRAWING, handle_finish_drawing, namespace=namespace)
    socketio.on_event(CLEAR_CANVAS, handle_clear_canvas, namespace=namespace)
    socketio.on_error_default(handle_error)
