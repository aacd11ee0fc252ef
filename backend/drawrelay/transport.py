from flask_socketio import join_room


class SocketIOTransport:
    """Delivery primitives the TurnRouter sends through, backed by Flask-SocketIO.

    A payload of None emits the event with no arguments.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def _emit(self, event: str, payload=None, **kwargs) -> None:
        if payload is None:
            self.socketio.emit(event, namespace=self.namespace, **kwargs)
        else:
            self.socketio.emit(event, payload, namespace=self.namespace, **kwargs)

    def join(self, conn_id: str, room: str) -> None:
        join_room(room, sid=conn_id, namespace=self.namespace)

    def send_to_room(self, room: str, event: str, payload=None) -> None:
        self._emit(event, payload, to=room)

    def send_to_room_except(self, room: str, exclude_conn_id: str, event: str, payload=None) -> None:
        self._emit(event, payload, to=room, skip_sid=exclude_conn_id)

    def send_to_connection(self, conn_id: str, event: str, payload=None) -> None:
        self._emit(event, payload, to=conn_id)
