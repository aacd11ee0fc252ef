import os
import sys
from collections import defaultdict
import pytest

# Ensure the backend root (containing the `drawrelay` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from drawrelay import create_app, socketio
from drawrelay.rooms import RoomRegistry
from drawrelay.turns import TurnRouter


class TestConfig(Config):
    TESTING = True
    CORS_ORIGINS = ['http://localhost:3000']
    SOCKETIO_NAMESPACE = '/'


class RecordingTransport:
    """In-memory stand-in for the Socket.IO transport.

    Resolves room broadcasts to individual connections so tests can assert
    on what each client would have received.
    """

    def __init__(self):
        self.groups = defaultdict(list)
        self.received = defaultdict(list)
        self.sent = []

    def join(self, conn_id, room):
        if conn_id not in self.groups[room]:
            self.groups[room].append(conn_id)

    def disconnect(self, conn_id):
        for members in self.groups.values():
            if conn_id in members:
                members.remove(conn_id)

    def _deliver(self, recipients, event, payload):
        for conn_id in recipients:
            self.received[conn_id].append((event, payload))

    def send_to_room(self, room, event, payload=None):
        self.sent.append(('room', room, event, payload))
        self._deliver(self.groups.get(room, []), event, payload)

    def send_to_room_except(self, room, exclude_conn_id, event, payload=None):
        self.sent.append(('room-except', room, event, payload))
        self._deliver([c for c in self.groups.get(room, []) if c != exclude_conn_id], event, payload)

    def send_to_connection(self, conn_id, event, payload=None):
        self.sent.append(('connection', conn_id, event, payload))
        self._deliver([conn_id], event, payload)

    def flush(self):
        self.received.clear()
        self.sent.clear()


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def registry():
    return RoomRegistry()


@pytest.fixture()
def router(transport, registry):
    return TurnRouter(transport, registry=registry)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_client(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
