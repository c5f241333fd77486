import os
import random
import sys
import pytest

# Ensure the backend root (containing the `songwars` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from songwars import create_app, socketio
from songwars.models import Participant, Room
from songwars.services.battles import BattleEngine
from songwars.services.rooms import RoomRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['*']
    YOUTUBE_API_KEY = None
    RANDOM_SEED = 7
    LOG_LEVEL = 'DEBUG'


class FakeGateway:
    """Records published snapshots instead of emitting them."""

    def __init__(self):
        self.published = []

    def publish(self, room):
        self.published.append(room.to_dict())

    def snapshot(self, room):
        return room.to_dict()


class DeferredSpawn:
    """Holds spawned work until the test releases it."""

    def __init__(self):
        self.pending = []

    def __call__(self, fn, *args):
        self.pending.append((fn, args))

    def run_all(self):
        pending, self.pending = self.pending, []
        for fn, args in pending:
            fn(*args)


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def registry():
    return RoomRegistry(rng=random.Random(1))


@pytest.fixture()
def engine(registry, gateway):
    return BattleEngine(registry, gateway, lookup=None, rng=random.Random(42))


@pytest.fixture()
def make_room(registry):
    """Create a registered room with host H and the given participant names."""
    def _make(*names, points_to_win=5):
        room = registry.create('H', 'Host')
        room.settings.points_to_win = points_to_win
        for name in names:
            room.participants[name] = Participant(id=name, name=name)
            room.scores[name] = 0
        return room
    return _make


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def connect(flask_app):
    """Factory for additional Socket.IO clients, disconnected on teardown."""
    clients = []

    def _connect():
        c = socketio.test_client(flask_app)
        clients.append(c)
        return c
    yield _connect
    for c in clients:
        if c.is_connected():
            c.disconnect()
