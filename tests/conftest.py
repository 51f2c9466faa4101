import os
import sys
import random
import tempfile
from collections import defaultdict

import pytest

# Keep test logs out of the working tree
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='whoami-logs-'))

# Ensure the project root (containing the `whoami_game` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from whoami_game import create_app
from whoami_game.config import GameRules, TestingConfig
from whoami_game.services.game_service import GameService
from whoami_game.services.room_directory import RoomDirectory
from whoami_game.services.turn_scheduler import TurnScheduler


class RecordingBroadcaster:
    """Stands in for the Socket.IO layer and remembers everything sent."""

    def __init__(self):
        self.sent = []  # (target, event, payload)
        self.members = defaultdict(set)
        self.closed = []

    def to_room(self, room_id, event, payload=None):
        self.sent.append((room_id, event, payload))

    def to_player(self, handle, event, payload=None):
        self.sent.append((handle, event, payload))

    def enter_room(self, handle, room_id):
        self.members[room_id].add(handle)

    def leave_room(self, handle, room_id):
        self.members[room_id].discard(handle)

    def close_room(self, room_id):
        self.closed.append(room_id)
        self.members.pop(room_id, None)

    def events(self, event, target=None):
        return [
            payload for sent_to, name, payload in self.sent
            if name == event and (target is None or sent_to == target)
        ]

    def names(self):
        return [name for _, name, _ in self.sent]

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def rules():
    return GameRules(hint_skip_threshold=3)


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def scheduler():
    return TurnScheduler(lambda *args, **kwargs: None, lambda seconds: None, enabled=False)


@pytest.fixture()
def service(rules, scheduler, broadcaster):
    directory = RoomDirectory(rules, rng=random.Random(7))
    return GameService(directory, scheduler, broadcaster, rules, rng=random.Random(42))


@pytest.fixture()
def make_room(service):
    """Create a waiting room holding one player per handle; the first is host."""
    def _make_room(*handles):
        room = service.create_room(handles[0], handles[0].upper())
        for handle in handles[1:]:
            service.join_room(handle, room.id, handle.upper())
        return room
    return _make_room


@pytest.fixture()
def picking_room(service, make_room):
    """Room already in the picking phase."""
    def _picking_room(*handles):
        room = make_room(*handles)
        service.start_game(handles[0], room.id)
        return room
    return _picking_room


@pytest.fixture()
def playing_room(service, picking_room):
    """Room in the playing phase; every receiver gets the word '<handle>-word'."""
    def _playing_room(*handles):
        room = picking_room(*handles)
        for giver_id, receiver_id in list(room.pairs.items()):
            service.submit_custom_word(giver_id, room.id, f"{receiver_id}-word", f"{receiver_id} hint")
        for handle in handles:
            service.set_ready(handle, room.id)
        return room
    return _playing_room


@pytest.fixture()
def flask_app():
    application, socketio = create_app(TestingConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = flask_app.socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
