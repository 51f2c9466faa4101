import random
import string

import pytest

from whoami_game.config import GameRules
from whoami_game.models import RoomPhase
from whoami_game.services.errors import (
    GameInProgressError,
    InvalidActorError,
    InvalidPayloadError,
    RoomCapacityError,
    RoomFullError,
    RoomNotFoundError,
)
from whoami_game.services.room_directory import RoomDirectory, normalize_room_id


class FixedCodeRandom(random.Random):
    """Always draws the same character, so every room code collides."""

    def choices(self, population, weights=None, *, cum_weights=None, k=1):
        return [population[0]] * k


@pytest.fixture()
def directory():
    return RoomDirectory(GameRules(max_players=3, max_name_length=8), rng=random.Random(1))


def test_create_room_makes_host_sole_member(directory):
    room = directory.create_room('h1', '  Alice ')

    assert len(room.id) == 6
    assert set(room.id) <= set(string.ascii_uppercase + string.digits)
    assert room.host_id == 'h1'
    assert room.phase == RoomPhase.WAITING
    assert list(room.players) == ['h1']
    assert room.players['h1'].name == 'Alice'
    assert directory.room_of('h1') is room
    assert len(directory) == 1


def test_names_are_required_and_truncated(directory):
    with pytest.raises(InvalidPayloadError):
        directory.create_room('h1', '   ')
    with pytest.raises(InvalidPayloadError):
        directory.create_room('h1', None)
    room = directory.create_room('h1', 'Bartholomew')
    assert room.players['h1'].name == 'Bartholo'


def test_join_is_case_insensitive(directory):
    room = directory.create_room('h1', 'Alice')
    joined = directory.join_room(f"  {room.id.lower()} ", 'h2', 'Bob')
    assert joined is room
    assert list(room.players) == ['h1', 'h2']
    assert directory.get(room.id.lower()) is room


def test_join_errors(directory):
    with pytest.raises(RoomNotFoundError):
        directory.join_room('ZZZZZZ', 'h2', 'Bob')
    with pytest.raises(RoomNotFoundError):
        directory.join_room(None, 'h2', 'Bob')

    room = directory.create_room('h1', 'Alice')
    with pytest.raises(InvalidActorError):
        directory.join_room(room.id, 'h1', 'Alice')

    directory.join_room(room.id, 'h2', 'Bob')
    directory.join_room(room.id, 'h3', 'Cid')
    with pytest.raises(RoomFullError):
        directory.join_room(room.id, 'h4', 'Dee')
    assert directory.room_of('h4') is None


def test_join_rejected_once_game_started(directory):
    room = directory.create_room('h1', 'Alice')
    room.phase = RoomPhase.PICKING
    with pytest.raises(GameInProgressError):
        directory.check_joinable(room.id, 'h2')


def test_handle_cannot_hold_two_rooms(directory):
    first = directory.create_room('h1', 'Alice')
    second = directory.create_room('h2', 'Bob')
    with pytest.raises(InvalidActorError):
        directory.create_room('h1', 'Alice')
    with pytest.raises(InvalidActorError):
        directory.join_room(second.id, 'h1', 'Alice')
    assert directory.room_of('h1') is first


def test_room_codes_run_out():
    directory = RoomDirectory(GameRules(room_code_attempts=3), rng=FixedCodeRandom())
    room = directory.create_room('h1', 'Alice')
    assert room.id == 'AAAAAA'
    with pytest.raises(RoomCapacityError):
        directory.create_room('h2', 'Bob')


def test_remove_player_passes_host_on(directory):
    room = directory.create_room('h1', 'Alice')
    directory.join_room(room.id, 'h2', 'Bob')
    directory.join_room(room.id, 'h3', 'Cid')

    removed = directory.remove_player(room.id, 'h1')
    assert removed.name == 'Alice'
    assert room.host_id == 'h2'
    assert directory.room_of('h1') is None
    assert directory.remove_player(room.id, 'h1') is None


def test_delete_room_clears_index(directory):
    room = directory.create_room('h1', 'Alice')
    directory.join_room(room.id, 'h2', 'Bob')

    assert directory.delete_room(room.id) is room
    assert directory.get(room.id) is None
    assert directory.room_of('h1') is None
    assert directory.room_of('h2') is None
    assert directory.delete_room(room.id) is None
    assert len(directory) == 0


def test_normalize_room_id():
    assert normalize_room_id(' ab12cd ') == 'AB12CD'
    assert normalize_room_id('   ') is None
    assert normalize_room_id(42) is None
