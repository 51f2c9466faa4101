"""
Room Directory

Owns every room and the connection handle -> room index.
"""

import random
import string
from typing import Dict, Iterator, Optional

from ..config.game_settings import GameRules
from ..models.room import Player, Room, RoomPhase
from .errors import (
    GameInProgressError,
    InvalidActorError,
    InvalidPayloadError,
    RoomCapacityError,
    RoomFullError,
    RoomNotFoundError,
)

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_room_id(room_id) -> Optional[str]:
    if not isinstance(room_id, str):
        return None
    room_id = room_id.strip().upper()
    return room_id or None


class RoomDirectory:
    """
    In-memory registry of rooms.

    Membership changes only go through this class so the handle index stays
    in sync with ``Room.players``. Phase rules beyond join validation belong
    to the game service.
    """

    def __init__(self, rules: GameRules = None, rng: random.Random = None):
        self.rules = rules or GameRules()
        self.rng = rng or random.Random()
        self.rooms: Dict[str, Room] = {}
        self.handle_to_room: Dict[str, str] = {}  # handle -> room_id

    def __len__(self) -> int:
        return len(self.rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self.rooms.values()))

    def clean_name(self, player_name) -> str:
        if not isinstance(player_name, str) or not player_name.strip():
            raise InvalidPayloadError("Player name is required.")
        return player_name.strip()[:self.rules.max_name_length]

    def new_room_id(self) -> str:
        """Draw an unused room code, raising RoomCapacityError when none is found."""
        for _ in range(self.rules.room_code_attempts):
            code = ''.join(self.rng.choices(ROOM_CODE_ALPHABET, k=self.rules.room_code_length))
            if code not in self.rooms:
                return code
        raise RoomCapacityError()

    def create_room(self, host_handle: str, host_name: str, room_id: Optional[str] = None) -> Room:
        """
        Create a room in the waiting phase with the host as sole member.

        ``room_id`` is a code previously drawn with :meth:`new_room_id`; a
        fresh one is drawn when it is missing or has been taken since.
        """
        name = self.clean_name(host_name)
        if host_handle in self.handle_to_room:
            raise InvalidActorError("Leave your current room first.")

        if room_id is None or room_id in self.rooms:
            room_id = self.new_room_id()
        room = Room(id=room_id, host_id=host_handle)
        room.players[host_handle] = Player(id=host_handle, name=name)
        self.rooms[room.id] = room
        self.handle_to_room[host_handle] = room.id
        return room

    def check_joinable(self, room_id, handle: str) -> Room:
        """Validate a join without changing anything."""
        room = self.rooms.get(normalize_room_id(room_id))
        if room is None:
            raise RoomNotFoundError()
        if handle in room.players:
            raise InvalidActorError("Already in this room.")
        if len(room.players) >= self.rules.max_players:
            raise RoomFullError()
        if room.phase != RoomPhase.WAITING:
            raise GameInProgressError()
        return room

    def join_room(self, room_id, handle: str, player_name) -> Room:
        """Add a player to a waiting room."""
        name = self.clean_name(player_name)
        room = self.check_joinable(room_id, handle)
        if handle in self.handle_to_room:
            raise InvalidActorError("Leave your current room first.")

        room.players[handle] = Player(id=handle, name=name)
        self.handle_to_room[handle] = room.id
        return room

    def get(self, room_id) -> Optional[Room]:
        return self.rooms.get(normalize_room_id(room_id))

    def room_of(self, handle: str) -> Optional[Room]:
        room_id = self.handle_to_room.get(handle)
        if room_id is None:
            return None
        return self.rooms.get(room_id)

    def remove_player(self, room_id: str, handle: str) -> Optional[Player]:
        """
        Detach a player from a room.

        Returns the removed player, or None if the handle was not a member.
        The host passes to the earliest-joined remaining player. Empty rooms
        are left in place; deciding teardown is the caller's job.
        """
        room = self.rooms.get(room_id)
        if room is None or handle not in room.players:
            return None

        player = room.players.pop(handle)
        self.handle_to_room.pop(handle, None)
        if room.host_id == handle and room.players:
            room.host_id = next(iter(room.players))
        return player

    def delete_room(self, room_id: str) -> Optional[Room]:
        room = self.rooms.pop(room_id, None)
        if room is None:
            return None
        for handle in room.players:
            if self.handle_to_room.get(handle) == room_id:
                del self.handle_to_room[handle]
        return room
