"""
Game Service

Contains the room state machine: room lifecycle, partner pairing, word
submission, the ready gate, turn rotation, guesses, skips, hints and
disconnect handling.
"""

import random
import threading
from functools import wraps
from typing import Dict, List, Optional, Sequence

from ..config.game_settings import (
    ALL_WORDS,
    DEFAULT_CUSTOM_HINT,
    ROUND_END_AUTO_RESTART,
    GameRules,
    find_word,
)
from ..models.room import Player, Room, RoomPhase, WordEntry
from ..utils.game_logger import game_logger
from .errors import (
    GameInProgressError,
    InvalidActorError,
    InvalidPayloadError,
    NotEnoughPlayersError,
    RoomNotFoundError,
)
from .room_directory import RoomDirectory

# Pairing and turn order cannot be kept consistent below this many players
ABORT_BELOW_PLAYERS = 2

ABORT_MESSAGE = "Not enough players to continue. The game has ended."


def cyclic_pairs(order: Sequence[str]) -> Dict[str, str]:
    """Giver i -> receiver i+1 (mod n). Two players end up paired with each other."""
    n = len(order)
    if n < 2:
        return {}
    return {order[i]: order[(i + 1) % n] for i in range(n)}


def repeats_last_partner(players: Dict[str, Player], order: Sequence[str]) -> bool:
    for giver_id, receiver_id in cyclic_pairs(order).items():
        giver = players.get(giver_id)
        if giver is not None and giver.last_partner_id == receiver_id:
            return True
    return False


def choose_turn_order(players: Dict[str, Player], rng: random.Random, max_attempts: int) -> List[str]:
    """
    Shuffle until the induced pairing gives nobody last round's partner.

    After ``max_attempts`` candidates the last one is used even if it repeats
    a partner; that is a degraded round, not an error.
    """
    order = list(players)
    for _ in range(max(1, max_attempts)):
        rng.shuffle(order)
        if not repeats_last_partner(players, order):
            return order
    return order


def all_ready(room: Room) -> bool:
    """Every player is ready and holds a word."""
    return bool(room.players) and all(
        player.is_ready and player.current_word is not None
        for player in room.players.values()
    )


def words_match(guess: str, word: str) -> bool:
    return guess.strip().lower() == word.strip().lower()


def _serialized(method):
    """Run a public operation under the service lock."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class GameService:
    """
    Room state machine.

    Every public method and every timer callback runs under one re-entrant
    lock, so a room is never mutated by two events at once. Outbound events go
    through the broadcaster; timeouts go through the turn scheduler.
    """

    def __init__(self,
                 directory: RoomDirectory,
                 scheduler,
                 broadcaster,
                 rules: Optional[GameRules] = None,
                 rng: Optional[random.Random] = None):
        self.directory = directory
        self.scheduler = scheduler
        self.broadcaster = broadcaster
        self.rules = rules or directory.rules
        self.catalog: List[WordEntry] = list(ALL_WORDS)
        self.rng = rng or random.Random()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lobby
    # ------------------------------------------------------------------

    @_serialized
    def create_room(self, handle: str, player_name) -> Room:
        """Create a room with ``handle`` as host, leaving any previous room."""
        self.directory.clean_name(player_name)
        room_id = self.directory.new_room_id()
        self._leave_current_room(handle)

        room = self.directory.create_room(handle, player_name, room_id=room_id)
        self.broadcaster.enter_room(handle, room.id)
        self.broadcaster.to_player(handle, 'roomCreated', {
            'roomId': room.id,
            'hostId': room.host_id,
            'players': room.players_snapshot(),
        })
        game_logger.log_game_event(room.id, 'room_created', handle)
        return room

    @_serialized
    def join_room(self, handle: str, room_id, player_name) -> Room:
        self.directory.clean_name(player_name)
        self.directory.check_joinable(room_id, handle)
        self._leave_current_room(handle)

        room = self.directory.join_room(room_id, handle, player_name)
        self.broadcaster.enter_room(handle, room.id)
        self.broadcaster.to_player(handle, 'joinedRoom', {
            'success': True,
            'roomId': room.id,
            'hostId': room.host_id,
            'players': room.players_snapshot(),
        })
        self._broadcast_players(room)
        game_logger.log_game_event(room.id, 'player_joined', handle, players=len(room.players))
        return room

    @_serialized
    def start_game(self, handle: str, room_id) -> None:
        room = self._require_member(handle, room_id)
        if room.phase != RoomPhase.WAITING:
            raise GameInProgressError()
        if len(room.players) < self.rules.min_players:
            raise NotEnoughPlayersError()
        self._start_picking(room)

    @_serialized
    def start_again(self, handle: str, room_id) -> None:
        """Host-only restart from the lobby after a finished round."""
        room = self._require_member(handle, room_id)
        if room.phase != RoomPhase.WAITING:
            raise InvalidActorError("The game is not in the lobby.")
        if room.host_id != handle:
            raise InvalidActorError("Only the host can start a new round.")
        if len(room.players) < self.rules.min_players:
            raise NotEnoughPlayersError()
        self._start_picking(room)
        self._broadcast_players(room)

    # ------------------------------------------------------------------
    # Picking
    # ------------------------------------------------------------------

    @_serialized
    def submit_word(self, handle: str, room_id, word) -> None:
        room = self._require_giver(handle, room_id)
        entry = find_word(word)
        if entry is None:
            raise InvalidPayloadError("Unknown word.")
        self._assign_word(room, handle, entry)

    @_serialized
    def submit_custom_word(self, handle: str, room_id, custom_word, custom_hint=None) -> None:
        room = self._require_giver(handle, room_id)
        if not isinstance(custom_word, str) or not custom_word.strip():
            raise InvalidPayloadError("The word cannot be empty.")
        hint = custom_hint.strip() if isinstance(custom_hint, str) else ''
        self._assign_word(room, handle, WordEntry(word=custom_word.strip(), hint=hint or DEFAULT_CUSTOM_HINT))

    @_serialized
    def set_ready(self, handle: str, room_id) -> None:
        room = self._require_member(handle, room_id, RoomPhase.PICKING)
        room.players[handle].is_ready = True
        self._broadcast_players(room)
        self._check_ready_gate(room)

    @_serialized
    def set_unready(self, handle: str, room_id) -> None:
        room = self._require_member(handle, room_id, RoomPhase.PICKING)
        room.players[handle].is_ready = False
        self._broadcast_players(room)

    # ------------------------------------------------------------------
    # Playing
    # ------------------------------------------------------------------

    @_serialized
    def make_guess(self, handle: str, room_id, guess) -> bool:
        """Evaluate the turn holder's guess. Returns whether it was correct."""
        room = self._require_turn_holder(handle, room_id)
        if not isinstance(guess, str) or not guess.strip():
            raise InvalidPayloadError("The guess cannot be empty.")

        player = room.players[handle]
        is_correct = words_match(guess, player.current_word.word)
        self.broadcaster.to_room(room.id, 'guessMade', {
            'playerId': handle,
            'guess': guess,
            'isCorrect': is_correct,
        })
        game_logger.log_game_event(room.id, 'guess_made', handle, correct=is_correct)

        if is_correct:
            player.score += 1
            player.has_guessed = True
            self._broadcast_players(room)
            if room.all_guessed():
                self._finish_round(room)
            else:
                self._next_turn(room)
        return is_correct

    @_serialized
    def skip_turn(self, handle: str, room_id) -> None:
        room = self._require_turn_holder(handle, room_id)
        room.players[handle].skip_count += 1
        self._broadcast_players(room)
        self.broadcaster.to_room(room.id, 'turnSkipped', {'playerId': handle})
        self._next_turn(room)

    @_serialized
    def get_hint(self, handle: str, room_id) -> str:
        room = self._require_turn_holder(handle, room_id)
        player = room.players[handle]
        if player.skip_count < self.rules.hint_skip_threshold:
            raise InvalidActorError("The hint is not unlocked yet.")
        if player.hint_revealed:
            raise InvalidActorError("The hint was already revealed.")
        player.hint_revealed = True
        self.broadcaster.to_player(handle, 'hint', {'hint': player.current_word.hint})
        game_logger.log_game_event(room.id, 'hint_revealed', handle, skips=player.skip_count)
        return player.current_word.hint

    @_serialized
    def next_turn(self, room_id) -> Optional[str]:
        room = self.directory.get(room_id)
        if room is None:
            return None
        self._next_turn(room)
        return room.current_turn

    # ------------------------------------------------------------------
    # Disconnect
    # ------------------------------------------------------------------

    @_serialized
    def handle_disconnect(self, handle: str) -> Optional[str]:
        """Drop a lost connection from its room. Returns the room id, if any."""
        room = self.directory.room_of(handle)
        if room is None:
            return None
        self._remove_from_room(room, handle)
        return room.id

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_room(self, room_id) -> Room:
        room = self.directory.get(room_id)
        if room is None:
            raise RoomNotFoundError()
        return room

    def _require_member(self, handle: str, room_id, phase: Optional[RoomPhase] = None) -> Room:
        room = self._require_room(room_id)
        if handle not in room.players:
            raise InvalidActorError("You are not in this room.")
        if phase is not None and room.phase != phase:
            raise InvalidActorError(f"Not allowed while the room is {room.phase.value}.")
        return room

    def _require_giver(self, handle: str, room_id) -> Room:
        room = self._require_member(handle, room_id, RoomPhase.PICKING)
        if handle not in room.pairs:
            raise InvalidActorError("You have no partner this round.")
        return room

    def _require_turn_holder(self, handle: str, room_id) -> Room:
        room = self._require_member(handle, room_id, RoomPhase.PLAYING)
        if room.current_turn != handle or room.round_complete:
            raise InvalidActorError("It is not your turn.")
        if room.players[handle].has_guessed or room.players[handle].current_word is None:
            raise InvalidActorError("You have nothing left to guess.")
        return room

    def _leave_current_room(self, handle: str) -> None:
        room = self.directory.room_of(handle)
        if room is not None:
            self.broadcaster.leave_room(handle, room.id)
            self._remove_from_room(room, handle)

    def _broadcast_players(self, room: Room) -> None:
        self.broadcaster.to_room(room.id, 'updatePlayers', room.players_snapshot())

    def _sample_choices(self) -> List[str]:
        count = min(self.rules.word_choices, len(self.catalog))
        return [entry.word for entry in self.rng.sample(self.catalog, count)]

    def _send_picking_prompt(self, room: Room, giver_id: str) -> None:
        receiver = room.players[room.pairs[giver_id]]
        self.broadcaster.to_player(giver_id, 'pickingStarted', {
            'partnerName': receiver.name,
            'choices': self._sample_choices(),
        })

    def _start_picking(self, room: Room) -> None:
        """waiting (or a finished round) -> picking."""
        self.scheduler.cancel(room.id)
        room.reset_round()
        room.turn_order = choose_turn_order(room.players, self.rng, self.rules.pairing_attempts)
        room.pairs = cyclic_pairs(room.turn_order)
        room.words_to_submit = len(room.turn_order)
        room.phase = RoomPhase.PICKING

        game_logger.log_game_event(
            room.id, 'picking_started', players=len(room.turn_order),
            repeated_partner=repeats_last_partner(room.players, room.turn_order)
        )
        for giver_id in room.turn_order:
            self._send_picking_prompt(room, giver_id)

    def _assign_word(self, room: Room, giver_id: str, entry: WordEntry) -> None:
        receiver = room.players[room.pairs[giver_id]]
        if not receiver.has_been_picked:
            receiver.has_been_picked = True
            room.words_to_submit -= 1
        receiver.current_word = entry
        receiver.word_giver = giver_id

        self.broadcaster.to_player(giver_id, 'wordSubmitted')
        self._broadcast_players(room)
        game_logger.log_game_event(room.id, 'word_submitted', giver_id, receiver=receiver.id,
                                   words_to_submit=room.words_to_submit)
        self._check_ready_gate(room)

    def _check_ready_gate(self, room: Room) -> bool:
        """picking -> playing once every player is ready and has a word."""
        if room.phase != RoomPhase.PICKING or not all_ready(room):
            return False

        room.phase = RoomPhase.PLAYING
        self.broadcaster.to_room(room.id, 'allWordsSubmitted')
        self._broadcast_players(room)
        for giver_id, receiver_id in room.pairs.items():
            if giver_id in room.players:
                room.players[giver_id].last_partner_id = receiver_id
        for player in room.players.values():
            player.has_been_picked = False

        game_logger.log_game_event(room.id, 'playing_started', players=len(room.players))
        self._next_turn(room)
        return True

    def _next_turn(self, room: Room, resume_at: Optional[int] = None) -> bool:
        """
        Hand the turn to the next active player in turn order.

        The scan starts after the current holder (or at ``resume_at``, or at
        the start of the order) and wraps once, so it looks at most at every
        player once. Does nothing when nobody is left to guess.
        """
        if room.phase != RoomPhase.PLAYING or room.round_complete:
            return False
        active = set(room.active_players())
        if not active:
            return False

        self.scheduler.cancel(room.id)
        room.turn_count += 1

        order = room.turn_order
        if resume_at is not None:
            start = resume_at % len(order)
        elif room.current_turn in order:
            start = (order.index(room.current_turn) + 1) % len(order)
        else:
            start = 0

        next_id = None
        for offset in range(len(order)):
            candidate = order[(start + offset) % len(order)]
            if candidate in active:
                next_id = candidate
                break

        room.current_turn = next_id
        self.broadcaster.to_room(room.id, 'turnChanged', {
            'currentTurn': room.current_turn,
            'turnCount': room.turn_count,
        })

        expected_count = room.turn_count
        self.scheduler.arm(
            room.id, self.rules.turn_duration,
            lambda: self._on_turn_timeout(room.id, expected_count),
            label='turn'
        )
        return True

    @_serialized
    def _on_turn_timeout(self, room_id: str, expected_count: int) -> None:
        room = self.directory.get(room_id)
        if (room is None or room.phase != RoomPhase.PLAYING or room.round_complete
                or room.turn_count != expected_count):
            return
        game_logger.log_game_event(room.id, 'turn_timed_out', room.current_turn, turn=room.turn_count)
        self.broadcaster.to_room(room.id, 'turnEnded', {'playerId': room.current_turn})
        self._next_turn(room)

    def _finish_round(self, room: Room) -> None:
        if room.round_complete:
            return
        room.round_complete = True
        self.broadcaster.to_room(room.id, 'roundFinished')
        self.scheduler.cancel(room.id)
        game_logger.log_game_event(room.id, 'round_finished', turns=room.turn_count)
        self.scheduler.arm(
            room.id, self.rules.round_end_delay,
            lambda: self._on_round_end(room.id),
            label='round_end'
        )

    @_serialized
    def _on_round_end(self, room_id: str) -> None:
        room = self.directory.get(room_id)
        if room is None or room.phase != RoomPhase.PLAYING or not room.round_complete:
            return

        room.reset_round()
        room.pairs = {}
        room.turn_order = []

        if (self.rules.round_end_mode == ROUND_END_AUTO_RESTART
                and len(room.players) >= self.rules.min_players):
            self._start_picking(room)
            self._broadcast_players(room)
            return

        room.phase = RoomPhase.WAITING
        self._broadcast_players(room)
        self.broadcaster.to_room(room.id, 'backToLobby')
        game_logger.log_game_event(room.id, 'back_to_lobby', players=len(room.players))

    def _remove_from_room(self, room: Room, handle: str) -> None:
        was_turn = room.current_turn == handle
        vacated = room.turn_order.index(handle) if handle in room.turn_order else None
        receiver_id = room.pairs.get(handle)
        previous_host = room.host_id

        if self.directory.remove_player(room.id, handle) is None:
            return
        game_logger.log_game_event(room.id, 'player_left', handle, phase=room.phase.value,
                                   remaining=len(room.players))

        if not room.players:
            self._teardown(room)
            return
        if room.phase != RoomPhase.WAITING and len(room.players) < ABORT_BELOW_PLAYERS:
            self._abort(room, ABORT_MESSAGE)
            return

        if room.host_id != previous_host:
            self.broadcaster.to_room(room.id, 'hostChanged', {'hostId': room.host_id})

        if room.phase == RoomPhase.WAITING:
            self._broadcast_players(room)
            return

        if vacated is not None:
            room.turn_order.remove(handle)

        if room.phase == RoomPhase.PICKING:
            room.pairs = cyclic_pairs(room.turn_order)
            self._repair_picking(room, handle, receiver_id)
            return

        # Words already dealt stay with their givers; only the departed edges go
        room.pairs = {giver_id: target_id for giver_id, target_id in room.pairs.items()
                      if handle not in (giver_id, target_id)}
        if was_turn:
            room.current_turn = None
        self._broadcast_players(room)
        if room.all_guessed():
            self._finish_round(room)
        elif was_turn:
            self._next_turn(room, resume_at=vacated)

    def _repair_picking(self, room: Room, departed_id: str, receiver_id: Optional[str]) -> None:
        """The departed player's giver now picks for the departed player's receiver."""
        receiver = room.players.get(receiver_id) if receiver_id else None
        if receiver is not None:
            if receiver.word_giver == departed_id:
                receiver.current_word = None
                receiver.word_giver = None
                receiver.has_been_picked = False
            new_giver = room.giver_of(receiver.id)
            if new_giver is not None:
                self._send_picking_prompt(room, new_giver)

        room.words_to_submit = sum(1 for p in room.players.values() if p.current_word is None)
        self._broadcast_players(room)
        self._check_ready_gate(room)

    def _abort(self, room: Room, message: str) -> None:
        self.scheduler.cancel(room.id)
        self.broadcaster.to_room(room.id, 'gameAborted', {'message': message})
        self.directory.delete_room(room.id)
        self.broadcaster.close_room(room.id)
        game_logger.log_game_event(room.id, 'game_aborted', reason=message)

    def _teardown(self, room: Room) -> None:
        self.scheduler.cancel(room.id)
        self.directory.delete_room(room.id)
        self.broadcaster.close_room(room.id)
        game_logger.log_game_event(room.id, 'room_closed')
