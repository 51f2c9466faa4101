"""
Room Data Models

Contains the room aggregate and the per-player state it owns.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class RoomPhase(Enum):
    """Phase of a room's round."""
    WAITING = "waiting"
    PICKING = "picking"
    PLAYING = "playing"


@dataclass(frozen=True)
class WordEntry:
    """A secret identity: the word to guess and its hint."""
    word: str
    hint: str

    def to_dict(self) -> Dict[str, str]:
        return {'word': self.word, 'hint': self.hint}


@dataclass
class Player:
    """One connected player inside a room."""
    id: str
    name: str
    score: int = 0
    current_word: Optional[WordEntry] = None
    word_giver: Optional[str] = None
    is_ready: bool = False
    has_guessed: bool = False
    skip_count: int = 0
    last_partner_id: Optional[str] = None
    has_been_picked: bool = False  # guards words_to_submit against resubmission
    hint_revealed: bool = False

    def reset_round(self) -> None:
        """Clear everything that only lives for one round."""
        self.current_word = None
        self.word_giver = None
        self.is_ready = False
        self.has_guessed = False
        self.skip_count = 0
        self.has_been_picked = False
        self.hint_revealed = False

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
            'currentWord': self.current_word.to_dict() if self.current_word else None,
            'isReady': self.is_ready,
            'hasGuessed': self.has_guessed,
            'skipCount': self.skip_count,
        }


@dataclass
class Room:
    """Full state of one game session."""
    id: str
    host_id: str
    phase: RoomPhase = RoomPhase.WAITING
    players: Dict[str, Player] = field(default_factory=dict)
    pairs: Dict[str, str] = field(default_factory=dict)  # giver -> receiver
    turn_order: List[str] = field(default_factory=list)
    words_to_submit: int = 0
    current_turn: Optional[str] = None
    turn_count: int = 0
    round_complete: bool = False

    def giver_of(self, receiver_id: str) -> Optional[str]:
        for giver_id, target_id in self.pairs.items():
            if target_id == receiver_id:
                return giver_id
        return None

    def active_players(self) -> List[str]:
        """Turn order restricted to live players still guessing."""
        return [
            pid for pid in self.turn_order
            if pid in self.players and not self.players[pid].has_guessed
        ]

    def all_guessed(self) -> bool:
        return bool(self.players) and all(p.has_guessed for p in self.players.values())

    def players_snapshot(self) -> Dict[str, Dict]:
        return {pid: player.to_dict() for pid, player in self.players.items()}

    def reset_round(self) -> None:
        for player in self.players.values():
            player.reset_round()
        self.words_to_submit = 0
        self.current_turn = None
        self.turn_count = 0
        self.round_complete = False
