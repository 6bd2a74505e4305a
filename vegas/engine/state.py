"""
Game state representation.
The reducer works on copies; the board inside a state is mutated in place only on such a copy.
Includes JSON serialization for save/load functionality.
"""

import json
from dataclasses import dataclass, field
from copy import deepcopy
from typing import Any

from vegas.engine.board import Board, Loc

GAME_END_CARD = "game_end"


def _int(v: Any, default: int) -> int:
    try:
        return int(v) if v is not None else default
    except (TypeError, ValueError):
        return default


@dataclass
class Player:
    """Per-player resources."""
    cash: int = 0
    points: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"cash": self.cash, "points": self.points}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Player":
        if not isinstance(data, dict):
            data = {}
        return cls(cash=_int(data.get("cash"), 0), points=_int(data.get("points"), 0))


@dataclass(frozen=True)
class Card:
    """A deck card: either a lot (loc is set) or the game end marker (loc is None)."""
    loc: Loc | None = None

    @property
    def is_game_end(self) -> bool:
        return self.loc is None

    def __str__(self) -> str:
        return "Game end" if self.loc is None else str(self.loc)

    def to_dict(self) -> dict[str, Any]:
        if self.loc is None:
            return {"type": GAME_END_CARD}
        return {"type": "loc", "loc": self.loc.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Card":
        if isinstance(data, dict) and data.get("type") == "loc" and isinstance(data.get("loc"), dict):
            return cls(loc=Loc.from_dict(data["loc"]))
        return cls()


@dataclass
class GameState:
    """Complete game state."""
    players: list[Player]
    current_player: int
    deck: list[Card] = field(default_factory=list)  # draw pile, top of deck first
    played: list[Card] = field(default_factory=list)  # cards already drawn, in draw order
    board: Board = field(default_factory=Board)
    finished: bool = False

    def copy(self) -> "GameState":
        """Return a deep copy of this game state."""
        return deepcopy(self)

    @property
    def player_count(self) -> int:
        return len(self.players)

    def pub_state(self) -> dict[str, Any]:
        """Public view: everything except the order of the remaining deck."""
        return {
            "players": [p.to_dict() for p in self.players],
            "current_player": self.current_player,
            "remaining_deck": len(self.deck),
            "played": [c.to_dict() for c in self.played],
            "board": self.board.to_dict(),
            "finished": self.finished,
        }

    def player_state(self, player: int) -> dict[str, Any]:
        """View for one player; state is None for an out-of-range player index."""
        own = self.players[player].to_dict() if 0 <= player < len(self.players) else None
        return {
            "player": player,
            "state": own,
            "pub_state": self.pub_state(),
        }

    # ===== Serialization Methods =====

    def to_dict(self) -> dict[str, Any]:
        """Convert GameState to a dictionary for JSON serialization."""
        return {
            "players": [p.to_dict() for p in self.players],
            "current_player": self.current_player,
            "deck": [c.to_dict() for c in self.deck],
            "played": [c.to_dict() for c in self.played],
            "board": self.board.to_dict(),
            "finished": self.finished,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameState":
        """Create GameState from a dictionary (handles missing/None fields)."""
        players = data.get("players") or []
        if not isinstance(players, list):
            players = []
        deck = data.get("deck") or []
        if not isinstance(deck, list):
            deck = []
        played = data.get("played") or []
        if not isinstance(played, list):
            played = []
        return cls(
            players=[Player.from_dict(p) for p in players],
            current_player=_int(data.get("current_player"), 0),
            deck=[Card.from_dict(c) for c in deck],
            played=[Card.from_dict(c) for c in played],
            board=Board.from_dict(data.get("board") or {}),
            finished=bool(data.get("finished", False)),
        )

    def to_json(self, indent: int = 2) -> str:
        """Serialize GameState to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> "GameState":
        """Deserialize GameState from a JSON string."""
        return cls.from_dict(json.loads(json_str))

    def save(self, filepath: str) -> None:
        """Save GameState to a JSON file."""
        with open(filepath, "w") as f:
            f.write(self.to_json())

    @classmethod
    def load(cls, filepath: str) -> "GameState":
        """Load GameState from a JSON file."""
        with open(filepath, "r") as f:
            return cls.from_json(f.read())
