"""
Game events for UI hooks and logging.
Events describe what happened during action processing and are the game log:
every payload names the player(s) it concerns so a presentation layer can
render it per player.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameEvent":
        return cls(type=data["type"], payload=data["payload"])


# ===== Event Type Constants =====

# Setup events
CARDS_DRAWN = "cards_drawn"
STARTING_PLAYER = "starting_player"

# Turn events
TURN_STARTED = "turn_started"
TURN_ENDED = "turn_ended"

# Board events
TILE_BUILT = "tile_built"
BOSS_TIE_REROLLED = "boss_tie_rerolled"

# Resource events
CASH_CHANGED = "cash_changed"


# ===== Event Factory Functions =====

def cards_drawn(player: int, cards: list[str], starting_cash: int) -> GameEvent:
    """Emitted during setup for each player's opening deal."""
    return GameEvent(CARDS_DRAWN, {
        "player": player,
        "cards": cards,
        "starting_cash": starting_cash,
    })


def starting_player(player: int) -> GameEvent:
    return GameEvent(STARTING_PLAYER, {"player": player})


def turn_started(player: int) -> GameEvent:
    return GameEvent(TURN_STARTED, {"player": player})


def turn_ended(player: int) -> GameEvent:
    return GameEvent(TURN_ENDED, {"player": player})


def tile_built(player: int, loc: str, casino: str, die: int) -> GameEvent:
    return GameEvent(TILE_BUILT, {
        "player": player,
        "loc": loc,
        "casino": casino,
        "die": die,
    })


def cash_changed(player: int, old_value: int, new_value: int, reason: str) -> GameEvent:
    return GameEvent(CASH_CHANGED, {
        "player": player,
        "old_value": old_value,
        "new_value": new_value,
        "change": new_value - old_value,
        "reason": reason,
    })


def boss_tie_rerolled(
    casino: str,
    players: list[int],
    pass_number: int,
    rerolls: list[dict[str, Any]],
) -> GameEvent:
    """
    Emitted once per tied casino group per resolution pass.

    rerolls holds one entry per boss tile that was re-rolled:
    {"loc": "A1", "player": 0, "old_die": 4, "new_die": 2}
    """
    return GameEvent(BOSS_TIE_REROLLED, {
        "casino": casino,
        "players": players,
        "pass_number": pass_number,
        "rerolls": rerolls,
    })
