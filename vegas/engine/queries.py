"""
Query functions for UI integration.
These functions help the UI understand what actions are available
without mutating game state.
"""

from dataclasses import dataclass
from typing import Any

from vegas.engine import MAX_PLAYERS, MIN_PLAYERS
from vegas.engine.actions import Action
from vegas.engine.board import Loc
from vegas.engine.definitions import TileDefinition
from vegas.engine.errors import InvalidAction
from vegas.engine.reducer import check_action
from vegas.engine.state import GameState


@dataclass
class ValidationResult:
    """Result of action validation."""
    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


def validate_action(
    state: GameState,
    action: Action,
    tile_defs: dict[Loc, TileDefinition],
) -> ValidationResult:
    """
    Validate an action without applying it.
    Returns ValidationResult with valid=True or valid=False with error message.
    """
    try:
        check_action(state, action, tile_defs)
    except InvalidAction as e:
        return ValidationResult(False, str(e))
    return ValidationResult(True)


def get_player_counts() -> list[int]:
    return list(range(MIN_PLAYERS, MAX_PLAYERS + 1))


def get_buildable_locations(
    state: GameState,
    player: int,
    tile_defs: dict[Loc, TileDefinition],
) -> list[dict[str, Any]]:
    """
    Lots the player owns and has not built, sorted by location, with their
    build cost and whether the player can afford it right now.
    """
    if not 0 <= player < state.player_count:
        return []
    cash = state.players[player].cash
    out = []
    for loc in sorted(state.board.player_locs(player)):
        tile_def = tile_defs.get(loc)
        if not tile_def:
            continue
        out.append({
            "loc": str(loc),
            "build_cost": tile_def.build_cost,
            "die": tile_def.die,
            "affordable": cash >= tile_def.build_cost,
        })
    return out


def get_casino_summaries(state: GameState) -> list[dict[str, Any]]:
    """Every casino group on the board with its tiles and bosses."""
    return [bc.to_dict() for bc in state.board.casinos()]


def get_status(state: GameState) -> dict[str, Any]:
    """
    Active games report whose turn it is. Finished games report placings:
    players ranked by points then cash, equal players sharing a place.
    """
    if not state.finished:
        return {"status": "active", "whose_turn": [state.current_player]}

    ranked = sorted(
        range(state.player_count),
        key=lambda p: (state.players[p].points, state.players[p].cash),
        reverse=True,
    )
    placings = [0] * state.player_count
    place = 0
    previous = None
    for i, p in enumerate(ranked):
        score = (state.players[p].points, state.players[p].cash)
        if score != previous:
            place = i + 1
            previous = score
        placings[p] = place
    return {"status": "finished", "placings": placings}
