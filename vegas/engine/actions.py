"""
Action definitions for the game.
Actions are immutable, deterministic instructions.
"""

from dataclasses import dataclass

from vegas.engine.board import Casino, Loc


@dataclass
class Action:
    """Base action class. All actions have a type, player, and payload."""
    type: str  # "build" or "end_turn"
    player: int  # index of the player performing the action
    payload: dict  # Action-specific data


def build(player: int, loc: Loc, casino: Casino) -> Action:
    """
    Build a casino on a lot the player owns.
    The lot must be owned (not built) by the player and the player must afford its build cost.
    The new tile starts with the lot's printed die value.

    Example: build(0, Loc(Block.A, 1), Casino.ALBION)
    """
    return Action(
        type="build",
        player=player,
        payload={"loc": loc, "casino": casino},
    )


def end_turn(player: int) -> Action:
    """End the current turn and pass play to the next player."""
    return Action(
        type="end_turn",
        player=player,
        payload={},
    )
