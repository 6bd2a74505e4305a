"""
Main game reducer.
Applies actions to state, enforcing rules and producing new state.
Returns (new_state, events) where events describe what happened.
"""

import random

from vegas.engine import CASINO_TILES, PLAYER_DICE
from vegas.engine.state import GameState
from vegas.engine.actions import Action
from vegas.engine.board import Built, Casino, Loc, Owned
from vegas.engine.definitions import TileDefinition
from vegas.engine.errors import (
    AlreadyBuilt,
    GameOver,
    InsufficientCash,
    NoCasinoTilesRemaining,
    NoDiceRemaining,
    NotOwned,
    NotYourTurn,
    UnknownAction,
    UnknownCasino,
    UnknownLocation,
)
from vegas.engine.events import (
    GameEvent,
    cash_changed,
    tile_built,
    turn_ended,
    turn_started,
)

ACTION_TYPES = ("build", "end_turn")


def _validate_build(
    state: GameState,
    action: Action,
    tile_defs: dict[Loc, TileDefinition],
) -> None:
    """
    Validates:
    - The location is on the board and the casino is known
    - The player owns the lot and has not built on it yet
    - The player can pay the build cost and still has a die to place
    - The chosen casino still has a tile left in the supply
    """
    loc = action.payload.get("loc")
    casino = action.payload.get("casino")
    player = action.player

    if not isinstance(loc, Loc) or loc not in tile_defs:
        raise UnknownLocation("not a valid location")
    if not isinstance(casino, Casino):
        raise UnknownCasino(f"unknown casino: {casino}")

    tile = state.board.get(loc)
    if isinstance(tile, Built):
        raise AlreadyBuilt("that location has already been built")
    if not isinstance(tile, Owned) or tile.player != player:
        raise NotOwned("you don't own that location")

    if state.players[player].cash < tile_defs[loc].build_cost:
        raise InsufficientCash("you don't have enough cash")
    if state.board.used_resources(player).dice >= PLAYER_DICE:
        raise NoDiceRemaining("you have no dice left to build with")
    if state.board.casino_tile_count(casino) >= CASINO_TILES:
        raise NoCasinoTilesRemaining(f"there are no {casino.display_name} tiles left")


def check_action(
    state: GameState,
    action: Action,
    tile_defs: dict[Loc, TileDefinition],
) -> None:
    """
    Raise the InvalidAction subclass describing why action cannot be applied.
    Returns None when the action is valid. Never mutates state.
    """
    if state.finished:
        raise GameOver("the game is over")

    if action.player != state.current_player:
        raise NotYourTurn(
            f"Action player {action.player} does not match current player {state.current_player}")

    if action.type == "build":
        _validate_build(state, action, tile_defs)
    elif action.type not in ACTION_TYPES:
        raise UnknownAction(f"Unknown action type: {action.type}")


def apply_action(
    state: GameState,
    action: Action,
    tile_defs: dict[Loc, TileDefinition],
    rng: random.Random | None = None,
) -> tuple[GameState, list[GameEvent]]:
    """
    Apply a single action to the current state, returning new state and events.

    Args:
        state: Current game state (not modified)
        action: Action to apply
        tile_defs: Board layout
        rng: Optional generator for the die re-rolls of tie resolution

    Returns:
        Tuple of (new_state, events) where events describe what happened

    Raises:
        InvalidAction subclass when validation fails
    """
    check_action(state, action, tile_defs)

    new_state = state.copy()
    events: list[GameEvent] = []

    if action.type == "build":
        new_state, evts = _handle_build(new_state, action, tile_defs, rng)
        events.extend(evts)

    elif action.type == "end_turn":
        new_state, evts = _handle_end_turn(new_state, action)
        events.extend(evts)

    return new_state, events


def _handle_build(
    state: GameState,
    action: Action,
    tile_defs: dict[Loc, TileDefinition],
    rng: random.Random | None,
) -> tuple[GameState, list[GameEvent]]:
    """
    Build on an owned lot. The new tile starts with the lot's printed die; building
    can join casino groups together, so boss ties are resolved board-wide afterwards.
    """
    events: list[GameEvent] = []
    p = action.player
    loc: Loc = action.payload["loc"]
    casino: Casino = action.payload["casino"]
    tile_def = tile_defs[loc]

    player = state.players[p]
    old_cash = player.cash
    player.cash -= tile_def.build_cost
    state.board.set(loc, Built(player=p, casino=casino, die=tile_def.die))

    events.append(tile_built(p, str(loc), casino.value, tile_def.die))
    events.append(cash_changed(p, old_cash, player.cash, "build"))

    tie_events = state.board.resolve_boss_ties(rng)
    if tie_events:
        events.extend(tie_events)

    return state, events


def _handle_end_turn(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    events = [turn_ended(action.player)]
    state.current_player = (state.current_player + 1) % state.player_count
    events.append(turn_started(state.current_player))
    return state, events


def replay_from_actions(
    initial_state: GameState,
    actions: list[Action],
    tile_defs: dict[Loc, TileDefinition],
    rng: random.Random | None = None,
) -> tuple[GameState, list[GameEvent]]:
    """
    Replay a series of actions from an initial state.
    Re-rolls are random, so pass a seeded rng to reproduce a recorded game exactly.

    Returns:
        Tuple of (final_state, all_events) after all actions applied
    """
    current_state = initial_state.copy()
    all_events: list[GameEvent] = []

    for action in actions:
        current_state, events = apply_action(current_state, action, tile_defs, rng)
        all_events.extend(events)

    return current_state, all_events
