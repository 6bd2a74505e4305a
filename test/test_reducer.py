"""
Reducer: building, turn order and validation.
"""

import pytest

from vegas.engine import CASINO_TILES, PLAYER_DICE
from vegas.engine.actions import Action, build, end_turn
from vegas.engine.board import Block, Built, Casino, Loc, Owned
from vegas.engine.definitions import load_tile_definitions
from vegas.engine.errors import (
    AlreadyBuilt,
    GameOver,
    InsufficientCash,
    InvalidAction,
    NoCasinoTilesRemaining,
    NoDiceRemaining,
    NotOwned,
    NotYourTurn,
    UnknownAction,
    UnknownCasino,
    UnknownLocation,
)
from vegas.engine.events import BOSS_TIE_REROLLED, CASH_CHANGED, TILE_BUILT, TURN_ENDED, TURN_STARTED
from vegas.engine.queries import get_buildable_locations, validate_action
from vegas.engine.reducer import apply_action, replay_from_actions
from vegas.engine.state import GameState, Player

TILE_DEFS = load_tile_definitions()

A = Block.A


class ScriptedRng:
    # roll_die only calls randint
    def __init__(self, rolls):
        self.rolls = list(rolls)

    def randint(self, low, high):
        return self.rolls.pop(0)


def make_state(cash=50, players=2) -> GameState:
    state = GameState(players=[Player(cash=cash) for _ in range(players)], current_player=0)
    state.board.set(Loc(A, 1), Owned(player=0))
    state.board.set(Loc(A, 2), Owned(player=1))
    state.board.set(Loc(A, 3), Owned(player=0))
    return state


def test_build_on_owned_lot():
    state = make_state()
    new_state, events = apply_action(state, build(0, Loc(A, 1), Casino.ALBION), TILE_DEFS)

    assert new_state.board.get(Loc(A, 1)) == Built(player=0, casino=Casino.ALBION, die=3)
    assert new_state.players[0].cash == 37
    assert [e.type for e in events] == [TILE_BUILT, CASH_CHANGED]
    assert events[0].payload == {"player": 0, "loc": "A1", "casino": "albion", "die": 3}
    assert events[1].payload["change"] == -13
    assert events[1].payload["reason"] == "build"
    # Original state untouched
    assert state.board.get(Loc(A, 1)) == Owned(player=0)
    assert state.players[0].cash == 50


def test_build_joining_a_group_resolves_the_tie():
    # A1 prints a 3 and A3 a 1; player 1 holds a 3 on A2 between them
    state = make_state()
    state.board.set(Loc(A, 2), Built(player=1, casino=Casino.VEGA, die=3))
    state.players[0].cash = 100

    state, _ = apply_action(state, build(0, Loc(A, 3), Casino.VEGA), TILE_DEFS)
    # Player 1's 3 is the only boss
    assert state.board.casino_at(Loc(A, 2)).boss_players() == {1}

    new_state, events = apply_action(
        state, build(0, Loc(A, 1), Casino.VEGA), TILE_DEFS, rng=ScriptedRng([5, 2]),
    )
    assert [e.type for e in events] == [TILE_BUILT, CASH_CHANGED, BOSS_TIE_REROLLED]
    assert events[2].payload["players"] == [0, 1]
    assert new_state.board.get(Loc(A, 1)).die == 5
    assert new_state.board.get(Loc(A, 2)).die == 2
    bc = new_state.board.casino_at(Loc(A, 1))
    assert bc.size == 3
    assert bc.boss_players() == {0}


def test_end_turn_passes_play_and_wraps():
    state = make_state(players=3)
    state, events = apply_action(state, end_turn(0), TILE_DEFS)
    assert state.current_player == 1
    assert [e.type for e in events] == [TURN_ENDED, TURN_STARTED]
    state, _ = apply_action(state, end_turn(1), TILE_DEFS)
    state, events = apply_action(state, end_turn(2), TILE_DEFS)
    assert state.current_player == 0
    assert events[1].payload == {"player": 0}


@pytest.mark.parametrize("action, error", [
    (build(1, Loc(A, 2), Casino.ALBION), NotYourTurn),
    (Action("bribe", 0, {}), UnknownAction),
    (Action("build", 0, {"loc": "A1", "casino": Casino.ALBION}), UnknownLocation),
    (Action("build", 0, {"loc": Loc(A, 1), "casino": "albion"}), UnknownCasino),
    (build(0, Loc(A, 2), Casino.ALBION), NotOwned),
    (build(0, Loc(A, 4), Casino.ALBION), NotOwned),
])
def test_invalid_actions_are_refused(action, error):
    state = make_state()
    with pytest.raises(error):
        apply_action(state, action, TILE_DEFS)
    assert state == make_state()


def test_cannot_build_twice():
    state, _ = apply_action(make_state(), build(0, Loc(A, 1), Casino.ALBION), TILE_DEFS)
    with pytest.raises(AlreadyBuilt, match="already been built"):
        apply_action(state, build(0, Loc(A, 1), Casino.TIVOLI), TILE_DEFS)


def test_cannot_build_without_cash():
    state = make_state(cash=12)
    with pytest.raises(InsufficientCash):
        apply_action(state, build(0, Loc(A, 1), Casino.ALBION), TILE_DEFS)
    # Exactly the build cost is enough
    state.players[0].cash = 13
    new_state, _ = apply_action(state, build(0, Loc(A, 1), Casino.ALBION), TILE_DEFS)
    assert new_state.players[0].cash == 0


def test_cannot_build_without_dice():
    state = make_state(cash=1000)
    lots = [Loc(Block.C, lot) for lot in range(1, 13)]
    for loc in lots[:PLAYER_DICE]:
        state.board.set(loc, Built(player=0, casino=Casino.PIONEER, die=6))
    with pytest.raises(NoDiceRemaining):
        apply_action(state, build(0, Loc(A, 1), Casino.ALBION), TILE_DEFS)


def test_cannot_build_when_casino_supply_is_empty():
    state = make_state(cash=1000)
    # The whole Albion supply is on the board, spread over other players
    lots = [Loc(Block.C, lot) for lot in range(1, 13)]
    for i, loc in enumerate(lots[:CASINO_TILES]):
        state.board.set(loc, Built(player=1 + i % 2, casino=Casino.ALBION, die=i % 6 + 1))
    with pytest.raises(NoCasinoTilesRemaining, match="no Albion tiles left"):
        apply_action(state, build(0, Loc(A, 1), Casino.ALBION), TILE_DEFS)
    # Other casinos are still available
    new_state, _ = apply_action(state, build(0, Loc(A, 1), Casino.TIVOLI), TILE_DEFS)
    assert new_state.board.casino_tile_count(Casino.TIVOLI) == 1


def test_last_casino_tile_can_be_built():
    state = make_state()
    for lot in range(1, CASINO_TILES):
        state.board.set(Loc(Block.C, lot), Built(player=1, casino=Casino.VEGA, die=1))
    new_state, _ = apply_action(state, build(0, Loc(A, 1), Casino.VEGA), TILE_DEFS)
    assert new_state.board.casino_tile_count(Casino.VEGA) == CASINO_TILES


def test_finished_game_refuses_everything():
    state = make_state()
    state.finished = True
    with pytest.raises(GameOver):
        apply_action(state, end_turn(0), TILE_DEFS)


def test_invalid_actions_share_a_base_class():
    with pytest.raises(InvalidAction):
        apply_action(make_state(), end_turn(1), TILE_DEFS)
    with pytest.raises(ValueError):
        apply_action(make_state(), end_turn(1), TILE_DEFS)


def test_validate_action_reports_the_reason():
    state = make_state()
    result = validate_action(state, build(0, Loc(A, 2), Casino.ALBION), TILE_DEFS)
    assert not result.valid
    assert result.error == "you don't own that location"
    assert result.to_dict() == {"valid": False, "error": "you don't own that location"}
    assert validate_action(state, build(0, Loc(A, 1), Casino.ALBION), TILE_DEFS).valid


def test_buildable_locations():
    state = make_state(cash=12)
    assert get_buildable_locations(state, 0, TILE_DEFS) == [
        {"loc": "A1", "build_cost": 13, "die": 3, "affordable": False},
        {"loc": "A3", "build_cost": 11, "die": 1, "affordable": True},
    ]
    assert get_buildable_locations(state, 9, TILE_DEFS) == []


def test_replay_from_actions():
    actions = [
        build(0, Loc(A, 1), Casino.ALBION),
        end_turn(0),
        build(1, Loc(A, 2), Casino.SPHYNX),
        end_turn(1),
    ]
    initial = make_state()
    final, events = replay_from_actions(initial, actions, TILE_DEFS)
    assert final.current_player == 0
    assert final.players[0].cash == 37
    assert final.players[1].cash == 30
    assert len(events) == 8
    assert initial == make_state()
