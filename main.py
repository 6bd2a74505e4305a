"""
Main entry point for the casino strip board game engine.
Plays random games through the reducer (a fuzzer for the engine) and prints the game log.
"""

import argparse
import random

from vegas.engine.actions import build, end_turn
from vegas.engine.board import CASINOS, Loc
from vegas.engine.definitions import load_tile_definitions
from vegas.engine.queries import get_buildable_locations, validate_action
from vegas.engine.reducer import apply_action
from vegas.engine.state import GameState
from vegas.engine.utils import format_event, initialize_game_state, print_game_state


def random_turn(state: GameState, tile_defs, rng: random.Random):
    """Pick a random affordable build for the current player, or end the turn."""
    player = state.current_player
    options = [b for b in get_buildable_locations(state, player, tile_defs) if b["affordable"]]
    if options and rng.random() < 0.8:
        choice = rng.choice(options)
        loc = Loc.parse(choice["loc"])
        action = build(player, loc, rng.choice(CASINOS))
        if validate_action(state, action, tile_defs).valid:
            return action
    return end_turn(player)


def simulate_game(players: int, turns: int, rng: random.Random, verbose: bool = True) -> GameState:
    """
    Play `turns` random actions. Every player owns only their opening lots (no
    cards are drawn during play), so the game quickly settles into ending turns.
    """
    tile_defs = load_tile_definitions()
    state, events = initialize_game_state(players, tile_defs, rng)
    for event in events:
        if verbose:
            print(format_event(event))

    for _ in range(turns):
        action = random_turn(state, tile_defs, rng)
        state, events = apply_action(state, action, tile_defs, rng)
        for event in events:
            if verbose:
                print(format_event(event))

        for bc in state.board.casinos():
            assert not bc.is_tied(), f"unresolved boss tie in {bc.casino.value}"

    return state


def main():
    parser = argparse.ArgumentParser(description="Casino strip board engine: random game simulator")
    parser.add_argument("--players", type=int, default=4, help="Number of players (2-6)")
    parser.add_argument("--turns", type=int, default=20, help="Actions to play per game")
    parser.add_argument("--games", type=int, default=1, help="Number of games to simulate")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed")
    parser.add_argument("--quiet", action="store_true", help="Only print the final board")
    args = parser.parse_args()

    rng = random.Random(args.seed)
    for game_number in range(1, args.games + 1):
        print(f"\n[GAME {game_number}]")
        state = simulate_game(args.players, args.turns, rng, verbose=not args.quiet)
        print_game_state(state, verbose=True)


if __name__ == "__main__":
    main()
