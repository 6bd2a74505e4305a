#!/usr/bin/env python3
"""
Interactive CLI for testing the casino strip game engine.
Run: python test/play_cli.py [players] [seed]
"""

import random
import sys

from vegas.engine.actions import build, end_turn
from vegas.engine.board import CASINOS, Casino, Loc
from vegas.engine.definitions import load_tile_definitions
from vegas.engine.queries import (
    get_buildable_locations,
    get_casino_summaries,
    get_status,
    validate_action,
)
from vegas.engine.reducer import apply_action
from vegas.engine.state import GameState
from vegas.engine.utils import format_event, initialize_game_state, render_board


def print_header(state: GameState):
    """Print game status header."""
    print("=" * 60)
    print(f"  PLAYER {state.current_player} | Cash: {state.players[state.current_player].cash}"
          f" | Deck: {len(state.deck)}")
    if state.finished:
        print(f"  *** GAME OVER - placings {get_status(state)['placings']} ***")
    print("=" * 60)


def print_casinos(state: GameState):
    print("\n--- Casinos ---")
    summaries = get_casino_summaries(state)
    if not summaries:
        print("  (none built)")
    for s in summaries:
        tiles = " ".join(f"{t['loc']}:{t['player']}/{t['die']}" for t in s["tiles"])
        print(f"  {s['casino']:<8} boss {s['boss_players']} | {tiles}")


def print_buildable(state: GameState, tile_defs):
    print("\n--- Your lots ---")
    lots = get_buildable_locations(state, state.current_player, tile_defs)
    if not lots:
        print("  (none)")
    for b in lots:
        mark = "" if b["affordable"] else " (can't afford)"
        print(f"  {b['loc']}: cost {b['build_cost']}, die {b['die']}{mark}")


def parse_build(words: list[str]) -> tuple[Loc, Casino]:
    """Parse "build <loc> <casino>". Raises ValueError with a message for the prompt."""
    if len(words) != 3:
        raise ValueError("usage: build <loc> <casino>")
    loc = Loc.parse(words[1])
    try:
        casino = Casino(words[2].lower())
    except ValueError:
        names = ", ".join(c.value for c in CASINOS)
        raise ValueError(f"casino must be one of: {names}") from None
    return loc, casino


def main_loop(players: int = 3, seed: int | None = None):
    rng = random.Random(seed)
    tile_defs = load_tile_definitions()
    state, events = initialize_game_state(players, tile_defs, rng)
    for event in events:
        print(format_event(event))

    while True:
        print()
        print_header(state)
        print("\nCommands: build <loc> <casino> | end | board | casinos | lots | save <file> | quit")
        try:
            line = input("\nAction: ").strip()
        except EOFError:
            break
        words = line.split()
        if not words:
            continue
        cmd = words[0].lower()

        if cmd in ("quit", "q"):
            break
        elif cmd == "board":
            print(render_board(state))
        elif cmd == "casinos":
            print_casinos(state)
        elif cmd == "lots":
            print_buildable(state, tile_defs)
        elif cmd == "save":
            filename = words[1] if len(words) > 1 else "game.json"
            state.save(filename)
            print(f"Saved to {filename}")
        elif cmd in ("build", "end"):
            if cmd == "build":
                try:
                    loc, casino = parse_build(words)
                except ValueError as e:
                    print(f"✗ {e}")
                    continue
                action = build(state.current_player, loc, casino)
            else:
                action = end_turn(state.current_player)
            validation = validate_action(state, action, tile_defs)
            if not validation.valid:
                print(f"✗ {validation.error}")
                continue
            state, events = apply_action(state, action, tile_defs, rng)
            for event in events:
                print(f"✓ {format_event(event)}")
        else:
            print(f"Unknown command: {cmd}")


if __name__ == "__main__":
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 3
    game_seed = int(sys.argv[2]) if len(sys.argv) > 2 else None
    main_loop(count, game_seed)
