"""
Utility functions for the game engine.
"""

import random

from vegas.engine import MAX_PLAYERS, MIN_PLAYERS, STARTING_CARDS
from vegas.engine.board import BLOCKS, BLOCK_WIDTH, Built, Loc, Owned
from vegas.engine.cards import render_cards, shuffled_deck
from vegas.engine.definitions import TileDefinition
from vegas.engine.errors import InvalidPlayerCount
from vegas.engine.events import GameEvent, cards_drawn, starting_player
from vegas.engine.state import Card, GameState, Player


def initialize_game_state(
    players: int,
    tile_defs: dict[Loc, TileDefinition],
    rng: random.Random | None = None,
) -> tuple[GameState, list[GameEvent]]:
    """
    Create a new game: shuffle the deck, deal opening lots and pick who starts.

    Each player is dealt STARTING_CARDS lots from the top of the deck, owns them,
    and starts with the sum of their starting cash.

    Args:
        players: Number of players (MIN_PLAYERS..MAX_PLAYERS)
        tile_defs: Board layout
        rng: Optional generator, for reproducible games

    Returns:
        Tuple of (state, events) with one cards_drawn event per player and a
        starting_player event
    """
    if players < MIN_PLAYERS or players > MAX_PLAYERS:
        raise InvalidPlayerCount(MIN_PLAYERS, MAX_PLAYERS, players)
    rng = rng or random.Random()

    deck = shuffled_deck(players, tile_defs, rng)
    current_player = rng.randrange(players)
    state = GameState(players=[], current_player=current_player, deck=deck)
    events: list[GameEvent] = []

    for p in range(players):
        cards: list[Card] = state.deck[:STARTING_CARDS]
        del state.deck[:STARTING_CARDS]
        cash = 0
        for card in cards:
            # The game end card sits in the last quarter, past the opening deal
            assert card.loc is not None, "game end card dealt in opening hand"
            state.board.set(card.loc, Owned(player=p))
            cash += tile_defs[card.loc].starting_cash
        state.players.append(Player(cash=cash))
        state.played.extend(cards)
        events.append(cards_drawn(p, [str(c) for c in cards], cash))

    events.append(starting_player(current_player))
    return state, events


def render_board(state: GameState) -> str:
    """
    Render the board as text, one block per section, three lots per row.
    Unowned lots show their location, owned lots "pN", built lots "N:casino:die".
    """
    lines: list[str] = []
    for block in BLOCKS:
        lines.append(f"Block {block.value}")
        row: list[str] = []
        for lot in range(1, block.max_lot() + 1):
            loc = Loc(block, lot)
            tile = state.board.get(loc)
            if isinstance(tile, Built):
                cell = f"{tile.player}:{tile.casino.value[:3]}:{tile.die}"
            elif isinstance(tile, Owned):
                cell = f"p{tile.player}"
            else:
                cell = str(loc)
            row.append(f"{cell:>11}")
            if lot % BLOCK_WIDTH == 0:
                lines.append(" ".join(row))
                row = []
    return "\n".join(lines)


def print_game_state(state: GameState, verbose: bool = False):
    """
    Pretty-print the current game state.

    Args:
        state: Current game state
        verbose: If True, also list every casino group and its bosses
    """
    print(f"\n{'='*60}")
    print(f"Player {state.current_player} to act | Deck: {len(state.deck)} | Finished: {state.finished}")
    print(f"{'='*60}")
    print(render_board(state))

    if verbose:
        print(f"\n{'Casinos':.<40}")
        for bc in state.board.casinos():
            bosses = ", ".join(str(p) for p in sorted(bc.boss_players()))
            print(f"  {bc.casino.display_name} x{bc.size} (boss: {bosses})")

    print(f"\n{'Players':.<40}")
    for p, player in enumerate(state.players):
        print(f"  {p}: cash {player.cash}, points {player.points}")
    print(f"  played: {render_cards(state.played)}")
    print()


def format_event(event: GameEvent) -> str:
    """One human readable line per event, for the CLI log."""
    p = event.payload
    if event.type == "cards_drawn":
        return f"Player {p['player']} drew {' '.join(p['cards'])} and will start with {p['starting_cash']}"
    if event.type == "starting_player":
        return f"Player {p['player']} will start the game"
    if event.type == "tile_built":
        return f"Player {p['player']} built {p['casino']} at {p['loc']} with a {p['die']}"
    if event.type == "cash_changed":
        return f"Player {p['player']} cash {p['old_value']} -> {p['new_value']} ({p['reason']})"
    if event.type == "boss_tie_rerolled":
        rolls = ", ".join(f"{r['loc']} {r['old_die']}->{r['new_die']}" for r in p["rerolls"])
        players = ", ".join(str(x) for x in p["players"])
        return f"Boss tie in {p['casino']} between players {players}, re-rolled {rolls}"
    if event.type == "turn_started":
        return f"Player {p['player']}'s turn"
    if event.type == "turn_ended":
        return f"Player {p['player']} ended their turn"
    return f"{event.type}: {p}"
