"""
Deck construction.
One card per lot in the layout, plus the game end card.
"""

import random

from vegas.engine import STARTING_CARDS
from vegas.engine.board import Casino, Loc
from vegas.engine.definitions import TileDefinition
from vegas.engine.state import Card


def shuffled_deck(
    players: int,
    tile_defs: dict[Loc, TileDefinition],
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Shuffle every lot card and bury the game end card in the last quarter.

    The quarter is measured on the cards left after the opening deal
    (players * STARTING_CARDS come off the top before anyone can reach the
    game end card), so the end card never lands in the opening hands.
    Cards are drawn from the front of the list.
    """
    rng = rng or random.Random()
    cards = [Card(loc=loc) for loc in tile_defs]
    rng.shuffle(cards)
    player_draw_count = players * STARTING_CARDS
    cards_len = len(cards)
    quart_pile = max(1, (cards_len - player_draw_count) // 4)
    quart_pos = rng.randrange(quart_pile)
    cards.insert(cards_len - quart_pos, Card())
    return cards


def casino_card_count(
    cards: list[Card],
    casino: Casino,
    tile_defs: dict[Loc, TileDefinition],
) -> int:
    """How many of the given cards pay out for casino."""
    count = 0
    for card in cards:
        if card.loc is None:
            continue
        tile_def = tile_defs.get(card.loc)
        if tile_def and tile_def.payout == casino:
            count += 1
    return count


def render_cards(cards: list[Card]) -> str:
    return " ".join(str(c) for c in cards)
