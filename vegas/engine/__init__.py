"""
Casino Strip Board Game Engine
Board topology, casino connectivity and boss tie resolution, plus the turn
engine that drives them. No web framework, database, or UI in this package.
"""

DIE_SIDES = 6

# Cards dealt to each player at game start (each card is a lot the player owns)
STARTING_CARDS = 2

# Per-player dice, enforced by the reducer through Board.used_resources
PLAYER_DICE = 12

# Tiles in the supply for each casino, enforced by the reducer through Board.casino_tile_count
CASINO_TILES = 9

# Reserved for payouts and scoring, which the engine does not run yet
PLAYER_OWNER_TOKENS = 10
CASINO_CARDS = 9

MIN_PLAYERS = 2
MAX_PLAYERS = 6

# Hard cap on board-wide tie resolution passes. Every pass re-rolls the tied
# dice, so reaching this means the random source is broken.
MAX_TIE_PASSES = 1000

# Score track stops, reserved for scoring like the constants above
POINT_STOPS = [
    0, 1, 2, 3, 4, 5, 6, 7, 8, 10, 12, 14, 16, 18, 20, 23, 26, 29, 32, 36, 40,
    44, 49, 54, 60, 66, 73, 81, 90,
]
