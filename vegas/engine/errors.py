"""
Rejections raised by the engine.
Every InvalidAction is recoverable: the action is refused, the state is untouched
and the player can try again.
"""


class InvalidAction(ValueError):
    """Base class for actions refused by validation."""


class GameOver(InvalidAction):
    pass


class NotYourTurn(InvalidAction):
    pass


class UnknownAction(InvalidAction):
    pass


class UnknownLocation(InvalidAction):
    pass


class UnknownCasino(InvalidAction):
    pass


class NotOwned(InvalidAction):
    pass


class AlreadyBuilt(InvalidAction):
    pass


class InsufficientCash(InvalidAction):
    pass


class NoDiceRemaining(InvalidAction):
    pass


class NoCasinoTilesRemaining(InvalidAction):
    pass


class InvalidPlayerCount(ValueError):
    """Raised when setting up a game with an unsupported number of players."""

    def __init__(self, minimum: int, maximum: int, given: int):
        super().__init__(f"Player count must be between {minimum} and {maximum}, got {given}")
        self.minimum = minimum
        self.maximum = maximum
        self.given = given
