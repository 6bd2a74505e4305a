"""
Board topology and casino resolution.

The board is six disjoint blocks, each a grid of lots three wide. Lots that
are built with the same casino and touch orthogonally form one casino group.
The boss of a group is whoever holds the highest die in it; when several
players share that die the tie is re-rolled until it breaks.

Groups are never stored. They are recomputed from the tiles on every query,
so building or re-rolling only ever touches a single tile.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from vegas.engine import DIE_SIDES, MAX_TIE_PASSES
from vegas.engine.events import GameEvent, boss_tie_rerolled

BLOCK_WIDTH = 3


class Block(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"

    def max_lot(self) -> int:
        return _MAX_LOTS[self]


_MAX_LOTS = {
    Block.A: 6,
    Block.B: 6,
    Block.C: 12,
    Block.D: 9,
    Block.E: 6,
    Block.F: 9,
}

BLOCKS = (Block.A, Block.B, Block.C, Block.D, Block.E, Block.F)


class Casino(str, Enum):
    ALBION = "albion"
    SPHYNX = "sphynx"
    VEGA = "vega"
    TIVOLI = "tivoli"
    PIONEER = "pioneer"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


CASINOS = (Casino.ALBION, Casino.SPHYNX, Casino.VEGA, Casino.TIVOLI, Casino.PIONEER)


def roll_die(rng: random.Random | None = None) -> int:
    """Roll a single die. Uses the process-level generator unless rng is given."""
    return (rng or random).randint(1, DIE_SIDES)


@dataclass(frozen=True, order=True)
class Loc:
    """A lot within a block. Ordered by block then lot."""
    block: Block
    lot: int

    def __post_init__(self):
        assert isinstance(self.block, Block), f"Not a block: {self.block!r}"
        assert 1 <= self.lot <= self.block.max_lot(), (
            f"Lot {self.lot} is outside block {self.block.value} (1-{self.block.max_lot()})"
        )

    def __str__(self) -> str:
        return f"{self.block.value}{self.lot}"

    def neighbours(self) -> list["Loc"]:
        """Orthogonal neighbours within the same block, no wraparound."""
        n: list[Loc] = []
        if self.lot > BLOCK_WIDTH:
            n.append(Loc(self.block, self.lot - BLOCK_WIDTH))
        if self.lot % BLOCK_WIDTH != 1:
            n.append(Loc(self.block, self.lot - 1))
        if self.lot % BLOCK_WIDTH != 0:
            n.append(Loc(self.block, self.lot + 1))
        if self.lot <= self.block.max_lot() - BLOCK_WIDTH:
            n.append(Loc(self.block, self.lot + BLOCK_WIDTH))
        return n

    @classmethod
    def parse(cls, text: str) -> "Loc":
        """Parse user input such as "A1" or "c12". Raises ValueError on bad input."""
        cleaned = text.strip().upper()
        try:
            block = Block(cleaned[:1])
            lot = int(cleaned[1:])
        except ValueError:
            raise ValueError(f"Invalid location: {text!r}") from None
        if not 1 <= lot <= block.max_lot():
            raise ValueError(f"Invalid location: {text!r}")
        return cls(block, lot)

    def to_dict(self) -> dict[str, Any]:
        return {"block": self.block.value, "lot": self.lot}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Loc":
        return cls(Block(str(data.get("block"))), int(data.get("lot", 0)))


def all_locations() -> list[Loc]:
    """Every valid location, in canonical order."""
    return [
        Loc(block, lot)
        for block in BLOCKS
        for lot in range(1, block.max_lot() + 1)
    ]


# ===== Tile states =====

@dataclass(frozen=True)
class Unowned:
    def to_dict(self) -> dict[str, Any]:
        return {"type": "unowned"}


@dataclass(frozen=True)
class Owned:
    """Claimed by a player but not built yet."""
    player: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": "owned", "player": self.player}


@dataclass(frozen=True)
class Built:
    """Built with a casino. The die decides who bosses the casino group."""
    player: int
    casino: Casino
    die: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "built",
            "player": self.player,
            "casino": self.casino.value,
            "die": self.die,
        }


TileState = Unowned | Owned | Built


def tile_from_dict(data: dict[str, Any]) -> TileState:
    """Inverse of the tile to_dict methods. Unknown types read as Unowned."""
    if not isinstance(data, dict):
        return Unowned()
    kind = data.get("type")
    if kind == "owned":
        return Owned(player=int(data["player"]))
    if kind == "built":
        return Built(
            player=int(data["player"]),
            casino=Casino(data["casino"]),
            die=int(data["die"]),
        )
    return Unowned()


# ===== Derived casino groups =====

@dataclass(frozen=True)
class CasinoTile:
    """One member of a casino group."""
    loc: Loc
    player: int
    die: int

    def to_dict(self) -> dict[str, Any]:
        return {"loc": str(self.loc), "player": self.player, "die": self.die}


@dataclass
class BoardCasino:
    """A maximal connected group of built tiles sharing a casino."""
    casino: Casino
    tiles: list[CasinoTile]

    @property
    def size(self) -> int:
        return len(self.tiles)

    def locs(self) -> list[Loc]:
        return [t.loc for t in self.tiles]

    def boss_tiles(self) -> list[CasinoTile]:
        """
        Tiles holding the highest die in the group.
        More than one tile is returned only when several share that die; whether
        that is a contested tie depends on the players holding them.
        """
        highest = 0
        bosses: list[CasinoTile] = []
        for t in self.tiles:
            if t.die > highest:
                highest = t.die
                bosses = []
            if t.die == highest:
                bosses.append(t)
        return bosses

    def boss_players(self) -> set[int]:
        return {t.player for t in self.boss_tiles()}

    def is_tied(self) -> bool:
        return len(self.boss_players()) > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "casino": self.casino.value,
            "size": self.size,
            "tiles": [t.to_dict() for t in self.tiles],
            "boss_tiles": [t.to_dict() for t in self.boss_tiles()],
            "boss_players": sorted(self.boss_players()),
        }


@dataclass
class UsedResources:
    dice: int = 0
    tokens: int = 0


class TieResolutionError(RuntimeError):
    """Boss ties were still present after the maximum number of re-roll passes."""


# ===== Board =====

@dataclass
class Board:
    """
    Sparse mapping of location -> tile state.
    Absent locations are Unowned. No transition rules are enforced here; the
    reducer validates before calling set().
    """
    tiles: dict[Loc, TileState] = field(default_factory=dict)

    def get(self, loc: Loc) -> TileState:
        return self.tiles.get(loc, Unowned())

    def set(self, loc: Loc, tile: TileState) -> None:
        self.tiles[loc] = tile

    def used_resources(self, player: int) -> UsedResources:
        """Owner tokens (owned lots) and dice (built lots) the player has on the board."""
        used = UsedResources()
        for tile in self.tiles.values():
            if isinstance(tile, Owned) and tile.player == player:
                used.tokens += 1
            elif isinstance(tile, Built) and tile.player == player:
                used.dice += 1
        return used

    def casino_tile_count(self, casino: Casino) -> int:
        return sum(
            1 for tile in self.tiles.values()
            if isinstance(tile, Built) and tile.casino == casino
        )

    def player_locs(self, player: int) -> list[Loc]:
        """Lots the player owns but has not built. Unordered."""
        return [
            loc for loc, tile in self.tiles.items()
            if isinstance(tile, Owned) and tile.player == player
        ]

    def casino_at(self, loc: Loc) -> BoardCasino | None:
        """
        Flood fill the casino group containing loc.
        Only built tiles of the same casino join the group, and exploration only
        continues through group members, so a gap or a different casino splits
        groups. Returns None when loc is not built.
        """
        seed = self.get(loc)
        if not isinstance(seed, Built):
            return None

        queue: list[Loc] = [loc]
        seen: set[Loc] = {loc}
        tiles: list[CasinoTile] = []

        while queue:
            current = queue.pop()
            tile = self.get(current)
            if not isinstance(tile, Built) or tile.casino != seed.casino:
                continue
            tiles.append(CasinoTile(loc=current, player=tile.player, die=tile.die))
            for n in current.neighbours():
                if n not in seen:
                    seen.add(n)
                    queue.append(n)

        tiles.sort(key=lambda t: t.loc)
        return BoardCasino(casino=seed.casino, tiles=tiles)

    def casinos(self) -> list[BoardCasino]:
        """All casino groups on the board, disjoint, in canonical location order."""
        visited: set[Loc] = set()
        casinos: list[BoardCasino] = []
        for loc in all_locations():
            if loc in visited:
                continue
            bc = self.casino_at(loc)
            if bc is None:
                continue
            visited.update(bc.locs())
            casinos.append(bc)
        return casinos

    def reroll_at(self, loc: Loc, rng: random.Random | None = None) -> int | None:
        """Re-roll the die on a built tile, keeping player and casino. None if not built."""
        tile = self.get(loc)
        if not isinstance(tile, Built):
            return None
        die = roll_die(rng)
        self.set(loc, Built(player=tile.player, casino=tile.casino, die=die))
        return die

    def resolve_boss_ties(
        self,
        rng: random.Random | None = None,
        max_passes: int = MAX_TIE_PASSES,
    ) -> list[GameEvent] | None:
        """
        Re-roll every boss tile of every tied casino group, then rescan the whole
        board, until a pass finds no ties. A re-roll can create a new tie (or
        recreate the same one), which the next pass picks up.

        Returns None if the board had no ties to begin with, otherwise the
        re-roll events of every pass. Raises TieResolutionError if no pass
        within max_passes came back clean.
        """
        events: list[GameEvent] = []
        for pass_number in range(1, max_passes + 1):
            tied = False
            for bc in self.casinos():
                if not bc.is_tied():
                    continue
                tied = True
                rerolls = []
                for bt in bc.boss_tiles():
                    rerolls.append({
                        "loc": str(bt.loc),
                        "player": bt.player,
                        "old_die": bt.die,
                        "new_die": self.reroll_at(bt.loc, rng),
                    })
                events.append(boss_tie_rerolled(
                    bc.casino.value, sorted(bc.boss_players()), pass_number, rerolls,
                ))
            if not tied:
                return events if pass_number > 1 else None
        raise TieResolutionError(f"Boss ties remain after {max_passes} re-roll passes")

    # ===== Serialization Methods =====

    def to_dict(self) -> dict[str, Any]:
        """Entries ordered by location so the output is stable."""
        return {
            "tiles": [
                {"loc": loc.to_dict(), "tile": self.tiles[loc].to_dict()}
                for loc in sorted(self.tiles)
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Board":
        if not isinstance(data, dict):
            data = {}
        entries = data.get("tiles") or []
        if not isinstance(entries, list):
            entries = []
        board = cls()
        for entry in entries:
            if not isinstance(entry, dict) or not isinstance(entry.get("loc"), dict):
                continue
            board.set(Loc.from_dict(entry["loc"]), tile_from_dict(entry.get("tile")))
        return board
