"""
Static board layout definitions.
All setup data lives under data/setups/<setup_id>/: tiles.json (one entry per lot) and
optional manifest.json (display_name, description).
The layout is a read-only oracle for the engine: build cost, starting cash, starting die
and card payout of every lot.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from vegas.engine.board import Block, Casino, Loc

DATA_DIR = Path(__file__).parent.parent / "data"
SETUPS_DIR = DATA_DIR / "setups"


def _default_setup_id() -> str:
    """Single place for default: vegas.config.DEFAULT_SETUP_ID."""
    from vegas.config import DEFAULT_SETUP_ID
    return DEFAULT_SETUP_ID


def _setup_dir(setup_id: str) -> Path:
    return SETUPS_DIR / setup_id


def list_setups() -> list[dict]:
    """Return [{ id, display_name }, ...] for all setups (subdirs of data/setups/ with tiles.json)."""
    out = []
    if not SETUPS_DIR.exists():
        return out
    for d in sorted(SETUPS_DIR.iterdir()):
        if not d.is_dir():
            continue
        setup_id = d.name
        if not (d / "tiles.json").exists():
            continue
        manifest_path = d / "manifest.json"
        if manifest_path.exists():
            try:
                with open(manifest_path, "r") as f:
                    m = json.load(f)
                out.append({
                    "id": m.get("id", setup_id),
                    "display_name": m.get("display_name", setup_id),
                })
            except (json.JSONDecodeError, OSError):
                out.append({"id": setup_id, "display_name": setup_id})
        else:
            out.append({"id": setup_id, "display_name": setup_id})
    return out


def load_setup(setup_id: str) -> dict:
    """Load setup by id. Returns { id, display_name, tiles } where tiles is the loaded layout."""
    setup_dir = _setup_dir(setup_id)
    if not setup_dir.exists() or not setup_dir.is_dir():
        raise FileNotFoundError(f"Setup not found: {setup_id}")
    if not (setup_dir / "tiles.json").exists():
        raise FileNotFoundError(f"tiles.json not found in setup: {setup_id}")
    result = {
        "id": setup_id,
        "display_name": setup_id,
        "tiles": load_tile_definitions(data_dir=setup_dir),
    }
    manifest_path = setup_dir / "manifest.json"
    if manifest_path.exists():
        try:
            with open(manifest_path, "r") as f:
                m = json.load(f)
            result["id"] = m.get("id", setup_id)
            result["display_name"] = m.get("display_name", setup_id)
        except (json.JSONDecodeError, OSError):
            pass
    return result


@dataclass(frozen=True)
class TileDefinition:
    """Defines immutable properties of a lot."""
    loc: Loc
    build_cost: int  # cash needed to build here
    starting_cash: int  # cash granted when the lot is dealt at game start
    die: int  # die value a casino starts with when built here
    payout: Optional[Casino] = None  # casino this lot's card pays out for; None pays the strip

    def to_dict(self) -> dict[str, Any]:
        return {
            "block": self.loc.block.value,
            "lot": self.loc.lot,
            "build_cost": self.build_cost,
            "starting_cash": self.starting_cash,
            "die": self.die,
            "payout": self.payout.value if self.payout else None,
        }


def _tile_from_data(data: dict) -> TileDefinition:
    payout = data.get("payout")
    return TileDefinition(
        loc=Loc(Block(data["block"]), int(data["lot"])),
        build_cost=int(data["build_cost"]),
        starting_cash=int(data["starting_cash"]),
        die=int(data["die"]),
        payout=Casino(payout) if payout else None,
    )


def load_tile_definitions(
    data_dir: Path | str | None = None,
    setup_id: str | None = None,
) -> dict[Loc, TileDefinition]:
    """
    Load the board layout from tiles.json.

    Args:
        data_dir: Directory containing tiles.json.
        setup_id: If set, use data/setups/<setup_id>/ (ignored if data_dir is set).
        With neither, the default setup from vegas.config is used.

    Returns: loc -> TileDefinition, in canonical location order
    """
    if data_dir is not None:
        data_dir = Path(data_dir)
    else:
        data_dir = _setup_dir(setup_id if setup_id is not None else _default_setup_id())

    with open(data_dir / "tiles.json", "r") as f:
        tiles_data = json.load(f)

    tiles = [_tile_from_data(data) for data in tiles_data.get("tiles", [])]
    return {t.loc: t for t in sorted(tiles, key=lambda t: t.loc)}


def definitions_snapshot(tile_defs: dict[Loc, TileDefinition]) -> dict:
    """Snapshot of the layout for storing in game config, so a game keeps the layout it was created with."""
    return {"tiles": [t.to_dict() for t in tile_defs.values()]}


def definitions_from_snapshot(snapshot: dict) -> dict[Loc, TileDefinition]:
    """Inverse of definitions_snapshot."""
    tiles = [_tile_from_data(data) for data in (snapshot.get("tiles") or [])]
    return {t.loc: t for t in sorted(tiles, key=lambda t: t.loc)}
