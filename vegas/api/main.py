"""
FastAPI backend for the Vegas board engine.
Provides REST API endpoints for game state management and actions.
"""

import json
import random
import uuid
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .database import get_db, init_db
from .models import Game as GameModel

from vegas.config import DEFAULT_SETUP_ID
from vegas.engine.actions import build, end_turn
from vegas.engine.board import Casino, Loc
from vegas.engine.definitions import (
    TileDefinition,
    definitions_from_snapshot,
    definitions_snapshot,
    list_setups,
    load_setup,
)
from vegas.engine.errors import InvalidPlayerCount
from vegas.engine.queries import (
    get_buildable_locations,
    get_casino_summaries,
    get_player_counts,
    get_status,
    validate_action,
)
from vegas.engine.reducer import apply_action
from vegas.engine.state import GameState
from vegas.engine.utils import initialize_game_state

app = FastAPI(
    title="Vegas Board API",
    description="Backend API for the casino strip board game engine",
    version="1.0.0",
)

# CORS configuration for frontend
CORS_ORIGINS = ["http://localhost:5173", "http://localhost:5174", "http://localhost:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log method and path so 500s can be traced to the failing endpoint."""
    method = getattr(request, "method", "?")
    url = getattr(request, "url", None)
    path = url.path if url else "?"
    try:
        response = await call_next(request)
        if response.status_code >= 500:
            print(f"[500] {method} {path}", flush=True)
        return response
    except Exception:
        print(f"[500] {method} {path} (exception)", flush=True)
        raise


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    """Return 500 with CORS headers and full traceback so the frontend can read the error."""
    import traceback
    tb = traceback.format_exc()
    traceback.print_exc()
    origin = request.headers.get("origin")
    allow_origin = origin if origin in CORS_ORIGINS else CORS_ORIGINS[0]
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "traceback": tb},
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
        },
    )


# Per-game board layout (from config snapshot); key = game_id
game_defs: dict[str, dict[Loc, TileDefinition]] = {}


# ===== Pydantic Models =====

class CreateGameRequest(BaseModel):
    name: str = "Vegas"
    players: int
    """Setup id from GET /setups. Omitted = default from vegas.config.DEFAULT_SETUP_ID."""
    setup_id: str | None = None
    """Seed for the shuffle and starting player, for reproducible games."""
    seed: int | None = None


class BuildRequest(BaseModel):
    player: int
    loc: str  # e.g. "A1"
    casino: str  # e.g. "albion"


class EndTurnRequest(BaseModel):
    player: int


# ===== Helper Functions =====

def get_game_definitions(game_id: str, db: Session) -> dict[Loc, TileDefinition]:
    """Return the board layout this game was created with."""
    if game_id in game_defs:
        return game_defs[game_id]
    row = db.query(GameModel).filter(GameModel.id == game_id).first()
    if not row or not row.config:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    config = json.loads(row.config)
    tile_defs = definitions_from_snapshot(config.get("definitions") or {})
    game_defs[game_id] = tile_defs
    return tile_defs


def get_game(game_id: str, db: Session) -> GameState:
    """Get game state from DB; raise 404 if not found."""
    row = db.query(GameModel).filter(GameModel.id == game_id).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    try:
        raw = json.loads(row.game_state) if isinstance(row.game_state, str) else row.game_state
        if not isinstance(raw, dict):
            raw = {}
        state = GameState.from_dict(raw)
    except Exception:
        # Corrupt or legacy state in DB: treat as not found so client can create a fresh game
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return state


def save_game(game_id: str, state: GameState, db: Session) -> None:
    """Persist game state to DB."""
    row = db.query(GameModel).filter(GameModel.id == game_id).first()
    if row:
        row.game_state = json.dumps(state.to_dict())
        row.status = get_status(state)["status"]
        db.commit()


def state_for_response(state: GameState) -> dict[str, Any]:
    """Public state (deck order hidden) plus status and casino groups for the UI."""
    out = state.pub_state()
    out["status"] = get_status(state)
    out["casinos"] = get_casino_summaries(state)
    return out


def _parse_loc(text: str) -> Loc:
    try:
        return Loc.parse(text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _parse_casino(text: str) -> Casino:
    try:
        return Casino(text.strip().lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown casino: {text}")


@app.on_event("startup")
def on_startup():
    init_db()


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "Vegas Board API", "version": "1.0.0"}


@app.get("/setups")
def get_setups():
    """List available board layouts. Use setup_id in POST /games."""
    return {"setups": list_setups(), "player_counts": get_player_counts()}


@app.post("/games")
def create_game(request: CreateGameRequest, db: Session = Depends(get_db)):
    """Create a new game: deal opening lots and pick the starting player."""
    setup_id = request.setup_id if request.setup_id is not None else DEFAULT_SETUP_ID
    try:
        setup = load_setup(setup_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    tile_defs = setup["tiles"]
    rng = random.Random(request.seed) if request.seed is not None else None
    try:
        state, events = initialize_game_state(request.players, tile_defs, rng)
    except InvalidPlayerCount as e:
        raise HTTPException(status_code=400, detail=str(e))

    game_id = str(uuid.uuid4())
    config = {"setup_id": setup["id"], "definitions": definitions_snapshot(tile_defs)}
    row = GameModel(
        id=game_id,
        name=request.name,
        player_count=request.players,
        status="active",
        game_state=json.dumps(state.to_dict()),
        config=json.dumps(config),
    )
    db.add(row)
    db.commit()
    game_defs[game_id] = tile_defs
    return {
        "game_id": game_id,
        "state": state_for_response(state),
        "events": [e.to_dict() for e in events],
    }


@app.get("/games/{game_id}")
def get_game_state(game_id: str, db: Session = Depends(get_db)):
    """Get current public game state."""
    state = get_game(game_id, db)
    return {"game_id": game_id, "state": state_for_response(state)}


@app.get("/games/{game_id}/casinos")
def get_casinos(game_id: str, db: Session = Depends(get_db)):
    """Casino groups currently on the board, with boss tiles."""
    state = get_game(game_id, db)
    return {"casinos": get_casino_summaries(state)}


@app.get("/games/{game_id}/players/{player}")
def get_player_view(game_id: str, player: int, db: Session = Depends(get_db)):
    """One player's view of the game, plus the lots they could build on."""
    state = get_game(game_id, db)
    tile_defs = get_game_definitions(game_id, db)
    if not 0 <= player < state.player_count:
        raise HTTPException(status_code=404, detail=f"Player {player} not in game")
    return {
        "view": state.player_state(player),
        "buildable": get_buildable_locations(state, player, tile_defs),
    }


@app.post("/games/{game_id}/build")
def do_build(game_id: str, request: BuildRequest, db: Session = Depends(get_db)):
    """Build a casino on an owned lot. Boss ties are resolved before the response."""
    state = get_game(game_id, db)
    tile_defs = get_game_definitions(game_id, db)
    action = build(request.player, _parse_loc(request.loc), _parse_casino(request.casino))
    validation = validate_action(state, action, tile_defs)
    if not validation.valid:
        raise HTTPException(status_code=400, detail=validation.error)
    new_state, events = apply_action(state, action, tile_defs)
    save_game(game_id, new_state, db)
    return {
        "state": state_for_response(new_state),
        "events": [e.to_dict() for e in events],
    }


@app.post("/games/{game_id}/end-turn")
def do_end_turn(game_id: str, request: EndTurnRequest, db: Session = Depends(get_db)):
    """End the current turn."""
    state = get_game(game_id, db)
    tile_defs = get_game_definitions(game_id, db)
    action = end_turn(request.player)
    validation = validate_action(state, action, tile_defs)
    if not validation.valid:
        raise HTTPException(status_code=400, detail=validation.error)
    new_state, events = apply_action(state, action, tile_defs)
    save_game(game_id, new_state, db)
    return {
        "state": state_for_response(new_state),
        "events": [e.to_dict() for e in events],
    }


@app.delete("/games/{game_id}")
def delete_game(game_id: str, db: Session = Depends(get_db)):
    """Delete a game from DB and the layout cache."""
    row = db.query(GameModel).filter(GameModel.id == game_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Game not found")
    db.delete(row)
    db.commit()
    game_defs.pop(game_id, None)
    return {"message": f"Game {game_id} deleted"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
