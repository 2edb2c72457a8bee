"""Snapshot serialization — lossless dict/JSON round trip of a GameState.

Hosts persist and broadcast state between moves. Every field survives the
round trip, including tile ids, which later moves use to prove rack
ownership.
"""

from __future__ import annotations

import json
from typing import Any

from wordrack.game.board import Board
from wordrack.game.state import (
    GameSettings,
    GameState,
    GameStatus,
    MoveRecord,
    MoveType,
    Player,
    TiePolicy,
)
from wordrack.game.tiles import Bag, Tile

SCHEMA_VERSION = "1.0.0"


def _tile_to_dict(tile: Tile) -> dict:
    return {
        "id": tile.id,
        "letter": tile.letter,
        "value": tile.value,
        "is_blank": tile.is_blank,
    }


def _tile_from_dict(raw: dict) -> Tile:
    return Tile(
        id=raw["id"],
        letter=raw["letter"],
        value=raw["value"],
        is_blank=raw.get("is_blank", False),
    )


def state_to_dict(state: GameState) -> dict[str, Any]:
    s = state.settings
    return {
        "schema_version": SCHEMA_VERSION,
        "game_id": state.game_id,
        "status": state.status.value,
        "current_player_index": state.current_player_index,
        "turn_started_at": state.turn_started_at,
        "consecutive_passes": state.consecutive_passes,
        "winners": list(state.winners),
        "settings": {
            "entry_cost": s.entry_cost,
            "max_players": s.max_players,
            "is_private": s.is_private,
            "is_single_player": s.is_single_player,
            "time_per_turn_s": s.time_per_turn_s,
            "prize_pool": s.prize_pool,
            "tie_policy": s.tie_policy.value,
            "max_consecutive_passes": s.max_consecutive_passes,
        },
        "players": [
            {
                "id": p.id,
                "name": p.name,
                "rack": [_tile_to_dict(t) for t in p.rack],
                "score": p.score,
                "balance": p.balance,
            }
            for p in state.players
        ],
        "board": [
            {"row": r, "col": c, "tile": _tile_to_dict(t)}
            for (r, c), t in state.board.occupied()
        ],
        # Bag order matters: it fixes which tiles the next draw returns
        "bag": [_tile_to_dict(t) for t in state.bag],
        "moves": [
            {
                "action": m.action.value,
                "player_id": m.player_id,
                "tiles": [_tile_to_dict(t) for t in m.tiles],
                "positions": [list(pos) for pos in m.positions],
                "words": list(m.words),
                "score": m.score,
                "timestamp": m.timestamp,
            }
            for m in state.moves
        ],
    }


def state_from_dict(raw: dict[str, Any]) -> GameState:
    """Rebuild a GameState. Raises ValueError on an unusable snapshot."""
    try:
        s = raw["settings"]
        settings = GameSettings(
            entry_cost=s["entry_cost"],
            max_players=s["max_players"],
            is_private=s["is_private"],
            is_single_player=s["is_single_player"],
            time_per_turn_s=s["time_per_turn_s"],
            prize_pool=s["prize_pool"],
            tie_policy=TiePolicy(s.get("tie_policy", "first")),
            max_consecutive_passes=s.get("max_consecutive_passes", 0),
        )
        board = Board({
            (cell["row"], cell["col"]): _tile_from_dict(cell["tile"])
            for cell in raw["board"]
        })
        players = [
            Player(
                id=p["id"],
                name=p["name"],
                rack=[_tile_from_dict(t) for t in p["rack"]],
                score=p["score"],
                balance=p["balance"],
            )
            for p in raw["players"]
        ]
        moves = [
            MoveRecord(
                action=MoveType(m["action"]),
                player_id=m["player_id"],
                tiles=tuple(_tile_from_dict(t) for t in m["tiles"]),
                positions=tuple(tuple(pos) for pos in m["positions"]),
                words=tuple(m["words"]),
                score=m["score"],
                timestamp=m["timestamp"],
            )
            for m in raw["moves"]
        ]
        state = GameState(
            game_id=raw["game_id"],
            board=board,
            bag=Bag([_tile_from_dict(t) for t in raw["bag"]]),
            settings=settings,
            players=players,
            current_player_index=raw["current_player_index"],
            status=GameStatus(raw["status"]),
            moves=moves,
            turn_started_at=raw["turn_started_at"],
            winners=list(raw.get("winners", [])),
            consecutive_passes=raw.get("consecutive_passes", 0),
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Invalid game snapshot: {e}") from e

    ids = state.all_tile_ids()
    if len(ids) != len(set(ids)):
        raise ValueError("Invalid game snapshot: duplicate tile ids")
    if state.players and not 0 <= state.current_player_index < len(state.players):
        raise ValueError("Invalid game snapshot: current_player_index out of range")
    return state


def dumps_state(state: GameState, **kwargs) -> str:
    return json.dumps(state_to_dict(state), **kwargs)


def loads_state(text: str) -> GameState:
    return state_from_dict(json.loads(text))
