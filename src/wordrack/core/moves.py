"""MoveParser — turn host-supplied move descriptors into typed moves.

Descriptors are plain JSON-shaped dicts (what a host receives over its own
transport). They are validated against ``game/schema.json`` before being
converted, so the engine only ever sees well-formed moves.
"""

from __future__ import annotations

from dataclasses import dataclass

import jsonschema

from wordrack.core.schemas import load_move_schema
from wordrack.game.state import MoveType


@dataclass(frozen=True)
class TilePlacement:
    """One rack tile laid on (row, col).

    ``letter`` is the tile's letter, or the declared letter for a blank.
    ``value`` is informational; the rack tile's own value is authoritative.
    """

    tile_id: str
    row: int
    col: int
    letter: str = ""
    value: int | None = None


@dataclass(frozen=True)
class Move:
    action: MoveType
    placements: tuple[TilePlacement, ...] = ()
    tile_ids: tuple[str, ...] = ()

    @classmethod
    def place(cls, placements: list[TilePlacement]) -> Move:
        return cls(action=MoveType.PLACE, placements=tuple(placements))

    @classmethod
    def exchange(cls, tile_ids: list[str]) -> Move:
        return cls(action=MoveType.EXCHANGE, tile_ids=tuple(tile_ids))

    @classmethod
    def pass_turn(cls) -> Move:
        return cls(action=MoveType.PASS)


@dataclass(frozen=True)
class ParseResult:
    """Result of parsing a move descriptor."""

    success: bool
    move: Move | None
    error: str | None


class MoveParser:
    """Validate descriptors against the move schema and build ``Move`` values."""

    def __init__(self, schema: dict | None = None) -> None:
        self._schema = schema if schema is not None else load_move_schema()

    @property
    def schema(self) -> dict:
        return self._schema

    def parse(self, descriptor: object) -> ParseResult:
        if isinstance(descriptor, Move):
            return ParseResult(success=True, move=descriptor, error=None)
        if not isinstance(descriptor, dict):
            return ParseResult(
                success=False, move=None, error="Move descriptor is not an object"
            )

        try:
            jsonschema.validate(descriptor, self._schema)
        except jsonschema.ValidationError as e:
            return ParseResult(
                success=False, move=None, error=f"Malformed move: {e.message}"
            )

        action = MoveType(descriptor["action"])
        if action is MoveType.PLACE:
            move = Move.place([
                TilePlacement(
                    tile_id=t["tile_id"],
                    row=t["row"],
                    col=t["col"],
                    letter=t.get("letter", ""),
                    value=t.get("value"),
                )
                for t in descriptor["tiles"]
            ])
        elif action is MoveType.EXCHANGE:
            move = Move.exchange(list(descriptor["tile_ids"]))
        else:
            move = Move.pass_turn()

        return ParseResult(success=True, move=move, error=None)
