"""Game board — 15×15 grid with fixed multiplier cells."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wordrack.game.tiles import Tile

SIZE = 15
CENTER = (7, 7)


class MultiplierKind(Enum):
    LETTER = "letter"
    WORD = "word"


@dataclass(frozen=True)
class Multiplier:
    kind: MultiplierKind | None = None
    value: int = 1


NO_MULTIPLIER = Multiplier()

# Multiplier positions -------------------------------------------------------
# The center cell carries no multiplier.

# Triple Word
_TW_POSITIONS = [
    (0, 0), (0, 7), (0, 14),
    (7, 0), (7, 14),
    (14, 0), (14, 7), (14, 14),
]

# Double Word
_DW_POSITIONS = [
    (1, 1), (2, 2), (3, 3), (4, 4),
    (1, 13), (2, 12), (3, 11), (4, 10),
    (10, 4), (11, 3), (12, 2), (13, 1),
    (10, 10), (11, 11), (12, 12), (13, 13),
]

# Triple Letter
_TL_POSITIONS = [
    (1, 5), (1, 9),
    (5, 1), (5, 5), (5, 9), (5, 13),
    (9, 1), (9, 5), (9, 9), (9, 13),
    (13, 5), (13, 9),
]

# Double Letter
_DL_POSITIONS = [
    (0, 3), (0, 11),
    (2, 6), (2, 8),
    (3, 0), (3, 7), (3, 14),
    (6, 2), (6, 6), (6, 8), (6, 12),
    (7, 3), (7, 11),
    (8, 2), (8, 6), (8, 8), (8, 12),
    (11, 0), (11, 7), (11, 14),
    (12, 6), (12, 8),
    (14, 3), (14, 11),
]

MULTIPLIERS: dict[tuple[int, int], Multiplier] = {}
for _pos in _TW_POSITIONS:
    MULTIPLIERS[_pos] = Multiplier(MultiplierKind.WORD, 3)
for _pos in _DW_POSITIONS:
    MULTIPLIERS[_pos] = Multiplier(MultiplierKind.WORD, 2)
for _pos in _TL_POSITIONS:
    MULTIPLIERS[_pos] = Multiplier(MultiplierKind.LETTER, 3)
for _pos in _DL_POSITIONS:
    MULTIPLIERS[_pos] = Multiplier(MultiplierKind.LETTER, 2)


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < SIZE and 0 <= col < SIZE


@dataclass(frozen=True)
class Cell:
    row: int
    col: int
    tile: Tile | None
    multiplier: Multiplier


class Board:
    """15×15 board.

    Only occupied cells are stored; multipliers come from the fixed
    ``MULTIPLIERS`` table and never change.
    """

    def __init__(self, tiles: dict[tuple[int, int], Tile] | None = None) -> None:
        self._tiles: dict[tuple[int, int], Tile] = dict(tiles or {})

    @property
    def is_empty(self) -> bool:
        return not self._tiles

    def __len__(self) -> int:
        return len(self._tiles)

    def get(self, row: int, col: int) -> Tile | None:
        """Tile at (row, col), or None if empty or off the board."""
        return self._tiles.get((row, col))

    def is_occupied(self, row: int, col: int) -> bool:
        return (row, col) in self._tiles

    def cell(self, row: int, col: int) -> Cell:
        if not in_bounds(row, col):
            raise IndexError(f"({row},{col}) is off the board")
        return Cell(
            row=row,
            col=col,
            tile=self._tiles.get((row, col)),
            multiplier=MULTIPLIERS.get((row, col), NO_MULTIPLIER),
        )

    def place(self, row: int, col: int, tile: Tile) -> None:
        if not in_bounds(row, col):
            raise IndexError(f"({row},{col}) is off the board")
        if (row, col) in self._tiles:
            raise ValueError(f"({row},{col}) is already occupied")
        self._tiles[(row, col)] = tile

    def overlay(self, placements: dict[tuple[int, int], Tile]) -> Board:
        """Return a new board with ``placements`` added. Self is unchanged."""
        merged = dict(self._tiles)
        merged.update(placements)
        return Board(merged)

    def occupied(self) -> list[tuple[tuple[int, int], Tile]]:
        """All (position, tile) pairs, in row-major order."""
        return sorted(self._tiles.items())

    def tiles(self) -> list[Tile]:
        return [t for _, t in self.occupied()]

    def has_neighbor(self, row: int, col: int) -> bool:
        """True if any orthogonally adjacent cell holds a tile."""
        for dr, dc in [(-1, 0), (1, 0), (0, -1), (0, 1)]:
            if (row + dr, col + dc) in self._tiles:
                return True
        return False

    def run_through(
        self, row: int, col: int, horizontal: bool
    ) -> list[tuple[int, int]]:
        """Positions of the contiguous run of tiles through (row, col).

        Walks outward in both directions until an empty cell or the edge.
        """
        dr, dc = (0, 1) if horizontal else (1, 0)
        positions: list[tuple[int, int]] = [(row, col)]

        r, c = row - dr, col - dc
        while (r, c) in self._tiles:
            positions.insert(0, (r, c))
            r, c = r - dr, c - dc

        r, c = row + dr, col + dc
        while (r, c) in self._tiles:
            positions.append((r, c))
            r, c = r + dr, c + dc

        return positions
