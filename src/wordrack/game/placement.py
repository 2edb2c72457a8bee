"""Placement validator — geometric legality of a turn's new tiles.

Checks run in a fixed order and the first failure is reported:

1. at least one tile
2. every position on the board, free, and used once
3. all tiles share a row or a column
4. no gaps along the line (gaps may be filled by existing tiles)
5. an opening move covers the center cell
6. a later move touches at least one existing tile

Dictionary checks happen afterwards, in ``wordrack.game.words``.
"""

from __future__ import annotations

from wordrack.game.board import CENTER, Board, in_bounds
from wordrack.game.results import ValidationResult

NO_TILES = "No tiles placed"
OFF_BOARD = "Tiles must be placed on the board"
OCCUPIED = "Cell is already occupied"
DUPLICATE_POSITION = "Two tiles placed on the same cell"
NOT_STRAIGHT = "Tiles must be placed in a straight line"
NOT_CONTIGUOUS = "Tiles must be contiguous"
MUST_USE_CENTER = "First word must use the center square"
MUST_CONNECT = "New tiles must connect to existing tiles"


def is_horizontal(positions: list[tuple[int, int]]) -> bool:
    """True when all positions share a row (a lone tile counts as a row)."""
    return all(r == positions[0][0] for r, _ in positions)


def validate_placement(
    board: Board, positions: list[tuple[int, int]]
) -> ValidationResult:
    """Validate the positions of this turn's new tiles against ``board``."""
    if not positions:
        return ValidationResult(legal=False, reason=NO_TILES)

    seen: set[tuple[int, int]] = set()
    for r, c in positions:
        if not in_bounds(r, c):
            return ValidationResult(
                legal=False, reason=f"{OFF_BOARD}: ({r},{c})"
            )
        if board.is_occupied(r, c):
            return ValidationResult(
                legal=False, reason=f"{OCCUPIED}: ({r},{c})"
            )
        if (r, c) in seen:
            return ValidationResult(
                legal=False, reason=f"{DUPLICATE_POSITION}: ({r},{c})"
            )
        seen.add((r, c))

    horizontal = is_horizontal(positions)
    vertical = all(c == positions[0][1] for _, c in positions)
    if not horizontal and not vertical:
        return ValidationResult(legal=False, reason=NOT_STRAIGHT)

    # Every cell between the extremes must be new or already occupied
    if horizontal:
        row = positions[0][0]
        cols = [c for _, c in positions]
        span = [(row, c) for c in range(min(cols), max(cols) + 1)]
    else:
        col = positions[0][1]
        rows = [r for r, _ in positions]
        span = [(r, col) for r in range(min(rows), max(rows) + 1)]
    for pos in span:
        if pos not in seen and not board.is_occupied(*pos):
            return ValidationResult(legal=False, reason=NOT_CONTIGUOUS)

    if board.is_empty:
        if CENTER not in seen:
            return ValidationResult(legal=False, reason=MUST_USE_CENTER)
    elif not any(board.has_neighbor(r, c) for r, c in positions):
        return ValidationResult(legal=False, reason=MUST_CONNECT)

    return ValidationResult(legal=True)
