"""Word extraction and scoring for a validated placement.

New tiles are overlaid on a temporary board. The main word runs along the
placement line; every new tile may also form a perpendicular word. Runs of
a single cell are not words.

Multipliers only count under this move's new tiles, so a cell's bonus is
used once over the whole game. Multipliers are re-derived from the fixed
table on every move and never cached on the board.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from wordrack.core.lexicon import Lexicon, as_word_check
from wordrack.game.board import Board, MultiplierKind
from wordrack.game.placement import is_horizontal
from wordrack.game.tiles import RACK_SIZE, Tile

BINGO_BONUS = 50

NO_WORD = "Placement must form a word of at least two letters"
INVALID_WORD = "Invalid word"


@dataclass(frozen=True)
class FormedWord:
    word: str
    positions: tuple[tuple[int, int], ...]
    score: int
    horizontal: bool


@dataclass(frozen=True)
class ScoredPlacement:
    """Every word a placement forms plus the move total.

    ``error`` is set when the placement formed no word or a word failed
    the lexicon; in that case ``total`` is 0 and nothing should be applied.
    """

    words: tuple[FormedWord, ...] = ()
    total: int = 0
    bingo: bool = False
    error: str | None = None

    @property
    def valid(self) -> bool:
        return self.error is None


def score_word(
    board: Board,
    positions: list[tuple[int, int]],
    new_positions: set[tuple[int, int]],
) -> int:
    """Score one word on ``board`` (which already holds the new tiles)."""
    letter_sum = 0
    word_mult = 1
    for r, c in positions:
        cell = board.cell(r, c)
        lv = cell.tile.value
        if (r, c) in new_positions:
            mult = cell.multiplier
            if mult.kind is MultiplierKind.LETTER:
                lv *= mult.value
            elif mult.kind is MultiplierKind.WORD:
                word_mult *= mult.value
        letter_sum += lv
    return letter_sum * word_mult


def _make_word(
    board: Board,
    positions: list[tuple[int, int]],
    new_positions: set[tuple[int, int]],
    horizontal: bool,
) -> FormedWord:
    return FormedWord(
        word="".join(board.get(r, c).letter for r, c in positions),
        positions=tuple(positions),
        score=score_word(board, positions, new_positions),
        horizontal=horizontal,
    )


def find_words(
    board: Board, placements: dict[tuple[int, int], Tile]
) -> list[FormedWord]:
    """All words of two or more letters formed by ``placements``.

    The main word comes first, then perpendicular words in line order.
    """
    temp = board.overlay(placements)
    new_positions = set(placements)
    ordered = sorted(placements)
    horizontal = is_horizontal(ordered)

    words: list[FormedWord] = []

    main = temp.run_through(*ordered[0], horizontal=horizontal)
    if len(main) > 1:
        words.append(_make_word(temp, main, new_positions, horizontal))

    for r, c in ordered:
        cross = temp.run_through(r, c, horizontal=not horizontal)
        if len(cross) > 1:
            words.append(_make_word(temp, cross, new_positions, not horizontal))

    return words


def score_placement(
    board: Board,
    placements: dict[tuple[int, int], Tile],
    lexicon: Lexicon | Callable[[str], bool],
) -> ScoredPlacement:
    """Extract, check and score every word formed by ``placements``.

    ``placements`` must already have passed ``validate_placement``. The
    first word the lexicon rejects aborts the whole placement.
    """
    is_valid_word = as_word_check(lexicon)
    words = find_words(board, placements)
    if not words:
        return ScoredPlacement(error=NO_WORD)

    for w in words:
        if not is_valid_word(w.word):
            return ScoredPlacement(error=f"{INVALID_WORD}: {w.word}")

    total = sum(w.score for w in words)
    bingo = len(placements) == RACK_SIZE
    if bingo:
        total += BINGO_BONUS

    return ScoredPlacement(words=tuple(words), total=total, bingo=bingo)
