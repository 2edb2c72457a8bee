"""Shared test fixtures for wordrack."""

import random

import pytest

from wordrack.core.lexicon import FixedLexicon
from wordrack.game.engine import new_game
from wordrack.game.state import GameSettings
from wordrack.game.tiles import Bag

TEST_WORDS = [
    "CAT", "CATS", "AT", "TA", "AS", "DOG", "LETTERS", "TEA", "EAT",
]

# Cells used to park surplus tiles out of the way of play around the center
_PARK_CELLS = [(r, c) for r in (0, 1, 2, 3, 4, 5, 13, 14) for c in range(15)]


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def lexicon():
    return FixedLexicon(TEST_WORDS)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return GameSettings(entry_cost=10, max_players=4)


@pytest.fixture
def game(settings, lexicon, clock):
    """Two-player active game: p1 (Ann) to move, p2 (Bo) waiting."""
    g = new_game(
        settings, lexicon=lexicon, rng=random.Random(42), clock=clock, game_id="g1"
    )
    assert g.add_player("p1", "Ann", 100)
    assert g.add_player("p2", "Bo", 100)
    return g


@pytest.fixture
def rig():
    """Give a player a rack of chosen letters ("?" = blank).

    Tiles are swapped with the bag so every tile id stays accounted for.
    Returns the rigged tiles in the order requested.
    """

    def _rig(game, player_id, letters):
        state = game._state
        player = state.get_player(player_id)
        pool = state.bag.tiles + player.rack
        chosen = []
        for letter in letters:
            want = "" if letter == "?" else letter
            tile = next(t for t in pool if t.letter == want)
            pool.remove(tile)
            chosen.append(tile)
        player.rack = chosen
        state.bag = Bag(pool)
        return chosen

    return _rig


@pytest.fixture
def park():
    """Move bag tiles onto the edge rows of the board until ``keep`` remain."""

    def _park(game, keep=0):
        state = game._state
        cells = iter(_PARK_CELLS)
        while len(state.bag) > keep:
            (tile,) = state.bag.draw(1)
            state.board.place(*next(cells), tile)

    return _park


def place(tiles, row, col, horizontal=True):
    """Build a place descriptor laying ``tiles`` in a line from (row, col)."""
    return {
        "action": "place",
        "tiles": [
            {
                "tile_id": t.id,
                "letter": t.letter,
                "value": t.value,
                "row": row + (0 if horizontal else i),
                "col": col + (i if horizontal else 0),
            }
            for i, t in enumerate(tiles)
        ],
    }


@pytest.fixture
def place_move():
    return place
