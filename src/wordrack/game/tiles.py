"""Tiles and the shared tile bag."""

from __future__ import annotations

import random
from dataclasses import dataclass, replace

RACK_SIZE = 7

# Standard 100-tile distribution: letter -> (count, point_value)
# The empty string is the blank tile.
TILE_DISTRIBUTION: dict[str, tuple[int, int]] = {
    "A": (9, 1), "B": (2, 3), "C": (2, 3), "D": (4, 2), "E": (12, 1),
    "F": (2, 4), "G": (3, 2), "H": (2, 4), "I": (9, 1), "J": (1, 8),
    "K": (1, 5), "L": (4, 1), "M": (2, 3), "N": (6, 1), "O": (8, 1),
    "P": (2, 3), "Q": (1, 10), "R": (6, 1), "S": (4, 1), "T": (6, 1),
    "U": (4, 1), "V": (2, 4), "W": (2, 4), "X": (1, 8), "Y": (2, 4),
    "Z": (1, 10), "": (2, 0),
}

TOTAL_TILES = sum(count for count, _ in TILE_DISTRIBUTION.values())


@dataclass(frozen=True)
class Tile:
    """A single letter tile. ``id`` is unique for the lifetime of a game."""

    id: str
    letter: str
    value: int
    is_blank: bool = False

    def as_letter(self, letter: str) -> Tile:
        """Return this blank tile showing ``letter``. Value stays 0."""
        return replace(self, letter=letter.upper())


def create_tiles() -> list[Tile]:
    """Create the unshuffled standard tile set with ids tile_0..tile_99."""
    tiles: list[Tile] = []
    for letter, (count, value) in TILE_DISTRIBUTION.items():
        for _ in range(count):
            tiles.append(
                Tile(
                    id=f"tile_{len(tiles)}",
                    letter=letter,
                    value=value,
                    is_blank=letter == "",
                )
            )
    return tiles


def rack_value(tiles: list[Tile]) -> int:
    """Sum of point values of a group of tiles."""
    return sum(t.value for t in tiles)


class Bag:
    """The pool of undrawn tiles.

    Tiles are drawn from the end of the list. The bag never shuffles
    itself; callers pass in the game's ``random.Random``.
    """

    def __init__(self, tiles: list[Tile] | None = None) -> None:
        self._tiles: list[Tile] = list(tiles or [])

    @classmethod
    def standard(cls, rng: random.Random) -> Bag:
        bag = cls(create_tiles())
        bag.shuffle(rng)
        return bag

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self):
        return iter(list(self._tiles))

    @property
    def tiles(self) -> list[Tile]:
        return list(self._tiles)

    def shuffle(self, rng: random.Random) -> None:
        rng.shuffle(self._tiles)

    def draw(self, n: int) -> list[Tile]:
        """Remove and return up to ``n`` tiles (fewer if the bag is short)."""
        n = max(0, min(n, len(self._tiles)))
        drawn = [self._tiles.pop() for _ in range(n)]
        return drawn

    def return_tiles(self, tiles: list[Tile], rng: random.Random) -> None:
        """Put tiles back and reshuffle. Placed blanks lose their letter."""
        for t in tiles:
            self._tiles.append(replace(t, letter="") if t.is_blank else t)
        self.shuffle(rng)
