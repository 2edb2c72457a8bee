"""Lexicon — the word-validity capability injected into the engine.

Anything with an ``is_valid_word(word) -> bool`` method (or a plain
callable of the same shape) can stand in. ``FixedLexicon`` is a small
in-memory word set; production hosts plug in a real dictionary.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Protocol

DEFAULT_WORDS = frozenset({
    "HELLO", "WORLD", "GAME", "PLAY", "WORD", "TILE", "SCORE", "BOARD",
    "LETTERS", "FRIENDS", "SCRABBLE", "PUZZLE", "CHALLENGE", "STRATEGY",
    "THINK", "BRAIN", "SMART", "WIN", "LOSE", "TURN", "MOVE", "PLACE",
    "EXCHANGE", "PASS", "TIME", "RULES", "POINTS", "BONUS", "MULTIPLIER",
})


class Lexicon(Protocol):
    def is_valid_word(self, word: str) -> bool: ...


class FixedLexicon:
    """Case-insensitive membership check against a fixed word set."""

    def __init__(self, words: Iterable[str] = DEFAULT_WORDS) -> None:
        self._words = frozenset(w.strip().upper() for w in words if w.strip())

    @classmethod
    def from_file(cls, path: Path) -> FixedLexicon:
        """One word per line; blank lines and ``#`` comments are skipped."""
        with open(path) as f:
            return cls(
                line for line in f if not line.lstrip().startswith("#")
            )

    @property
    def words(self) -> frozenset[str]:
        return self._words

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: str) -> bool:
        return self.is_valid_word(word)

    def is_valid_word(self, word: str) -> bool:
        return word.upper() in self._words


def as_word_check(lexicon: Lexicon | Callable[[str], bool]) -> Callable[[str], bool]:
    """Normalise a lexicon object or bare predicate to a predicate."""
    check = getattr(lexicon, "is_valid_word", None)
    if check is not None:
        return check
    return lexicon
