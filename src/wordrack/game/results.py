"""Result values returned by validation and move handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wordrack.game.state import GameState


@dataclass(frozen=True)
class ValidationResult:
    """Result of checking a placement against the board rules."""

    legal: bool
    reason: str | None = None


@dataclass(frozen=True)
class MoveResult:
    """Outcome of one submitted move.

    ``new_state`` is only set on success and is never the caller's
    input object.
    """

    success: bool
    error: str | None = None
    new_state: GameState | None = None
    score: int = 0
    words: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def failure(cls, error: str) -> MoveResult:
        return cls(success=False, error=error)
