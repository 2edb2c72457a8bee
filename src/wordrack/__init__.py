"""wordrack — turn-based word-construction board game engine.

Usage:
    from wordrack import new_game

    game = new_game()
    game.add_player("p1", "Ann", balance=100)
    game.add_player("p2", "Bo", balance=100)
    result = game.submit_move("p1", {"action": "pass"})
"""

__version__ = "0.1.0"

from wordrack.core.lexicon import FixedLexicon
from wordrack.game.engine import WordGame, new_game
from wordrack.game.results import MoveResult
from wordrack.game.state import GameSettings, GameState, GameStatus, TiePolicy

__all__ = [
    "FixedLexicon",
    "GameSettings",
    "GameState",
    "GameStatus",
    "MoveResult",
    "TiePolicy",
    "WordGame",
    "new_game",
]
