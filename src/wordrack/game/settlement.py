"""End-of-game settlement: rack penalties and prize distribution."""

from __future__ import annotations

import logging

from wordrack.game.state import GameState, GameStatus, TiePolicy
from wordrack.game.tiles import rack_value

logger = logging.getLogger(__name__)


def settle(state: GameState) -> list[str]:
    """Complete ``state`` in place and return the winning player ids.

    Every player loses the value of the tiles left on their rack. The
    highest adjusted score wins; ties are resolved by the game's
    ``tie_policy``. Winners are credited the prize pool; the pool figure
    itself is left as a record of what was paid out. Calling this on an
    already completed game is a no-op.
    """
    if state.status is GameStatus.COMPLETED:
        return list(state.winners)

    state.status = GameStatus.COMPLETED
    if not state.players:
        return []

    for p in state.players:
        p.score -= rack_value(p.rack)

    best = max(p.score for p in state.players)
    # Turn order is preserved, so leaders[0] reached the top score first
    leaders = [p for p in state.players if p.score == best]

    if state.settings.tie_policy is TiePolicy.SPLIT:
        winners = leaders
    else:
        winners = leaders[:1]

    pool = state.settings.prize_pool
    share, remainder = divmod(pool, len(winners))
    for i, p in enumerate(winners):
        p.balance += share + (remainder if i == 0 else 0)

    state.winners = [p.id for p in winners]
    logger.info(
        "Game %s settled: winners=%s score=%d prize=%d",
        state.game_id, state.winners, best, pool,
    )
    return list(state.winners)
