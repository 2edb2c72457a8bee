"""Word game engine — joining, turn handling, and the game lifecycle.

The engine is a synchronous function of (state, move) -> result. The
module-level functions operate on a ``GameState`` value; ``apply_move``
never mutates the state it is given and only returns a new state when the
move succeeded. ``WordGame`` wraps one state value for hosts that prefer
an object, and hands out copies rather than references.

Game flow:
- players join (draw up to 7 tiles, pay the entry cost into the prize pool)
- the game starts once the minimum number of players has joined
- the current player places, exchanges, or passes
- the game completes when the bag and a rack are both empty (or,
  optionally, after a run of consecutive passes), then settles

The engine owns no clock. Hosts run the turn timer themselves using
``get_remaining_turn_time()`` and call ``handle_timeout()`` on expiry.
"""

from __future__ import annotations

import copy
import logging
import random
import string
import time
import uuid
from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING

from wordrack.core.lexicon import FixedLexicon, Lexicon, as_word_check
from wordrack.core.moves import Move, MoveParser
from wordrack.core.seed import SeedManager
from wordrack.game.board import Board
from wordrack.game.placement import validate_placement
from wordrack.game.results import MoveResult
from wordrack.game.settlement import settle
from wordrack.game.state import (
    GameSettings,
    GameState,
    GameStatus,
    MoveRecord,
    MoveType,
    Player,
)
from wordrack.game.tiles import RACK_SIZE, Bag, Tile
from wordrack.game.words import score_placement

if TYPE_CHECKING:
    from wordrack.config import EngineConfig

__all__ = [
    "WordGame",
    "new_game",
    "create_state",
    "add_player",
    "apply_move",
    "turn_error",
]

logger = logging.getLogger(__name__)

NOT_ACTIVE = "Game is not active"
NOT_YOUR_TURN = "Not your turn"
MISSING_TILES = "Player does not have required tiles"
DUPLICATE_TILE = "Tile used more than once"
TILE_MISMATCH = "Tile does not match rack"
BLANK_NEEDS_LETTER = "Blank tile needs a letter"
CANNOT_EXCHANGE = "Cannot exchange tiles"

Clock = Callable[[], float]


# ----------------------------------------------------------------------
# State-level operations
# ----------------------------------------------------------------------

def create_state(
    settings: GameSettings,
    rng: random.Random,
    *,
    game_id: str | None = None,
    now: float = 0.0,
) -> GameState:
    """Build a fresh ``waiting`` game with a shuffled bag and empty board."""
    return GameState(
        game_id=game_id or uuid.uuid4().hex,
        board=Board(),
        bag=Bag.standard(rng),
        settings=copy.deepcopy(settings),
        turn_started_at=now,
    )


def start(state: GameState, now: float) -> None:
    state.status = GameStatus.ACTIVE
    state.turn_started_at = now
    logger.info(
        "Game %s started with %d player(s)", state.game_id, len(state.players)
    )


def add_player(
    state: GameState, player_id: str, name: str, balance: int, now: float
) -> bool:
    """Join ``state`` in place. Returns False (state untouched) if refused.

    Refused when the game is full or completed, the id already joined, the
    balance does not cover the entry cost, or the bag can no longer deal a
    full rack.
    """
    settings = state.settings
    if state.status is GameStatus.COMPLETED:
        return False
    if len(state.players) >= settings.max_players:
        return False
    if state.get_player(player_id) is not None:
        return False
    if balance < settings.entry_cost:
        return False
    if len(state.bag) < RACK_SIZE:
        return False

    state.players.append(
        Player(
            id=player_id,
            name=name,
            rack=state.bag.draw(RACK_SIZE),
            balance=balance - settings.entry_cost,
        )
    )
    settings.prize_pool += settings.entry_cost

    if (
        state.status is GameStatus.WAITING
        and len(state.players) >= settings.min_players
    ):
        start(state, now)
    return True


def turn_error(state: GameState, player_id: str) -> str | None:
    """Why ``player_id`` may not move right now, or None if they may."""
    if state.status is not GameStatus.ACTIVE:
        return NOT_ACTIVE
    current = state.current_player
    if current is None or current.id != player_id:
        return NOT_YOUR_TURN
    return None


def apply_move(
    state: GameState,
    player_id: str,
    move: Move,
    *,
    is_valid_word: Callable[[str], bool],
    rng: random.Random,
    now: float,
) -> MoveResult:
    """Apply one move. ``state`` is never modified.

    On success the result carries a new state in which the move is
    recorded, the game may have completed, and otherwise the turn has
    passed to the next player.
    """
    error = turn_error(state, player_id)
    if error:
        return MoveResult.failure(error)

    new = copy.deepcopy(state)
    player = new.current_player

    if move.action is MoveType.PLACE:
        result = _apply_place(new, player, move, is_valid_word, now)
    elif move.action is MoveType.EXCHANGE:
        result = _apply_exchange(new, player, move, rng, now)
    else:
        result = _apply_pass(new, player, now)

    if not result.success:
        logger.debug(
            "Game %s: rejected %s from %s: %s",
            state.game_id, move.action.value, player_id, result.error,
        )
        return result

    if _is_over(new):
        settle(new)
    else:
        new.current_player_index = (
            new.current_player_index + 1
        ) % len(new.players)
        new.turn_started_at = now

    return replace(result, new_state=new)


def _apply_place(
    state: GameState,
    player: Player,
    move: Move,
    is_valid_word: Callable[[str], bool],
    now: float,
) -> MoveResult:
    tile_ids = [p.tile_id for p in move.placements]
    if len(set(tile_ids)) != len(tile_ids):
        return MoveResult.failure(DUPLICATE_TILE)
    if not player.holds(tile_ids):
        return MoveResult.failure(MISSING_TILES)

    # Rack tiles are authoritative; the descriptor only names them and,
    # for blanks, declares the letter shown
    rack = {t.id: t for t in player.rack}
    positions: list[tuple[int, int]] = []
    placed: dict[tuple[int, int], Tile] = {}
    for p in move.placements:
        tile = rack[p.tile_id]
        if tile.is_blank:
            if len(p.letter) != 1 or p.letter not in string.ascii_letters:
                return MoveResult.failure(BLANK_NEEDS_LETTER)
            tile = tile.as_letter(p.letter)
        elif (p.letter and p.letter.upper() != tile.letter) or (
            p.value is not None and p.value != tile.value
        ):
            return MoveResult.failure(f"{TILE_MISMATCH}: {p.tile_id}")
        positions.append((p.row, p.col))
        placed[(p.row, p.col)] = tile

    check = validate_placement(state.board, positions)
    if not check.legal:
        return MoveResult.failure(check.reason)

    scored = score_placement(state.board, placed, is_valid_word)
    if not scored.valid:
        return MoveResult.failure(scored.error)

    player.take(tile_ids)
    for (r, c), tile in placed.items():
        state.board.place(r, c, tile)
    player.score += scored.total
    player.rack.extend(state.bag.draw(RACK_SIZE - len(player.rack)))
    state.consecutive_passes = 0

    words = tuple(w.word for w in scored.words)
    state.moves.append(
        MoveRecord(
            action=MoveType.PLACE,
            player_id=player.id,
            tiles=tuple(placed.values()),
            positions=tuple(placed),
            words=words,
            score=scored.total,
            timestamp=now,
        )
    )
    return MoveResult(success=True, score=scored.total, words=words)


def _apply_exchange(
    state: GameState,
    player: Player,
    move: Move,
    rng: random.Random,
    now: float,
) -> MoveResult:
    tile_ids = list(move.tile_ids)
    if (
        not tile_ids
        or len(set(tile_ids)) != len(tile_ids)
        or len(state.bag) < len(tile_ids)
    ):
        return MoveResult.failure(CANNOT_EXCHANGE)
    if not player.holds(tile_ids):
        return MoveResult.failure(MISSING_TILES)

    returned = player.take(tile_ids)
    state.bag.return_tiles(returned, rng)
    player.rack.extend(state.bag.draw(len(returned)))
    state.consecutive_passes = 0

    state.moves.append(
        MoveRecord(
            action=MoveType.EXCHANGE,
            player_id=player.id,
            tiles=tuple(returned),
            timestamp=now,
        )
    )
    return MoveResult(success=True)


def _apply_pass(state: GameState, player: Player, now: float) -> MoveResult:
    state.consecutive_passes += 1
    state.moves.append(
        MoveRecord(action=MoveType.PASS, player_id=player.id, timestamp=now)
    )
    return MoveResult(success=True)


def _is_over(state: GameState) -> bool:
    if len(state.bag) == 0 and any(not p.rack for p in state.players):
        return True
    limit = state.settings.max_consecutive_passes
    return limit > 0 and state.consecutive_passes >= limit


# ----------------------------------------------------------------------
# WordGame facade
# ----------------------------------------------------------------------

class WordGame:
    """One game, held as a single ``GameState`` value.

    Every accessor returns an independent copy; the held state is only
    replaced when a move succeeds.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        *,
        lexicon: Lexicon | Callable[[str], bool] | None = None,
        rng: random.Random | None = None,
        clock: Clock = time.time,
        game_id: str | None = None,
        parser: MoveParser | None = None,
        state: GameState | None = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._is_valid_word = as_word_check(
            lexicon if lexicon is not None else FixedLexicon()
        )
        self._parser = parser or MoveParser()
        if state is not None:
            self._state = copy.deepcopy(state)
        else:
            self._state = create_state(
                settings or GameSettings(),
                self._rng,
                game_id=game_id,
                now=self._clock(),
            )

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        game_id: str | None = None,
        *,
        clock: Clock = time.time,
    ) -> WordGame:
        """Build a game from loaded config.

        With a configured seed, the RNG is derived from (seed, game_id) so
        each game id always deals the same bag.
        """
        game_id = game_id or uuid.uuid4().hex
        rng = None
        if config.seed is not None:
            rng = SeedManager(config.seed).rng_for(game_id)
        return cls(
            config.settings,
            lexicon=config.lexicon.build(),
            rng=rng,
            clock=clock,
            game_id=game_id,
        )

    @classmethod
    def from_state(
        cls,
        state: GameState,
        *,
        lexicon: Lexicon | Callable[[str], bool] | None = None,
        rng: random.Random | None = None,
        clock: Clock = time.time,
    ) -> WordGame:
        """Resume a game from a snapshot (e.g. one loaded by the host)."""
        return cls(lexicon=lexicon, rng=rng, clock=clock, state=state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def game_id(self) -> str:
        return self._state.game_id

    @property
    def status(self) -> GameStatus:
        return self._state.status

    def add_player(self, player_id: str, name: str, balance: int) -> bool:
        return add_player(self._state, player_id, name, balance, self._clock())

    def force_start(self) -> bool:
        """Start a waiting game below the minimum player count."""
        if self._state.status is not GameStatus.WAITING or not self._state.players:
            return False
        start(self._state, self._clock())
        return True

    def pause(self) -> bool:
        if self._state.status is not GameStatus.ACTIVE:
            return False
        self._state.status = GameStatus.PAUSED
        logger.info("Game %s paused", self._state.game_id)
        return True

    def resume(self) -> bool:
        """Resume a paused game. The current player gets a fresh turn clock."""
        if self._state.status is not GameStatus.PAUSED:
            return False
        start(self._state, self._clock())
        return True

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def submit_move(self, player_id: str, descriptor: dict | Move) -> MoveResult:
        # Status and turn come before the descriptor is even looked at
        error = turn_error(self._state, player_id)
        if error:
            return MoveResult.failure(error)

        parsed = self._parser.parse(descriptor)
        if not parsed.success:
            return MoveResult.failure(parsed.error)

        result = apply_move(
            self._state,
            player_id,
            parsed.move,
            is_valid_word=self._is_valid_word,
            rng=self._rng,
            now=self._clock(),
        )
        if not result.success:
            return result

        self._state = result.new_state
        return replace(result, new_state=copy.deepcopy(self._state))

    def handle_timeout(self) -> MoveResult:
        """Pass on behalf of the current player. Called by the host's timer."""
        current = self._state.current_player
        if self._state.status is not GameStatus.ACTIVE or current is None:
            return MoveResult.failure(NOT_ACTIVE)
        logger.info(
            "Game %s: turn timed out for %s", self._state.game_id, current.id
        )
        return self.submit_move(current.id, Move.pass_turn())

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_state(self) -> GameState:
        return copy.deepcopy(self._state)

    def get_current_player(self) -> Player | None:
        return copy.deepcopy(self._state.current_player)

    def get_player(self, player_id: str) -> Player | None:
        return copy.deepcopy(self._state.get_player(player_id))

    def get_remaining_turn_time(self) -> float:
        """Seconds left in the current turn, never negative.

        Only meaningful while the game is active; 0.0 otherwise.
        """
        if self._state.status is not GameStatus.ACTIVE:
            return 0.0
        elapsed = self._clock() - self._state.turn_started_at
        return max(0.0, self._state.settings.time_per_turn_s - elapsed)


def new_game(
    settings: GameSettings | None = None,
    *,
    lexicon: Lexicon | Callable[[str], bool] | None = None,
    rng: random.Random | None = None,
    clock: Clock = time.time,
    game_id: str | None = None,
) -> WordGame:
    """Create a game in the ``waiting`` state."""
    return WordGame(
        settings, lexicon=lexicon, rng=rng, clock=clock, game_id=game_id
    )
