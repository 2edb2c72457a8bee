"""Game state — the single value passed into and out of every operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from wordrack.game.board import Board
from wordrack.game.tiles import Bag, Tile


class GameStatus(Enum):
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class MoveType(Enum):
    PLACE = "place"
    EXCHANGE = "exchange"
    PASS = "pass"


class TiePolicy(Enum):
    FIRST = "first"  # earliest player in turn order takes the prize
    SPLIT = "split"  # tied players share the prize pool


@dataclass
class GameSettings:
    entry_cost: int = 0
    max_players: int = 4
    is_private: bool = False
    is_single_player: bool = False
    time_per_turn_s: float = 300.0
    prize_pool: int = 0
    tie_policy: TiePolicy = TiePolicy.FIRST
    max_consecutive_passes: int = 0  # 0 disables the pass-out ending

    @property
    def min_players(self) -> int:
        return 1 if self.is_single_player else 2


@dataclass
class Player:
    id: str
    name: str
    rack: list[Tile] = field(default_factory=list)
    score: int = 0
    balance: int = 0

    def holds(self, tile_ids: list[str]) -> bool:
        rack_ids = {t.id for t in self.rack}
        return all(tid in rack_ids for tid in tile_ids)

    def take(self, tile_ids: list[str]) -> list[Tile]:
        """Remove and return the rack tiles with the given ids, in that order."""
        by_id = {t.id: t for t in self.rack}
        taken = [by_id[tid] for tid in tile_ids]
        wanted = set(tile_ids)
        self.rack = [t for t in self.rack if t.id not in wanted]
        return taken


@dataclass(frozen=True)
class MoveRecord:
    action: MoveType
    player_id: str
    tiles: tuple[Tile, ...] = ()
    positions: tuple[tuple[int, int], ...] = ()
    words: tuple[str, ...] = ()
    score: int = 0
    timestamp: float = 0.0


@dataclass
class GameState:
    game_id: str
    board: Board
    bag: Bag
    settings: GameSettings
    players: list[Player] = field(default_factory=list)
    current_player_index: int = 0
    status: GameStatus = GameStatus.WAITING
    moves: list[MoveRecord] = field(default_factory=list)
    turn_started_at: float = 0.0
    winners: list[str] = field(default_factory=list)
    consecutive_passes: int = 0

    @property
    def winner(self) -> str | None:
        return self.winners[0] if self.winners else None

    @property
    def current_player(self) -> Player | None:
        if not self.players:
            return None
        return self.players[self.current_player_index]

    def get_player(self, player_id: str) -> Player | None:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def tile_count(self) -> int:
        """Tiles in racks + on the board + in the bag."""
        return (
            sum(len(p.rack) for p in self.players)
            + len(self.board)
            + len(self.bag)
        )

    def all_tile_ids(self) -> list[str]:
        ids = [t.id for p in self.players for t in p.rack]
        ids.extend(t.id for t in self.board.tiles())
        ids.extend(t.id for t in self.bag)
        return ids
