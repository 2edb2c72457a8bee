"""CLI entry point: python -m wordrack replay <moves.json> [--config game.yaml]

Replays a scripted game against the engine. The script lists the players
to join and the moves to submit, in order:

    {
      "game_id": "demo",
      "players": [{"id": "p1", "name": "Ann", "balance": 100}, ...],
      "moves": [{"player": "p1", "move": {"action": "pass"}}, ...]
    }

Tile ids in place/exchange moves depend on the deal, so scripts are
written against a fixed seed (``--seed`` or ``game.seed`` in the config).
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from wordrack.config import EngineConfig, load_config
from wordrack.game.engine import WordGame
from wordrack.game.serialize import dumps_state


def _print_racks(game: WordGame) -> None:
    state = game.get_state()
    for p in state.players:
        tiles = " ".join(f"{t.id}:{t.letter or '?'}" for t in p.rack)
        print(f"  {p.name:12s} {tiles}")


def _run_replay(args) -> int:
    config = load_config(args.config) if args.config else EngineConfig()
    if args.seed is not None:
        config.seed = args.seed

    with open(args.script) as f:
        script = json.load(f)

    game = WordGame.from_config(config, game_id=script.get("game_id"))

    for p in script.get("players", []):
        joined = game.add_player(p["id"], p.get("name", p["id"]), p.get("balance", 0))
        if not joined:
            print(f"Could not join {p['id']}", file=sys.stderr)
            return 1

    print("=" * 60)
    print(f"GAME {game.game_id}  status={game.status.value}")
    print("=" * 60)
    _print_racks(game)
    print()

    for i, entry in enumerate(script.get("moves", []), 1):
        result = game.submit_move(entry["player"], entry["move"])
        action = entry["move"].get("action", "?")
        if result.success:
            words = ", ".join(result.words)
            detail = f" {words} +{result.score}" if words else ""
            print(f"  {i:3d}. {entry['player']:10s} {action:8s} ok{detail}")
        else:
            print(f"  {i:3d}. {entry['player']:10s} {action:8s} REJECTED: {result.error}")
            if args.strict:
                return 1

    state = game.get_state()
    print()
    print("-" * 60)
    print(f"STANDINGS  status={state.status.value}  bag={len(state.bag)}")
    print("-" * 60)
    for rank, p in enumerate(
        sorted(state.players, key=lambda p: p.score, reverse=True), 1
    ):
        mark = " *" if p.id in state.winners else ""
        print(f"  {rank}. {p.name:20s} {p.score:>6d}  balance={p.balance}{mark}")

    if args.save:
        Path(args.save).write_text(dumps_state(state, indent=2))
        print(f"\nState: {args.save}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="wordrack", description="Word game engine tools"
    )
    parser.add_argument(
        "--log-level", default=None, help="Logging level (default: from config or INFO)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    replay = sub.add_parser("replay", help="Replay a scripted game")
    replay.add_argument("script", type=Path, help="Path to moves JSON")
    replay.add_argument("--config", type=Path, default=None, help="Path to game YAML")
    replay.add_argument("--seed", type=int, default=None, help="Override the RNG seed")
    replay.add_argument("--save", type=Path, default=None, help="Write final state JSON here")
    replay.add_argument(
        "--strict", action="store_true", help="Stop at the first rejected move"
    )

    args = parser.parse_args()

    level = args.log_level
    if level is None and getattr(args, "config", None):
        level = load_config(args.config).log_level
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "replay":
        sys.exit(_run_replay(args))


if __name__ == "__main__":
    main()
