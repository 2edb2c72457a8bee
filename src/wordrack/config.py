"""Engine configuration loader."""

import yaml
from dataclasses import dataclass, field
from pathlib import Path

from wordrack.core.lexicon import DEFAULT_WORDS, FixedLexicon
from wordrack.game.state import GameSettings, TiePolicy


@dataclass
class LexiconConfig:
    words: list[str] = field(default_factory=list)
    path: Path | None = None  # one word per line; merged with ``words``

    def build(self) -> FixedLexicon:
        """Build the lexicon. Falls back to the built-in word set if empty."""
        words = set(self.words)
        if self.path is not None:
            words.update(FixedLexicon.from_file(self.path).words)
        return FixedLexicon(words or DEFAULT_WORDS)


@dataclass
class EngineConfig:
    seed: int | None = None
    settings: GameSettings = field(default_factory=GameSettings)
    lexicon: LexiconConfig = field(default_factory=LexiconConfig)
    log_level: str = "INFO"


def _parse_tie_policy(raw: str) -> TiePolicy:
    try:
        return TiePolicy(raw)
    except ValueError:
        choices = ", ".join(p.value for p in TiePolicy)
        raise ValueError(f"Unknown tie_policy {raw!r} (expected one of: {choices})")


def load_config(path: Path) -> EngineConfig:
    """Load engine config from YAML file."""
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    g = raw.get("game", {})
    settings = GameSettings(
        entry_cost=g.get("entry_cost", 0),
        max_players=g.get("max_players", 4),
        is_private=g.get("is_private", False),
        is_single_player=g.get("is_single_player", False),
        time_per_turn_s=float(g.get("time_per_turn_s", 300.0)),
        tie_policy=_parse_tie_policy(g.get("tie_policy", "first")),
        max_consecutive_passes=g.get("max_consecutive_passes", 0),
    )
    if settings.max_players < 1:
        raise ValueError("max_players must be at least 1")
    if settings.entry_cost < 0:
        raise ValueError("entry_cost must not be negative")

    # Parse optional lexicon config; relative paths are resolved
    # against the config file's directory
    lexicon = LexiconConfig()
    lx_raw = raw.get("lexicon")
    if lx_raw:
        lx_path = lx_raw.get("path")
        if lx_path is not None:
            lx_path = Path(lx_path)
            if not lx_path.is_absolute():
                lx_path = path.parent / lx_path
        lexicon = LexiconConfig(
            words=[w.upper() for w in lx_raw.get("words", [])],
            path=lx_path,
        )

    return EngineConfig(
        seed=g.get("seed"),
        settings=settings,
        lexicon=lexicon,
        log_level=raw.get("log_level", "INFO"),
    )
