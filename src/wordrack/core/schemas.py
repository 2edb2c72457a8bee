"""Schema loading utility."""

import json
from pathlib import Path

MOVE_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "game" / "schema.json"


def load_schema(path: Path) -> dict:
    """Load a JSON Schema file and return as dict."""
    with open(path) as f:
        return json.load(f)


def load_move_schema() -> dict:
    return load_schema(MOVE_SCHEMA_PATH)
