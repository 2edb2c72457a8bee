"""Per-game bag seeding.

A host configures one root seed; every game id gets its own seed derived
from it with HMAC-SHA256, so the bag a game deals depends only on
(root seed, game id) and never on how many other games were created.
"""

import hashlib
import hmac
import random


class SeedManager:
    """Derives reproducible shuffling RNGs for games from one root seed."""

    def __init__(self, root_seed: int):
        self._key = root_seed.to_bytes(8, byteorder="big", signed=True)

    def seed_for(self, game_id: str) -> int:
        digest = hmac.new(
            self._key, f"game:{game_id}".encode("utf-8"), hashlib.sha256
        ).digest()
        return int.from_bytes(digest[:8], byteorder="big")

    def rng_for(self, game_id: str) -> random.Random:
        """A fresh RNG for ``game_id``; two calls replay the same shuffles."""
        return random.Random(self.seed_for(game_id))
