"""RNG utilities for reproducible sessions.

Components that roll dice (fish generator, challenge strategies) must be
handed the session's RNG explicitly. These helpers fail loudly instead of
silently creating an unseeded fallback, so a seeded headless run stays
reproducible.
"""

import random
from typing import Optional


class MissingRNGError(RuntimeError):
    """Raised when an RNG is required but was not provided.

    This indicates a wiring bug: every roll should use the session's RNG.
    """


def require_rng_param(rng: Optional[random.Random], context: str) -> random.Random:
    """Validate that an RNG parameter was provided, failing loudly if not.

    Example:
        def __init__(self, rng: Optional[random.Random] = None):
            self._rng = require_rng_param(rng, "FishGenerator.__init__")
    """
    if rng is None:
        raise MissingRNGError(f"RNG required: {context}. Pass the session RNG explicitly.")
    return rng


def weighted_pick(rng: random.Random, items, weight_of):
    """Cumulative-roll selection over ``items``.

    Rolls once in [0, 1) and walks the cumulative weights; if rounding leaves
    the roll past the last bucket, the first item is returned.
    """
    roll = rng.random()
    cumulative = 0.0
    for item in items:
        cumulative += weight_of(item)
        if roll <= cumulative:
            return item
    return items[0]
