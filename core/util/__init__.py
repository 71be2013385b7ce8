"""Core utilities."""

from core.util.rng import MissingRNGError, require_rng_param, weighted_pick

__all__ = [
    "MissingRNGError",
    "require_rng_param",
    "weighted_pick",
]
