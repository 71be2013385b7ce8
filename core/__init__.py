"""Core fishing game logic.

This package contains the pure game logic with no UI or server
dependencies. Key modules include:

- encounter: The cast/sink/bite/reel state machine driven by tick(now)
- qte: Quick-time-event challenges, input listeners and countdown
- fish: Fish descriptors, the weighted generator and time-of-day events
- timing: The clamped virtual clock and deferred actions
- session: Gold, backpack, overlays and catch notification
- headless: Scripted autoplay for soak runs

Design note: this module exposes a small, explicit public API via ``__all__``.
Use direct imports from subpackages for internal helpers.
"""

from . import encounter as encounter
from . import fish as fish
from . import qte as qte
from . import session as session

# Public API of the core package. Keep this list intentionally small.
__all__ = [
    "encounter",
    "fish",
    "qte",
    "session",
]
