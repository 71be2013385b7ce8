"""Pytest configuration and fixtures for Tidecaster tests."""

import random
from typing import Iterable, List, Optional

import pytest

from core.config.encounter import FRAME_MS
from core.fish.descriptor import FishDescriptor


def make_fish(
    qte_required: int = 3,
    qte_time: float = 1.5,
    rarity: str = "Common",
    value: int = 10,
    fish_type: str = "Sardine",
) -> FishDescriptor:
    return FishDescriptor(
        type=fish_type,
        rarity=rarity,
        size="Medium",
        value=value,
        qte_time=qte_time,
        qte_required=qte_required,
    )


class ScriptedFishSource:
    """Fish source that hands out a fixed sequence of fish (repeating the last)."""

    def __init__(self, fish: Optional[Iterable[FishDescriptor]] = None) -> None:
        self._fish: List[FishDescriptor] = list(fish or [make_fish()])
        self.calls: List[object] = []

    def generate(self, active_event=None) -> FishDescriptor:
        self.calls.append(active_event)
        index = min(len(self.calls) - 1, len(self._fish) - 1)
        return self._fish[index]


class FrameDriver:
    """Steps a session or machine at nominal 60 fps frames from a start time."""

    def __init__(self, target, start: float = 0.0, frame_ms: float = FRAME_MS) -> None:
        self.target = target
        self.now = start
        self.frame_ms = frame_ms

    def step(self, frames: int = 1):
        for _ in range(frames):
            self.now += self.frame_ms
            self.target.tick(self.now)
        return self.target.phase

    def advance_ms(self, ms: float):
        """Tick once at ``ms`` later (must stay under the clock's gap limit)."""
        self.now += ms
        self.target.tick(self.now)
        return self.target.phase

    def until(self, predicate, max_frames: int = 1000) -> int:
        """Step until ``predicate()`` holds. Returns the frames taken."""
        for frame in range(1, max_frames + 1):
            self.step()
            if predicate():
                return frame
        raise AssertionError(f"Condition not reached within {max_frames} frames")


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def common_fish():
    return make_fish()


@pytest.fixture
def fish_source(common_fish):
    return ScriptedFishSource([common_fish])


@pytest.fixture
def machine(fish_source, seeded_rng):
    """An encounter machine whose clock baseline is t=0."""
    from core.encounter import EncounterMachine

    m = EncounterMachine(fish_source, rng=seeded_rng)
    m.tick(0.0)
    return m


@pytest.fixture
def driver(machine):
    return FrameDriver(machine)


@pytest.fixture
def session(fish_source, seeded_rng):
    from core.session import GameSession

    s = GameSession(rng=seeded_rng, fish_source=fish_source, event_provider=lambda: None)
    s.tick(0.0)
    return s


@pytest.fixture
def fish_factory():
    """Build fish descriptors with chosen QTE difficulty."""
    return make_fish


@pytest.fixture
def source_factory():
    return ScriptedFishSource


@pytest.fixture
def frame_driver():
    return FrameDriver
