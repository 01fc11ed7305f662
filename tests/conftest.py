# tests/conftest.py
"""
Shared fixtures: seeded randomness, a frozen clock and small hand-built
campaigns whose geometry is easy to reason about.
"""

import random
from typing import Callable, Dict, Optional

import pytest

from crusade.galaxy import Galaxy
from crusade.models import Planet, Position

FROZEN_NOW = 1_700_000_000.0


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: float = FROZEN_NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_planet(
    pid: str,
    x: float = 0.0,
    z: float = 0.0,
    owner: Optional[str] = None,
    resources: Optional[Dict[str, float]] = None,
    strategic_value: int = 0,
    defense: int = 0,
) -> Planet:
    return Planet(
        id=pid,
        name=f"Planet {pid}",
        kind="DEAD",
        position=Position(x=x, y=0.0, z=z),
        owner=owner,
        resources=dict(resources or {}),
        strategic_value=strategic_value,
        defense=defense,
    )


# --- FIXTURES ---


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def planet_factory() -> Callable[..., Planet]:
    return make_planet


@pytest.fixture
def line_galaxy(clock) -> Galaxy:
    """
    Four planets on a line, far enough apart that placement never nudges them:
    A - B - C   D (D is unconnected)
    """
    galaxy = Galaxy(rng=random.Random(99), clock=clock)
    for pid, x in (("A", 0.0), ("B", 100.0), ("C", 200.0), ("D", 300.0)):
        galaxy.add_planet(make_planet(pid, x=x, z=0.0))
    galaxy.add_connection("A", "B")
    galaxy.add_connection("B", "C")
    return galaxy


@pytest.fixture
def seeded_galaxy(clock) -> Galaxy:
    galaxy = Galaxy(seed=42, clock=clock)
    galaxy.generate_galaxy(10)
    return galaxy
