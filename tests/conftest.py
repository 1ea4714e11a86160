"""Shared fixtures for the GaraxyWars tests."""

from __future__ import annotations

import random

import pytest

from game.garaxy.behaviors import TickContext
from game.garaxy.engine import GameEngine


@pytest.fixture
def engine() -> GameEngine:
    """A started engine on the default 184x224 screen with a fixed seed."""
    eng = GameEngine(seed=1234)
    eng.start()
    return eng


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


@pytest.fixture
def ctx() -> TickContext:
    """Resolver context: 184x224 screen, player at the left-centre track."""
    return TickContext(width=184.0, height=224.0, now=10.0, player_x=30.0, player_y=112.0)
