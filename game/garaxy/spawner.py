"""
Score-gated enemy spawn policy
"""

from __future__ import annotations

import random
from typing import Tuple

from .constants import SPAWN_X_OFFSET, SPAWN_Y_MARGIN
from .entities import CircleEnemy, Enemy, EnemyType, make_enemy

# (minimum score, exclusive roll limit, archetype), checked in order
SPAWN_TABLE: Tuple[Tuple[int, int, EnemyType], ...] = (
    (200, 10, EnemyType.BOSS),
    (150, 20, EnemyType.HOMING),
    (100, 25, EnemyType.LARGE),
    (50, 50, EnemyType.MEDIUM),
)
CIRCLE_ROLL_LIMIT = 30


def choose_archetype(score: int, roll: int) -> EnemyType:
    """Pick an archetype for a roll in [0, 100]; first matching rule wins."""
    for min_score, limit, kind in SPAWN_TABLE:
        if score > min_score and roll < limit:
            return kind
    if roll < CIRCLE_ROLL_LIMIT:
        return EnemyType.CIRCLE
    return EnemyType.SMALL


def spawn_position(screen_width: float, screen_height: float,
                   rng: random.Random) -> Tuple[float, float]:
    """Just off the right edge, at a random height away from the edges"""
    y = rng.uniform(SPAWN_Y_MARGIN, screen_height - SPAWN_Y_MARGIN)
    return screen_width + SPAWN_X_OFFSET, y


def build_enemy(kind: EnemyType, x: float, y: float, now: float,
                rng: random.Random) -> Enemy:
    enemy = make_enemy(kind, x, y, now, rng)
    if isinstance(enemy, CircleEnemy):
        enemy.circle_center_y = y
    return enemy


def spawn_enemy(score: int, screen_width: float, screen_height: float,
                now: float, rng: random.Random) -> Enemy:
    """Roll an archetype for the current score and place it off-screen"""
    x, y = spawn_position(screen_width, screen_height, rng)
    roll = rng.randint(0, 100)
    return build_enemy(choose_archetype(score, roll), x, y, now, rng)
