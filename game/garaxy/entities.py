"""
Game entity dataclasses

Every enemy archetype is its own dataclass carrying only the motion state it
needs. Shared per-archetype numbers (size, speed range, fire interval, score,
starting health, colour) live in the ARCHETYPES table.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Dict, Optional, Tuple

from .constants import (
    BULLET_HEIGHT,
    BULLET_WIDTH,
    CIRCLE_RADIUS,
    ENEMY_BULLET_SPEED,
    PLAYER_BULLET_SPEED,
    PLAYER_HEALTH,
    PLAYER_SIZE,
    TIME_EPSILON,
)

Box = Tuple[float, float, float, float]  # left, top, right, bottom


class EnemyType(IntEnum):
    """Enemy archetypes"""
    SMALL = 0
    MEDIUM = 1
    LARGE = 2
    BOSS = 3
    HOMING = 4
    CIRCLE = 5
    PENTAGON = 6


@dataclass(frozen=True)
class ArchetypeStats:
    """Fixed numbers shared by every enemy of one archetype"""
    size: float
    speed_range: Tuple[float, float]
    fire_interval: Optional[float]  # None -> never fires
    score: int
    health: int
    color: Tuple[int, int, int]


ARCHETYPES: Dict[EnemyType, ArchetypeStats] = {
    EnemyType.SMALL: ArchetypeStats(10.0, (1.5, 2.5), None, 10, 1, (255, 59, 48)),
    EnemyType.MEDIUM: ArchetypeStats(14.0, (1.0, 1.8), 2.0, 20, 2, (255, 149, 0)),
    EnemyType.LARGE: ArchetypeStats(18.0, (0.6, 1.2), 1.0, 30, 3, (175, 82, 222)),
    EnemyType.BOSS: ArchetypeStats(22.0, (0.4, 0.8), 0.5, 50, 3, (255, 45, 85)),
    EnemyType.HOMING: ArchetypeStats(12.0, (1.2, 1.8), None, 25, 1, (52, 199, 89)),
    EnemyType.CIRCLE: ArchetypeStats(12.0, (1.0, 1.5), 1.5, 15, 1, (50, 173, 230)),
    EnemyType.PENTAGON: ArchetypeStats(16.0, (0.8, 1.4), 1.2, 35, 1, (255, 204, 0)),
}


def centered_box(x: float, y: float, width: float, height: float) -> Box:
    """Box of the given size centred on (x, y)"""
    return (x - width / 2, y - height / 2, x + width / 2, y + height / 2)


@dataclass
class Player:
    """Player ship on the fixed left-hand track"""
    x: float
    y: float
    size: float = PLAYER_SIZE
    health: int = PLAYER_HEALTH  # never decremented; any hit is lethal

    @property
    def box(self) -> Box:
        return centered_box(self.x, self.y, self.size, self.size)


@dataclass
class Enemy:
    """Base enemy. Concrete archetypes subclass this."""
    x: float
    y: float
    speed: float  # drawn once at spawn, never recalculated
    health: int
    last_fire_time: float = 0.0

    kind: ClassVar[EnemyType]

    @property
    def stats(self) -> ArchetypeStats:
        return ARCHETYPES[self.kind]

    @property
    def size(self) -> float:
        return self.stats.size

    @property
    def score(self) -> int:
        return self.stats.score

    @property
    def box(self) -> Box:
        return centered_box(self.x, self.y, self.size, self.size)

    def can_fire(self, now: float) -> bool:
        interval = self.stats.fire_interval
        if interval is None:
            return False
        return now - self.last_fire_time + TIME_EPSILON >= interval


@dataclass
class SmallEnemy(Enemy):
    """Fast, never fires"""
    kind: ClassVar[EnemyType] = EnemyType.SMALL


@dataclass
class MediumEnemy(Enemy):
    """Stops once at screen centre, then fires diagonals"""
    kind: ClassVar[EnemyType] = EnemyType.MEDIUM
    stopped_at_center: bool = False
    stop_time: Optional[float] = None


@dataclass
class LargeEnemy(Enemy):
    """Slow, three-way spread"""
    kind: ClassVar[EnemyType] = EnemyType.LARGE


@dataclass
class BossEnemy(Enemy):
    """Zig-zags vertically while advancing"""
    kind: ClassVar[EnemyType] = EnemyType.BOSS
    vertical_direction: float = 1.0  # +1 down, -1 up
    vertical_offset: float = 0.0


@dataclass
class HomingEnemy(Enemy):
    """Steers toward the player"""
    kind: ClassVar[EnemyType] = EnemyType.HOMING


@dataclass
class CircleEnemy(Enemy):
    """Advances on a sine track around its spawn height"""
    kind: ClassVar[EnemyType] = EnemyType.CIRCLE
    circle_angle: float = 0.0
    circle_radius: float = CIRCLE_RADIUS
    circle_center_y: float = 0.0


@dataclass
class PentagonEnemy(Enemy):
    """Declared archetype with no behaviour; never spawned"""
    kind: ClassVar[EnemyType] = EnemyType.PENTAGON
    diagonal_direction: float = 1.0


ENEMY_CLASSES: Dict[EnemyType, type] = {
    cls.kind: cls
    for cls in (
        SmallEnemy,
        MediumEnemy,
        LargeEnemy,
        BossEnemy,
        HomingEnemy,
        CircleEnemy,
        PentagonEnemy,
    )
}


def make_enemy(kind: EnemyType, x: float, y: float, now: float, rng) -> Enemy:
    """Build an enemy of the given archetype with a freshly drawn speed"""
    stats = ARCHETYPES[kind]
    speed = rng.uniform(*stats.speed_range)
    return ENEMY_CLASSES[kind](
        x=x, y=y, speed=speed, health=stats.health, last_fire_time=now
    )


@dataclass
class Bullet:
    """Bullet projectile entity"""
    x: float
    y: float
    vx: float
    vy: float
    speed: float
    is_player_bullet: bool
    width: float = BULLET_WIDTH
    height: float = BULLET_HEIGHT

    @classmethod
    def player(cls, x: float, y: float) -> "Bullet":
        return cls(x=x, y=y, vx=PLAYER_BULLET_SPEED, vy=0.0,
                   speed=PLAYER_BULLET_SPEED, is_player_bullet=True)

    @classmethod
    def enemy(cls, x: float, y: float, vx: float = 0.0, vy: float = 0.0) -> "Bullet":
        # No explicit velocity -> plain leftward shot
        if vx != 0.0 or vy != 0.0:
            return cls(x=x, y=y, vx=vx, vy=vy,
                       speed=math.hypot(vx, vy), is_player_bullet=False)
        return cls(x=x, y=y, vx=-ENEMY_BULLET_SPEED, vy=0.0,
                   speed=ENEMY_BULLET_SPEED, is_player_bullet=False)

    @property
    def box(self) -> Box:
        return centered_box(self.x, self.y, self.width, self.height)
