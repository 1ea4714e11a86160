"""
Per-archetype motion and firing resolvers
------------------------------------------
Every enemy variant class maps to one Resolver (move, fire, in_play). The
table is checked for completeness at import time: an archetype must either
have a resolver or be listed in UNRESOLVED, so adding a new enemy class
without behaviour fails loudly instead of silently standing still.

Resolvers mutate the enemy in place and return any bullets it fired.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Sequence

from .constants import (
    BOSS_EDGE_MARGIN,
    BOSS_SPREAD,
    BOSS_VERTICAL_STEP,
    CIRCLE_ANGLE_STEP,
    DESPAWN_MARGIN,
    ENEMY_BULLET_SPEED,
    FIRE_MIN_DISTANCE,
    LARGE_SPREAD,
    MEDIUM_CENTER_THRESHOLD,
    MEDIUM_SPREAD,
    MEDIUM_STOP_DURATION,
    TIME_EPSILON,
)
from .entities import (
    ENEMY_CLASSES,
    BossEnemy,
    Bullet,
    CircleEnemy,
    Enemy,
    HomingEnemy,
    LargeEnemy,
    MediumEnemy,
    PentagonEnemy,
    SmallEnemy,
)
from .utils import normalize


class UnhandledArchetypeError(NotImplementedError):
    """Raised when an enemy archetype has no motion/firing resolver"""


@dataclass(frozen=True)
class TickContext:
    """What a resolver may read about the world during one tick"""
    width: float
    height: float
    now: float
    player_x: float
    player_y: float

    @property
    def center_x(self) -> float:
        return self.width / 2


# ----------------------------
# Motion
# ----------------------------

def move_linear(enemy: Enemy, ctx: TickContext) -> None:
    enemy.x -= enemy.speed


def move_medium(enemy: MediumEnemy, ctx: TickContext) -> None:
    center_x = ctx.center_x
    if not enemy.stopped_at_center and enemy.x > center_x + MEDIUM_CENTER_THRESHOLD:
        enemy.x -= enemy.speed
    elif not enemy.stopped_at_center and abs(enemy.x - center_x) <= MEDIUM_CENTER_THRESHOLD:
        enemy.stopped_at_center = True
        enemy.stop_time = ctx.now
        enemy.x = center_x
    elif enemy.stopped_at_center:
        if ctx.now - enemy.stop_time + TIME_EPSILON >= MEDIUM_STOP_DURATION:
            enemy.x -= enemy.speed
    else:
        # Already left of centre without ever stopping
        enemy.x -= enemy.speed


def move_boss(enemy: BossEnemy, ctx: TickContext) -> None:
    enemy.x -= enemy.speed

    step = enemy.vertical_direction * BOSS_VERTICAL_STEP
    enemy.vertical_offset += step
    enemy.y += step

    half = enemy.size / 2
    if enemy.y <= half + BOSS_EDGE_MARGIN:
        enemy.vertical_direction = 1.0
    elif enemy.y >= ctx.height - half - BOSS_EDGE_MARGIN:
        enemy.vertical_direction = -1.0


def move_homing(enemy: HomingEnemy, ctx: TickContext) -> None:
    # normalize() returns (0, 0) at zero distance, so no motion there
    nx, ny = normalize(ctx.player_x - enemy.x, ctx.player_y - enemy.y)
    enemy.x += nx * enemy.speed
    enemy.y += ny * enemy.speed


def move_circle(enemy: CircleEnemy, ctx: TickContext) -> None:
    enemy.x -= enemy.speed
    enemy.circle_angle += CIRCLE_ANGLE_STEP
    enemy.y = enemy.circle_center_y + math.sin(enemy.circle_angle) * enemy.circle_radius


# ----------------------------
# Firing
# ----------------------------

def muzzle(enemy: Enemy):
    """Enemy bullets leave from the left edge at the enemy's height"""
    return enemy.x - enemy.size / 2, enemy.y


def fire_spread(enemy: Enemy, spread: Sequence[float]) -> List[Bullet]:
    bx, by = muzzle(enemy)
    return [
        Bullet.enemy(bx, by, vx=-ENEMY_BULLET_SPEED, vy=ENEMY_BULLET_SPEED * f)
        for f in spread
    ]


def fire_nothing(enemy: Enemy, ctx: TickContext) -> List[Bullet]:
    return []


def fire_medium(enemy: MediumEnemy, ctx: TickContext) -> List[Bullet]:
    if not enemy.stopped_at_center:
        return []
    return fire_spread(enemy, MEDIUM_SPREAD)


def fire_large(enemy: LargeEnemy, ctx: TickContext) -> List[Bullet]:
    return fire_spread(enemy, LARGE_SPREAD)


def fire_boss(enemy: BossEnemy, ctx: TickContext) -> List[Bullet]:
    return fire_spread(enemy, BOSS_SPREAD)


def fire_straight(enemy: Enemy, ctx: TickContext) -> List[Bullet]:
    return [Bullet.enemy(*muzzle(enemy))]


# ----------------------------
# Despawn
# ----------------------------

def on_screen_horizontally(enemy: Enemy, ctx: TickContext) -> bool:
    return enemy.x > -DESPAWN_MARGIN


def on_screen_homing(enemy: Enemy, ctx: TickContext) -> bool:
    return (enemy.x > -DESPAWN_MARGIN
            and -DESPAWN_MARGIN < enemy.y < ctx.height + DESPAWN_MARGIN)


# ----------------------------
# Dispatch
# ----------------------------

@dataclass(frozen=True)
class Resolver:
    move: Callable[[Enemy, TickContext], None]
    fire: Callable[[Enemy, TickContext], List[Bullet]]
    in_play: Callable[[Enemy, TickContext], bool] = on_screen_horizontally


RESOLVERS: Dict[type, Resolver] = {
    SmallEnemy: Resolver(move_linear, fire_nothing),
    MediumEnemy: Resolver(move_medium, fire_medium),
    LargeEnemy: Resolver(move_linear, fire_large),
    BossEnemy: Resolver(move_boss, fire_boss),
    HomingEnemy: Resolver(move_homing, fire_nothing, on_screen_homing),
    CircleEnemy: Resolver(move_circle, fire_straight),
}

# Declared in the data model, deliberately without behaviour
UNRESOLVED: FrozenSet[type] = frozenset({PentagonEnemy})


def _check_exhaustive() -> None:
    covered = set(RESOLVERS) | UNRESOLVED
    missing = sorted(cls.__name__ for cls in ENEMY_CLASSES.values() if cls not in covered)
    if missing:
        raise UnhandledArchetypeError(f"No resolver for: {', '.join(missing)}")


_check_exhaustive()


def resolver_for(enemy: Enemy) -> Resolver:
    try:
        return RESOLVERS[type(enemy)]
    except KeyError:
        raise UnhandledArchetypeError(
            f"{type(enemy).__name__} ({enemy.kind.name.lower()}) has no resolver"
        ) from None


def is_resolvable(cls: type) -> bool:
    return cls in RESOLVERS


def advance_enemy(enemy: Enemy, ctx: TickContext) -> List[Bullet]:
    """Move one enemy, then let it fire if its interval has elapsed.

    last_fire_time only resets when bullets actually leave the enemy.
    """
    resolver = resolver_for(enemy)
    resolver.move(enemy, ctx)

    if not enemy.can_fire(ctx.now) or enemy.x >= ctx.width - FIRE_MIN_DISTANCE:
        return []

    bullets = resolver.fire(enemy, ctx)
    if bullets:
        enemy.last_fire_time = ctx.now
    return bullets


def in_play(enemy: Enemy, ctx: TickContext) -> bool:
    return resolver_for(enemy).in_play(enemy, ctx)
