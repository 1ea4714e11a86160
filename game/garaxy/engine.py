"""
GameEngine - fixed-tick world advancer for GaraxyWars
------------------------------------------------------
The engine owns every entity list and the game-state machine. Outside code
talks to it through a handful of control calls (start / pause / resume /
stop, vertical movement, fire, screen size) and reads a deep-copied
GameSnapshot each frame.

Timing
  Three periodic drivers run off one fixed-timestep loop:

    tick       every tick_interval (1/60 s)   world advance
    spawn      every enemy_spawn_interval     spawn policy
    auto-fire  every auto_fire_interval       player weapon

  advance(elapsed) consumes wall time in tick-sized steps. Each step feeds
  the spawn and auto-fire accumulators, fires whichever is due, then runs
  one tick. pause() and stop() clear a single flag, so all three halt
  together; resume() restarts them with every accumulator at zero.

  The simulated clock (`now`) is tick_count * tick_interval, and interval
  checks against it allow TIME_EPSILON of float slack.
  Fire intervals and the medium enemy's stop are measured on it.

Tick order
  player bullets -> enemies (move, fire) -> cull -> enemy bullets
  -> player bullets vs enemies -> enemies vs player -> enemy bullets vs player
"""

from __future__ import annotations

import copy
import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from . import behaviors, spawner
from .collision import enemy_touching_player, pop_bullet_hitting_player, resolve_player_hits
from .constants import (
    AUTO_FIRE_INTERVAL,
    ENEMY_BULLET_MARGIN,
    ENEMY_SPAWN_INTERVAL,
    MIN_SCREEN_HEIGHT,
    MIN_SCREEN_WIDTH,
    MOVE_SCALE,
    PLAYER_BULLET_MARGIN,
    PLAYER_HEALTH,
    PLAYER_X,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TICK_INTERVAL,
    TIME_EPSILON,
)
from .entities import ENEMY_CLASSES, Bullet, Enemy, EnemyType, Player
from .utils import clamp

logger = logging.getLogger("garaxy.engine")


class GameState(str, Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only copy of the world for one frame"""
    state: GameState
    score: int
    player: Player
    enemies: Tuple[Enemy, ...]
    player_bullets: Tuple[Bullet, ...]
    enemy_bullets: Tuple[Bullet, ...]
    width: float
    height: float
    now: float


class GameEngine:
    """Simulation engine: world state, spawn policy, resolvers, lifecycle"""

    def __init__(
        self,
        width: float = SCREEN_WIDTH,
        height: float = SCREEN_HEIGHT,
        tick_interval: float = TICK_INTERVAL,
        enemy_spawn_interval: float = ENEMY_SPAWN_INTERVAL,
        auto_fire_interval: float = AUTO_FIRE_INTERVAL,
        seed: Optional[int] = None,
    ):
        for name, value in (
            ("tick_interval", tick_interval),
            ("enemy_spawn_interval", enemy_spawn_interval),
            ("auto_fire_interval", auto_fire_interval),
        ):
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        self.tick_interval = tick_interval
        self.enemy_spawn_interval = enemy_spawn_interval
        self.auto_fire_interval = auto_fire_interval
        self.rng = random.Random(seed)

        self.width, self.height = self._clamp_screen(width, height)

        # World state
        self.state = GameState.MENU
        self.player = Player(x=PLAYER_X, y=self.height / 2)
        self.enemies: List[Enemy] = []
        self.player_bullets: List[Bullet] = []
        self.enemy_bullets: List[Bullet] = []
        self.score = 0
        self.now = 0.0

        # Periodic drivers
        self._drivers_active = False
        self._tick_acc = 0.0
        self._spawn_acc = 0.0
        self._fire_acc = 0.0

        # Counters
        self.tick_count = 0
        self.kills = 0

    def reseed(self, seed: Optional[int]) -> None:
        self.rng.seed(seed)

    @property
    def drivers_active(self) -> bool:
        return self._drivers_active

    @property
    def is_playing(self) -> bool:
        return self.state is GameState.PLAYING

    @property
    def auto_fire_phase(self) -> float:
        """Fraction of the auto-fire period already elapsed, in [0, 1)"""
        return self._fire_acc / self.auto_fire_interval

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def start(self) -> None:
        """Start or restart a game from a clean world"""
        self.score = 0
        self.now = 0.0
        self.tick_count = 0
        self.kills = 0
        self.enemies.clear()
        self.player_bullets.clear()
        self.enemy_bullets.clear()
        self.player = Player(x=PLAYER_X, y=self.height / 2, health=PLAYER_HEALTH)

        self.state = GameState.PLAYING
        self._start_drivers()
        logger.info(f"Game started ({self.width:.0f}x{self.height:.0f})")

    def pause(self) -> None:
        if self.state is not GameState.PLAYING:
            logger.debug(f"pause() ignored in state {self.state.value}")
            return
        self.state = GameState.PAUSED
        self._halt_drivers()
        logger.info(f"Game paused at t={self.now:.2f}s score={self.score}")

    def resume(self) -> None:
        if self.state is not GameState.PAUSED:
            logger.debug(f"resume() ignored in state {self.state.value}")
            return
        self.state = GameState.PLAYING
        self._start_drivers()
        logger.info("Game resumed")

    def stop(self) -> None:
        """Halt all periodic drivers without touching the game state"""
        self._halt_drivers()

    def _end_game(self, cause: str) -> None:
        self.state = GameState.GAME_OVER
        self.stop()
        logger.info(f"Game over ({cause}) score={self.score} t={self.now:.2f}s")

    def _start_drivers(self) -> None:
        self._tick_acc = 0.0
        self._spawn_acc = 0.0
        self._fire_acc = 0.0
        self._drivers_active = True

    def _halt_drivers(self) -> None:
        self._drivers_active = False

    # ----------------------------
    # Control
    # ----------------------------

    def set_vertical_position(self, y: float) -> None:
        if self.state is not GameState.PLAYING:
            return
        self.player.y = self._clamp_player_y(y)

    def move_vertical(self, delta: float) -> None:
        if self.state is not GameState.PLAYING:
            return
        self.player.y = self._clamp_player_y(self.player.y + delta * MOVE_SCALE)

    def fire_bullet(self) -> Optional[Bullet]:
        """Fire from the player's nose; also the auto-fire callback"""
        if self.state is not GameState.PLAYING:
            return None
        bullet = Bullet.player(self.player.x + self.player.size / 2, self.player.y)
        self.player_bullets.append(bullet)
        return bullet

    def update_screen_size(self, width: float, height: float) -> None:
        self.width, self.height = self._clamp_screen(width, height)
        self.player.x = PLAYER_X
        if self.player.y > self.height:
            self.player.y = self.height / 2
        self.player.y = self._clamp_player_y(self.player.y)

    def _clamp_player_y(self, y: float) -> float:
        half = self.player.size / 2
        return clamp(y, half, self.height - half)

    @staticmethod
    def _clamp_screen(width: float, height: float) -> Tuple[float, float]:
        w = max(float(width), MIN_SCREEN_WIDTH)
        h = max(float(height), MIN_SCREEN_HEIGHT)
        if (w, h) != (width, height):
            logger.warning(f"Screen size {width}x{height} clamped to {w:.0f}x{h:.0f}")
        return w, h

    # ----------------------------
    # Periodic drivers
    # ----------------------------

    def advance(self, elapsed: float) -> int:
        """Feed elapsed wall time into the fixed-timestep loop.

        Returns the number of ticks run. Leftover time below one tick is
        carried to the next call.
        """
        if elapsed < 0:
            raise ValueError(f"elapsed must be non-negative, got {elapsed}")
        if not self._drivers_active or self.state is not GameState.PLAYING:
            return 0

        self._tick_acc += elapsed
        ticks = 0
        while self._tick_acc + TIME_EPSILON >= self.tick_interval:
            self._tick_acc -= self.tick_interval

            self._fire_acc += self.tick_interval
            if self._fire_acc + TIME_EPSILON >= self.auto_fire_interval:
                self._fire_acc -= self.auto_fire_interval
                self.fire_bullet()

            self._spawn_acc += self.tick_interval
            if self._spawn_acc + TIME_EPSILON >= self.enemy_spawn_interval:
                self._spawn_acc -= self.enemy_spawn_interval
                self.spawn_enemy()

            self.tick()
            ticks += 1

            # Game over (or an external stop) halts the loop mid-batch
            if not self._drivers_active or self.state is not GameState.PLAYING:
                self._tick_acc = 0.0
                break
        return ticks

    def spawn_enemy(self, kind: Optional[EnemyType] = None,
                    y: Optional[float] = None) -> Optional[Enemy]:
        """Spawn one enemy off the right edge.

        Without `kind` the score-gated spawn policy picks the archetype.
        """
        if kind is not None and not behaviors.is_resolvable(ENEMY_CLASSES[kind]):
            raise ValueError(f"{kind.name.lower()} enemies have no behaviour and cannot spawn")
        if self.state is not GameState.PLAYING:
            return None

        if kind is None and y is None:
            enemy = spawner.spawn_enemy(self.score, self.width, self.height, self.now, self.rng)
        else:
            x, rolled_y = spawner.spawn_position(self.width, self.height, self.rng)
            if kind is None:
                kind = spawner.choose_archetype(self.score, self.rng.randint(0, 100))
            enemy = spawner.build_enemy(kind, x, rolled_y if y is None else y, self.now, self.rng)

        self.enemies.append(enemy)
        logger.debug(f"Spawned {enemy.kind.name.lower()} at y={enemy.y:.1f} speed={enemy.speed:.2f}")
        return enemy

    # ----------------------------
    # World advance
    # ----------------------------

    def tick(self) -> None:
        """Advance the world by one tick"""
        if self.state is not GameState.PLAYING:
            return

        self.tick_count += 1
        self.now = self.tick_count * self.tick_interval

        self._update_player_bullets()
        ctx = behaviors.TickContext(
            width=self.width,
            height=self.height,
            now=self.now,
            player_x=self.player.x,
            player_y=self.player.y,
        )
        self._update_enemies(ctx)
        self.enemies = [e for e in self.enemies if behaviors.in_play(e, ctx)]
        self._update_enemy_bullets()
        self._handle_collisions()

    def _update_player_bullets(self) -> None:
        limit = self.width + PLAYER_BULLET_MARGIN
        for b in self.player_bullets:
            b.x += b.speed
        self.player_bullets = [b for b in self.player_bullets if b.x <= limit]

    def _update_enemies(self, ctx: behaviors.TickContext) -> None:
        for e in self.enemies:
            self.enemy_bullets.extend(behaviors.advance_enemy(e, ctx))

    def _update_enemy_bullets(self) -> None:
        m = ENEMY_BULLET_MARGIN
        for b in self.enemy_bullets:
            if b.vx != 0.0 or b.vy != 0.0:
                b.x += b.vx
                b.y += b.vy
            else:
                b.x -= b.speed

        self.enemy_bullets = [
            b for b in self.enemy_bullets
            if -m <= b.x <= self.width + m and -m <= b.y <= self.height + m
        ]

    def _handle_collisions(self) -> None:
        report = resolve_player_hits(self.enemies, self.player_bullets)
        if report.killed:
            self.score += report.score
            self.kills += len(report.killed)
            for e in report.killed:
                logger.debug(f"Destroyed {e.kind.name.lower()} (+{e.score}) score={self.score}")

        enemy = enemy_touching_player(self.player, self.enemies)
        if enemy is not None:
            self._end_game(f"rammed by {enemy.kind.name.lower()}")
            return

        if pop_bullet_hitting_player(self.player, self.enemy_bullets) is not None:
            self._end_game("shot down")

    # ----------------------------
    # Snapshot / info
    # ----------------------------

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            state=self.state,
            score=self.score,
            player=replace(self.player),
            enemies=tuple(copy.deepcopy(self.enemies)),
            player_bullets=tuple(replace(b) for b in self.player_bullets),
            enemy_bullets=tuple(replace(b) for b in self.enemy_bullets),
            width=self.width,
            height=self.height,
            now=self.now,
        )

    def get_info(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "score": self.score,
            "kills": self.kills,
            "num_enemies": len(self.enemies),
            "num_player_bullets": len(self.player_bullets),
            "num_enemy_bullets": len(self.enemy_bullets),
            "ticks": self.tick_count,
            "time": self.now,
        }
