"""
GaraxyEnv - Gymnasium wrapper around the GaraxyWars engine
-----------------------------------------------------------
- Headless: the engine is the whole game, nothing is drawn
- Gymnasium API
- 1 agent that moves the ship up/down and may fire on top of auto-fire
- Vector observation: player state + top-K nearest enemies + top-M nearest enemy bullets
- MultiDiscrete action space: [move(3), fire(2)]
- One env step == one engine frame (dt seconds fed to GameEngine.advance)

Install:
    pip install gymnasium numpy

Quick test:
    python -m game.garaxy.shooter_env
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .constants import ENEMY_BULLET_SPEED, SCREEN_HEIGHT, SCREEN_WIDTH, TICK_INTERVAL
from .engine import GameEngine, GameState
from .entities import ARCHETYPES, EnemyType
from .utils import clamp, seed_everything

DEFAULT_REWARD = {
    "R_SCORE": 0.1,    # per game point
    "R_ALIVE": 0.001,  # per surviving step
    "R_SHOT": 0.005,   # manual shots only; auto-fire is free
    "R_DEATH": 5.0,
}


class GaraxyEnv(gym.Env):
    """Side-scrolling shooter environment driven by GameEngine"""

    metadata = {"render_modes": [], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: float = SCREEN_WIDTH,
        height: float = SCREEN_HEIGHT,
        dt: float = TICK_INTERVAL,
        max_steps: int = 3600,  # 60s at 60 FPS
        k_enemies: int = 5,
        m_bullets: int = 6,
        move_step: float = 2.0,
        reward_weights: Optional[Dict[str, float]] = None,
        engine_kwargs: Optional[Dict[str, Any]] = None,
    ):
        super().__init__()

        if render_mode is not None:
            raise ValueError("GaraxyEnv is headless; render_mode must be None")
        self.render_mode = render_mode

        self.dt = dt
        self.max_steps = max_steps
        self.k_enemies = k_enemies
        self.m_bullets = m_bullets
        self.move_step = move_step
        self.reward_weights = dict(DEFAULT_REWARD)
        if reward_weights:
            self.reward_weights.update(reward_weights)

        self.engine = GameEngine(width=width, height=height, **(engine_kwargs or {}))

        # move: 0 stay, 1 up, 2 down
        # fire: 0/1
        self.action_space = spaces.MultiDiscrete([3, 2])

        # Player: y(1) auto-fire phase(1)
        # Each enemy: rel pos(2) archetype(1) health fraction(1)
        # Each enemy bullet: rel pos(2) vel(2)
        obs_dim = 2 + (self.k_enemies * 4) + (self.m_bullets * 4)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._step_count = 0
        self._events: Dict[str, float] = {}

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)
        if seed is not None:
            self.engine.reseed(seed)

        self._step_count = 0
        self.engine.start()

        return self._get_obs(), self._get_info()

    def step(self, action):
        self._events = {"score": 0.0, "kills": 0.0, "shot": 0.0}

        move, fire = int(action[0]), int(action[1])
        score_before = self.engine.score
        kills_before = self.engine.kills

        if move == 1:
            self.engine.move_vertical(-self.move_step)
        elif move == 2:
            self.engine.move_vertical(self.move_step)

        if fire == 1 and self.engine.fire_bullet() is not None:
            self._events["shot"] += 1.0

        self.engine.advance(self.dt)

        self._events["score"] = float(self.engine.score - score_before)
        self._events["kills"] = float(self.engine.kills - kills_before)

        terminated = self.engine.state is GameState.GAME_OVER
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        reward = self._compute_reward(terminated)
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self):
        return None

    def close(self):
        self.engine.stop()

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        eng = self.engine
        w, h = eng.width, eng.height
        px, py = eng.player.x, eng.player.y

        obs_parts = [
            (py / h) * 2 - 1,
            clamp(eng.auto_fire_phase, 0.0, 1.0) * 2 - 1,
        ]

        last_kind = len(EnemyType) - 1
        enemies = sorted(eng.enemies, key=lambda e: (e.x - px) ** 2 + (e.y - py) ** 2)
        for i in range(self.k_enemies):
            if i < len(enemies):
                e = enemies[i]
                obs_parts += [
                    clamp((e.x - px) / w, -1, 1),
                    clamp((e.y - py) / h, -1, 1),
                    (int(e.kind) / last_kind) * 2 - 1,
                    clamp(e.health / ARCHETYPES[e.kind].health, 0, 1),
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        bullets = sorted(eng.enemy_bullets, key=lambda b: (b.x - px) ** 2 + (b.y - py) ** 2)
        for i in range(self.m_bullets):
            if i < len(bullets):
                b = bullets[i]
                obs_parts += [
                    clamp((b.x - px) / w, -1, 1),
                    clamp((b.y - py) / h, -1, 1),
                    clamp(b.vx / ENEMY_BULLET_SPEED, -1, 1),
                    clamp(b.vy / ENEMY_BULLET_SPEED, -1, 1),
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self, died: bool) -> float:
        w = self.reward_weights
        reward = 0.0

        reward += w["R_SCORE"] * self._events.get("score", 0.0)
        reward -= w["R_SHOT"] * self._events.get("shot", 0.0)

        if died:
            reward -= w["R_DEATH"]
        else:
            reward += w["R_ALIVE"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        info = self.engine.get_info()
        info["step"] = self._step_count
        info["kills_this_step"] = self._events.get("kills", 0.0)
        return info


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(seed: Optional[int] = 42, max_steps: Optional[int] = None) -> float:
    """Play one headless episode with random actions and return its reward"""
    env = GaraxyEnv() if max_steps is None else GaraxyEnv(max_steps=max_steps)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

    print(f"Random episode return: {total:.3f}  "
          f"score: {info['score']}  steps: {info['step']}  state: {info['state']}")

    env.close()
    return total


if __name__ == "__main__":
    run_random_episode()
