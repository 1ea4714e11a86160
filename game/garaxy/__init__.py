"""GaraxyWars module - side-scrolling shooter simulation engine"""

from .engine import GameEngine, GameSnapshot, GameState
from .entities import EnemyType
from .loop import run_realtime
from .shooter_env import GaraxyEnv, run_random_episode

__all__ = [
    'GameEngine',
    'GameSnapshot',
    'GameState',
    'EnemyType',
    'run_realtime',
    'GaraxyEnv',
    'run_random_episode',
]
