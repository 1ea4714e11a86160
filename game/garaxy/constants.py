"""
Game constants for the GaraxyWars simulation.

Distances are screen points, times are seconds, per-tick speeds are points
per tick at the nominal 60 Hz tick rate.
"""

# ---------------------------------------------------------------------------
# Screen
# ---------------------------------------------------------------------------
SCREEN_WIDTH: float = 184.0
SCREEN_HEIGHT: float = 224.0
MIN_SCREEN_WIDTH: float = 64.0
MIN_SCREEN_HEIGHT: float = 64.0

# ---------------------------------------------------------------------------
# Periodic drivers
# ---------------------------------------------------------------------------
TICK_INTERVAL: float = 1 / 60
ENEMY_SPAWN_INTERVAL: float = 1.5
AUTO_FIRE_INTERVAL: float = 0.3
TIME_EPSILON: float = 1e-9  # float slack when comparing elapsed time against a period

# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------
PLAYER_X: float = 30.0
PLAYER_SIZE: float = 12.0
PLAYER_HEALTH: int = 1
MOVE_SCALE: float = 2.0  # move_vertical(delta) moves by delta * MOVE_SCALE

# ---------------------------------------------------------------------------
# Bullets
# ---------------------------------------------------------------------------
BULLET_WIDTH: float = 8.0
BULLET_HEIGHT: float = 4.0
PLAYER_BULLET_SPEED: float = 4.0
ENEMY_BULLET_SPEED: float = 2.5
PLAYER_BULLET_MARGIN: float = 10.0
ENEMY_BULLET_MARGIN: float = 10.0

# ---------------------------------------------------------------------------
# Spawning / despawning
# ---------------------------------------------------------------------------
SPAWN_X_OFFSET: float = 20.0
SPAWN_Y_MARGIN: float = 20.0
DESPAWN_MARGIN: float = 20.0
FIRE_MIN_DISTANCE: float = 50.0  # enemies hold fire until x < width - this

# ---------------------------------------------------------------------------
# Archetype motion
# ---------------------------------------------------------------------------
MEDIUM_CENTER_THRESHOLD: float = 5.0
MEDIUM_STOP_DURATION: float = 1.0
BOSS_VERTICAL_STEP: float = 0.5
BOSS_EDGE_MARGIN: float = 10.0
CIRCLE_RADIUS: float = 20.0
CIRCLE_ANGLE_STEP: float = 0.1

# ---------------------------------------------------------------------------
# Fire spreads (vertical velocity as a fraction of ENEMY_BULLET_SPEED)
# ---------------------------------------------------------------------------
MEDIUM_SPREAD: tuple = (-0.7, 0.7)
LARGE_SPREAD: tuple = (-0.5, 0.0, 0.5)
BOSS_SPREAD: tuple = (-0.7, 0.0, 0.7)
