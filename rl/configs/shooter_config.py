"""
Training configuration for the GaraxyWars environment
"""

# Engine parameters (forwarded to GameEngine through the env)
ENGINE_CONFIG = {
    "tick_interval": 1/60,
    "enemy_spawn_interval": 1.5,
    "auto_fire_interval": 0.3,
}

# Environment parameters
ENV_CONFIG = {
    "width": 184,
    "height": 224,
    "dt": 1/60,
    "max_steps": 3600,  # 60 seconds at 60 FPS
    "k_enemies": 5,
    "m_bullets": 6,
    "move_step": 2.0,
}

# ==============================================================================
# REWARD SHAPING
# ==============================================================================

REWARD_CONFIG = {
    "R_SCORE": 0.1,      # Reward per game point (small=10 ... boss=50)
    "R_ALIVE": 0.001,    # Small bonus for every surviving frame
    "R_SHOT": 0.005,     # Penalty for manual shots (auto-fire is free)
    "R_DEATH": 5.0,      # Death penalty
}

# ==============================================================================
# ALGORITHM HYPERPARAMETERS
# ==============================================================================

# PPO hyperparameters
PPO_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "n_steps": 1024,
    "batch_size": 256,
    "n_epochs": 10,
    "gamma": 0.99,
    "gae_lambda": 0.95,
    "clip_range": 0.2,
    "ent_coef": 0.01,
    "vf_coef": 0.5,
    "max_grad_norm": 0.5,
    "verbose": 1,
}

# DQN hyperparameters
DQN_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 1e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 128,
    "tau": 1.0,
    "gamma": 0.99,
    "train_freq": 4,
    "gradient_steps": 1,
    "target_update_interval": 1000,
    "exploration_fraction": 0.1,
    "exploration_initial_eps": 1.0,
    "exploration_final_eps": 0.05,
    "verbose": 1,
}

# ==============================================================================
# TRAINING SETTINGS
# ==============================================================================

TRAINING_CONFIG = {
    "total_timesteps": 500_000,
    "save_freq": 10_000,
    "eval_freq": 5_000,
    "log_dir": "./logs",
    "model_dir": "./models",
    "tensorboard_log": "./tensorboard_logs",
}


def make_env_kwargs(**overrides):
    """Full GaraxyEnv keyword arguments built from the dicts above."""
    kwargs = dict(ENV_CONFIG)
    kwargs["reward_weights"] = dict(REWARD_CONFIG)
    kwargs["engine_kwargs"] = dict(ENGINE_CONFIG)
    kwargs.update(overrides)
    return kwargs
