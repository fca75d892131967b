"""
Configuration for the Retro Rocket game, its gym environment and scripts
"""

# Game loop parameters (shared by the window and the environment)
LOOP_CONFIG = {
    "star_count": 50,
    "spawn_interval": 1.5,  # seconds between obstacles
}

# Environment parameters
ENV_CONFIG = {
    # "render_mode": None,  # "rgb_array" to collect frames, "human" to watch
    "width": 600,
    "height": 800,
    "dt": 1/60,
    "max_steps": 3600,  # 60 seconds at 60 FPS
    "k_obstacles": 4,
    "survival_reward": 1.0,
    "death_penalty": 5.0,
    **LOOP_CONFIG,
}

# Desktop window parameters
WINDOW_CONFIG = {
    "width": 600,
    "height": 800,
    **LOOP_CONFIG,
}

# ==============================================================================
# ROLLOUT SETTINGS
# ==============================================================================

ROLLOUT_CONFIG = {
    "n_episodes": 10,
    "seed": 42,
    "policy": "hover",
    "thrust_prob": 0.3,  # random policy only
    "frame_dir": None,  # save PNG frames here when set
    "frame_every": 30,  # steps between saved frames
}

POLICIES = ["random", "idle", "hover"]


if __name__ == "__main__":
    for name, cfg in [("ENV_CONFIG", ENV_CONFIG), ("WINDOW_CONFIG", WINDOW_CONFIG), ("ROLLOUT_CONFIG", ROLLOUT_CONFIG)]:
        print(name)
        print("-" * 40)
        for key, value in cfg.items():
            print(f"  {key:20} | {value}")
        print()
