"""
RocketEnv - the Retro Rocket game as a Gymnasium environment
------------------------------------------------------------
- Same game loop the desktop window runs, driven with fixed timestamps
- 1 agent that either idles or fires the thruster every tick
- Obstacles fly in from both sides at a fixed cadence
- Vector observation: craft state + K nearest obstacles (by horizontal distance)
- Discrete action space: 0 idle, 1 thrust
- render_mode "rgb_array" returns the pixel frame, "human" shows it in an
  arcade window

Install:
    pip install gymnasium arcade numpy

Quick test:
    python -m game.rocket.rocket_env
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .collision import CRAFT_HEIGHT
from .entities import Obstacle
from .game_loop import GameSession, LoopCallbacks, ManualFrameScheduler, ThrustSignal
from .obstacles import SPAWN_INTERVAL
from .starfield import STAR_COUNT
from .utils import REFERENCE_WIDTH, seed_everything, sprite_scale

IDLE = 0
THRUST = 1


class RocketEnv(gym.Env):
    """Rocket dodging environment on top of the pixel game loop"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: int = 600,
        height: int = 800,
        dt: float = 1 / 60,
        max_steps: int = 3600,  # 60s at 60 FPS
        k_obstacles: int = 4,
        star_count: int = STAR_COUNT,
        spawn_interval: float = SPAWN_INTERVAL,
        survival_reward: float = 1.0,  # per second survived
        death_penalty: float = 5.0,
        verbose: int = 0,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unsupported render_mode: {render_mode}"
        assert width > 0 and height > 0, "Surface must have a positive size."
        assert dt > 0, "dt must be positive."
        self.render_mode = render_mode

        # Surface
        self.width = width
        self.height = height
        self.dt = dt
        self.max_steps = max_steps

        # Observation config
        self.k_obstacles = k_obstacles

        # Gameplay config
        self.star_count = star_count
        self.spawn_interval = spawn_interval
        self.survival_reward = survival_reward
        self.death_penalty = death_penalty
        self.verbose = verbose

        self.action_space = spaces.Discrete(2)

        # Craft: y(1) velocity(1) thrusting(1)
        # Each obstacle: dx, dy, width, height, speed
        obs_dim = 3 + self.k_obstacles * 5
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self.scheduler = ManualFrameScheduler()
        self.thrust = ThrustSignal()
        self.session: Optional[GameSession] = None

        self._window = None
        self._step_count = 0
        self._clock = 0.0

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        if self.session is not None:
            self.session.close()

        self._step_count = 0
        self._clock = 0.0
        self.thrust.release()

        self.session = GameSession(
            self.width,
            self.height,
            callbacks=LoopCallbacks(on_game_over=self._on_game_over),
            scheduler=self.scheduler,
            thrust=self.thrust,
            rng=self.np_random,
            star_count=self.star_count,
            spawn_interval=self.spawn_interval,
            # Clock starts at 0 so the first step advances by a full dt
            start_time=self._clock,
        )

        obs = self._get_obs()
        info = self._get_info()
        return obs, info

    def step(self, action):
        if self.session is None:
            raise RuntimeError("Call reset() before step().")
        if self.session.is_over:
            raise RuntimeError("Episode is over; call reset() before stepping again.")

        self.thrust.set(int(action) == THRUST)

        self._clock += self.dt
        self.scheduler.advance(self._clock)

        terminated = self.session.is_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        reward = self.survival_reward * self.dt
        if terminated:
            reward -= self.death_penalty

        obs = self._get_obs()
        info = self._get_info()

        if terminated and self.verbose > 0:
            print(f"[RocketEnv] Crashed after {info['score']:.2f}s ({self._step_count} steps)")

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    def _on_game_over(self):
        if self.verbose > 1:
            print(f"[RocketEnv] Game over at step {self._step_count + 1}")

    # ----------------------------
    # Observation / info
    # ----------------------------

    def _nearest_obstacles(self) -> List[Obstacle]:
        cx = self.width / 2
        return sorted(
            self.session.state.obstacles,
            key=lambda o: abs(o.x + o.width / 2 - cx),
        )[: self.k_obstacles]

    def _get_obs(self) -> np.ndarray:
        state = self.session.state
        craft = state.craft
        s = sprite_scale(self.width)

        # Craft state mapped to [-1,1]
        y = craft.y / self.height * 2 - 1
        v = craft.velocity / (self.height * 0.02)  # 16 px/tick at 800 high
        obs_parts = [y, v, 1.0 if state.thrusting else -1.0]

        craft_cx = self.width / 2
        craft_cy = craft.y + CRAFT_HEIGHT * s / 2
        speed_scale = self.width / REFERENCE_WIDTH

        nearest = self._nearest_obstacles()
        for i in range(self.k_obstacles):
            if i < len(nearest):
                o = nearest[i]
                obs_parts += [
                    (o.x + o.width / 2 - craft_cx) / self.width,
                    (o.y + o.height / 2 - craft_cy) / self.height,
                    o.width / self.width,
                    o.height / self.height,
                    o.speed / speed_scale,
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0, 0.0]

        return np.clip(np.array(obs_parts, dtype=np.float32), -1.0, 1.0)

    def _get_info(self) -> Dict[str, Any]:
        state = self.session.state
        return {
            "score": state.score,
            "is_over": state.is_over,
            "num_obstacles": len(state.obstacles),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self.render_mode == "rgb_array":
            return self.session.surface.to_array()

        if self._window is None:
            # Imported lazily: arcade needs a display
            from .window import RocketWindow
            self._window = RocketWindow(self.width, self.height, interactive=False)

        state = self.session.state
        self._window.present(self.session.surface, state.score, state.is_over)
        return None

    def close(self):
        if self.session is not None:
            self.session.close()
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: Optional[int] = 42, thrust_prob: float = 0.3):
    """Run an episode with a random thrust policy; returns the survival time"""
    env = RocketEnv(render_mode="human" if render else None, verbose=1)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    while not (terminated or truncated):
        action = THRUST if env.np_random.random() < thrust_prob else IDLE
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

        if render and env._window:
            env._window.dispatch_events()

    print(f"Random episode return: {total:.3f}  score: {info['score']:.2f}s")
    env.close()
    return info["score"]


if __name__ == "__main__":
    run_random_episode(render=True)
