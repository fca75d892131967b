"""
Headless rollouts of the rocket environment with simple scripted policies.
Optionally dumps rendered frames as PNG files.
"""

import os
import argparse
from typing import Callable, Dict, Optional

import numpy as np
from PIL import Image

from game.rocket import RocketEnv
from game.rocket.rocket_env import IDLE, THRUST
from game.rocket.utils import seed_everything
from rl.configs.rocket_config import ENV_CONFIG, POLICIES, ROLLOUT_CONFIG

Policy = Callable[[np.ndarray, np.random.Generator], int]


def idle_policy(obs: np.ndarray, rng: np.random.Generator) -> int:
    """Never thrust; the rocket just falls"""
    return IDLE


def make_random_policy(thrust_prob: float) -> Policy:
    def random_policy(obs: np.ndarray, rng: np.random.Generator) -> int:
        return THRUST if rng.random() < thrust_prob else IDLE
    return random_policy


def hover_policy(obs: np.ndarray, rng: np.random.Generator) -> int:
    """Hold the rocket around the middle of the screen, ignoring obstacles"""
    y, v = obs[0], obs[1]
    if y > 0.0 and v > -0.05:
        return THRUST
    if v > 0.15:
        return THRUST
    return IDLE


def make_policy(name: str, thrust_prob: float = 0.3) -> Policy:
    if name == "random":
        return make_random_policy(thrust_prob)
    if name == "idle":
        return idle_policy
    if name == "hover":
        return hover_policy
    raise ValueError(f"Unknown policy: {name}")


def save_frame(frame: np.ndarray, frame_dir: str, episode: int, step: int) -> str:
    path = os.path.join(frame_dir, f"ep{episode:03d}_step{step:05d}.png")
    Image.fromarray(frame).save(path)
    return path


def run_rollouts(
    policy: str = "hover",
    n_episodes: int = 10,
    seed: Optional[int] = 42,
    thrust_prob: float = 0.3,
    frame_dir: Optional[str] = None,
    frame_every: int = 30,
    env_config: Optional[dict] = None,
    verbose: int = 1,
) -> Dict[str, object]:
    """
    Run `n_episodes` with a scripted policy and report survival statistics

    Args:
        policy: One of POLICIES
        n_episodes: Number of episodes
        seed: Base seed; episode i uses seed + i
        thrust_prob: Thrust probability for the random policy
        frame_dir: Directory for PNG frames (None disables saving)
        frame_every: Save one frame every this many steps
        env_config: Overrides for ENV_CONFIG
    """
    act = make_policy(policy, thrust_prob)
    config = dict(ENV_CONFIG)
    if env_config:
        config.update(env_config)

    render_mode = "rgb_array" if frame_dir else None
    env = RocketEnv(render_mode=render_mode, **config)
    if frame_dir:
        os.makedirs(frame_dir, exist_ok=True)

    episode_scores = []
    episode_rewards = []
    episode_lengths = []
    crashes = 0

    for episode in range(n_episodes):
        obs, info = env.reset(seed=seed + episode if seed is not None else None)

        terminated = False
        truncated = False
        total_reward = 0.0
        steps = 0

        while not (terminated or truncated):
            action = act(obs, env.np_random)
            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += reward
            steps += 1

            if frame_dir and (steps % frame_every == 0 or terminated):
                save_frame(env.render(), frame_dir, episode, steps)

        crashes += int(terminated)
        episode_scores.append(info["score"])
        episode_rewards.append(total_reward)
        episode_lengths.append(steps)

        if verbose > 0:
            print(f"[rollout] Episode {episode + 1}/{n_episodes}: "
                  f"Score = {info['score']:.2f}s, Reward = {total_reward:.2f}, Length = {steps}")

    env.close()

    results = {
        "policy": policy,
        "mean_score": float(np.mean(episode_scores)),
        "std_score": float(np.std(episode_scores)),
        "mean_reward": float(np.mean(episode_rewards)),
        "mean_length": float(np.mean(episode_lengths)),
        "crash_rate": crashes / max(1, n_episodes),
        "episode_scores": episode_scores,
    }

    if verbose > 0:
        print("\n" + "=" * 50)
        print(f"Rollout Results ({policy}, {n_episodes} episodes):")
        print(f"Mean Score: {results['mean_score']:.2f}s ± {results['std_score']:.2f}")
        print(f"Mean Episode Length: {results['mean_length']:.1f}")
        print(f"Crash Rate: {results['crash_rate']:.0%}")
        print("=" * 50)

    return results


def main():
    parser = argparse.ArgumentParser(description="Run scripted rollouts of the rocket environment")
    parser.add_argument(
        "--policy",
        type=str,
        default=ROLLOUT_CONFIG["policy"],
        choices=POLICIES,
        help=f"Scripted policy (default: {ROLLOUT_CONFIG['policy']})",
    )
    parser.add_argument(
        "--n-episodes",
        type=int,
        default=ROLLOUT_CONFIG["n_episodes"],
        help=f"Number of episodes (default: {ROLLOUT_CONFIG['n_episodes']})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=ROLLOUT_CONFIG["seed"],
        help=f"Base random seed (default: {ROLLOUT_CONFIG['seed']})",
    )
    parser.add_argument(
        "--thrust-prob",
        type=float,
        default=ROLLOUT_CONFIG["thrust_prob"],
        help="Thrust probability for the random policy",
    )
    parser.add_argument(
        "--frame-dir",
        type=str,
        default=ROLLOUT_CONFIG["frame_dir"],
        help="Save rendered frames as PNG into this directory",
    )
    parser.add_argument(
        "--frame-every",
        type=int,
        default=ROLLOUT_CONFIG["frame_every"],
        help="Steps between saved frames",
    )
    parser.add_argument("--width", type=int, default=ENV_CONFIG["width"])
    parser.add_argument("--height", type=int, default=ENV_CONFIG["height"])
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Run every policy and print a comparison",
    )

    args = parser.parse_args()
    seed_everything(args.seed)
    env_config = {"width": args.width, "height": args.height}

    policies = POLICIES if args.compare else [args.policy]
    summary = []
    for name in policies:
        results = run_rollouts(
            policy=name,
            n_episodes=args.n_episodes,
            seed=args.seed,
            thrust_prob=args.thrust_prob,
            frame_dir=os.path.join(args.frame_dir, name) if args.frame_dir else None,
            frame_every=args.frame_every,
            env_config=env_config,
        )
        summary.append(results)

    if args.compare:
        print("\nPolicy comparison:")
        print("-" * 50)
        for r in summary:
            print(f"  {r['policy']:10} | score {r['mean_score']:7.2f}s | crash {r['crash_rate']:.0%}")
        print("-" * 50)


if __name__ == "__main__":
    main()
