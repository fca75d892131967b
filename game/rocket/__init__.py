"""Retro Rocket - pixel-art rocket dodging game and its gym environment"""

from .game_loop import GameSession, LoopCallbacks, ManualFrameScheduler, ThrustSignal, start, stop
from .rocket_env import RocketEnv, run_random_episode

__all__ = [
    'GameSession',
    'LoopCallbacks',
    'ManualFrameScheduler',
    'ThrustSignal',
    'start',
    'stop',
    'RocketEnv',
    'run_random_episode',
]
