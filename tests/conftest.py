"""Test configuration and fixtures for the Retro Rocket game tests."""

import numpy as np
import pytest

from game.rocket.canvas import FrameBuffer
from game.rocket.entities import Craft, Obstacle, RunState, Star
from game.rocket.game_loop import LoopCallbacks, ManualFrameScheduler, ThrustSignal

WIDTH = 600
HEIGHT = 800


@pytest.fixture
def rng():
    """Seeded generator so every test run draws the same numbers."""
    return np.random.default_rng(1234)


@pytest.fixture
def canvas():
    """Reference-size 600x800 surface."""
    return FrameBuffer(WIDTH, HEIGHT)


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def thrust():
    return ThrustSignal()


class Recorder:
    """Collects what the loop reports to the host."""

    def __init__(self):
        self.scores = []
        self.game_overs = 0

    def on_score(self, score):
        self.scores.append(score)

    def on_game_over(self):
        self.game_overs += 1

    def callbacks(self):
        return LoopCallbacks(on_game_over=self.on_game_over, on_score=self.on_score)


@pytest.fixture
def recorder():
    return Recorder()


def make_state(craft_y=400.0, velocity=0.0, stars=None, obstacles=None, thrusting=False):
    """Helper to build a RunState by hand."""
    return RunState(
        craft=Craft(y=craft_y, velocity=velocity),
        stars=list(stars) if stars is not None else [],
        obstacles=list(obstacles) if obstacles is not None else [],
        thrusting=thrusting,
    )


def make_obstacle(kind="asteroid", x=0.0, y=0.0, width=10.0, height=10.0, speed=1.0):
    return Obstacle(kind=kind, x=x, y=y, width=width, height=height, speed=speed)


def make_star(x=0.0, y=0.0, speed=0.5):
    return Star(x=x, y=y, speed=speed)
