"""
Frame scheduler and game loop
-----------------------------
- `start()` builds a fresh RunState, paints it and keeps asking the scheduler
  for the next frame until the run is over
- `stop()` tears a loop down: cancels the pending frame, drops the thrust
  listener and silences all callbacks. Safe to call more than once
- `GameSession` is what hosts use: it owns the current loop and rebuilds it on
  restart or when the surface size changes

Everything is single threaded. A host drives frames through a FrameScheduler;
`ManualFrameScheduler` is driven by explicit timestamps (seconds) and is what
the gym env, the arcade window and the tests use.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import numpy as np

from .canvas import FrameBuffer
from .collision import first_collision, hits_boundary
from .entities import Craft, RunState
from .obstacles import SPAWN_INTERVAL, advance_obstacles, spawn_obstacle
from .physics import step_craft
from .renderer import render_frame
from .starfield import STAR_COUNT, advance_stars, create_stars
from .utils import make_rng

FrameCallback = Callable[[float], None]


class ManualFrameScheduler:
    """Frame scheduler ticked by the caller with `advance(timestamp)`"""

    def __init__(self):
        self._ids = itertools.count(1)
        self._pending: Dict[int, FrameCallback] = {}

    def request_frame(self, callback: FrameCallback) -> int:
        token = next(self._ids)
        self._pending[token] = callback
        return token

    def cancel_frame(self, token: Optional[int]):
        if token is not None:
            self._pending.pop(token, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def advance(self, timestamp: float) -> int:
        """Run every callback requested before this call; returns how many ran"""
        due = list(self._pending.items())
        self._pending.clear()
        for _, callback in due:
            callback(timestamp)
        return len(due)


class ThrustSignal:
    """Press/release input shared between the host and the active loop"""

    def __init__(self):
        self._listeners: List[Callable[[bool], None]] = []
        self.active = False

    def add_listener(self, listener: Callable[[bool], None]):
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[bool], None]):
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def set(self, active: bool):
        self.active = bool(active)
        for listener in list(self._listeners):
            listener(self.active)

    def press(self):
        self.set(True)

    def release(self):
        self.set(False)


@dataclass
class LoopCallbacks:
    """What the loop reports back to the host"""
    on_game_over: Optional[Callable[[], None]] = None
    on_score: Optional[Callable[[float], None]] = None


def new_run_state(width: int, height: int, rng: np.random.Generator, star_count: int = STAR_COUNT) -> RunState:
    """Fresh run: centred craft, new stars, no obstacles, zeroed score"""
    return RunState(
        craft=Craft(y=height / 2, velocity=0.0),
        stars=create_stars(width, height, rng, star_count),
    )


class LoopHandle:
    """One running game loop. Owns its RunState exclusively."""

    def __init__(
        self,
        surface: Optional[FrameBuffer],
        scheduler: ManualFrameScheduler,
        callbacks: LoopCallbacks,
        thrust: Optional[ThrustSignal] = None,
        rng: Optional[np.random.Generator] = None,
        star_count: int = STAR_COUNT,
        spawn_interval: float = SPAWN_INTERVAL,
    ):
        self.surface = surface
        self.scheduler = scheduler
        self.callbacks = callbacks
        self.thrust = thrust
        self.rng = rng if rng is not None else make_rng()
        self.star_count = star_count
        self.spawn_interval = spawn_interval

        self.state: Optional[RunState] = None
        self.ticks = 0
        self._frame_token: Optional[int] = None
        self._started = False
        self._stopped = False

    # ----------------------------
    # Lifecycle
    # ----------------------------

    @property
    def running(self) -> bool:
        return self._started and not self._stopped and self.state is not None and not self.state.is_over

    @property
    def stopped(self) -> bool:
        return self._stopped

    def _start(self, start_time: Optional[float] = None):
        if self.surface is None or not self.surface.drawable:
            # Nothing to draw into: stay inert
            return
        self.state = new_run_state(self.surface.width, self.surface.height, self.rng, self.star_count)
        self.state.last_timestamp = start_time
        if self.thrust is not None:
            self.state.thrusting = self.thrust.active
            self.thrust.add_listener(self._on_thrust)
        self._started = True
        render_frame(self.surface, self.state, self.rng)
        self._frame_token = self.scheduler.request_frame(self.tick)

    def _stop(self):
        if self._stopped:
            return
        self._stopped = True
        self.scheduler.cancel_frame(self._frame_token)
        self._frame_token = None
        if self.thrust is not None:
            self.thrust.remove_listener(self._on_thrust)

    def _on_thrust(self, active: bool):
        if self.state is not None and not self._stopped:
            self.state.thrusting = active

    # ----------------------------
    # Tick
    # ----------------------------

    def tick(self, timestamp: float):
        """One simulation + render step at `timestamp` (seconds)"""
        self._frame_token = None
        if not self.running:
            return

        state = self.state
        surface = self.surface
        width, height = surface.width, surface.height
        thrusting = state.thrusting

        # The first frame of a run without a start time only sets the baseline
        if state.last_timestamp is None:
            dt = 0.0
        else:
            dt = max(timestamp - state.last_timestamp, 0.0)
        state.last_timestamp = timestamp

        advance_stars(state.stars, width, height, thrusting, self.rng)
        step_craft(state.craft, height, thrusting)
        state.obstacles = advance_obstacles(state.obstacles, width)

        crashed = (
            first_collision(state.craft, state.obstacles, width) is not None
            or hits_boundary(state.craft, width, height)
        )

        state.score += dt
        self._emit_score(state.score)
        if self._stopped:
            return

        state.spawn_timer += dt
        if state.spawn_timer > self.spawn_interval:
            state.obstacles.append(spawn_obstacle(width, height, self.rng))
            state.spawn_timer = 0.0

        render_frame(surface, state, self.rng)
        self.ticks += 1

        if crashed:
            self._game_over()
            return

        if not self._stopped:
            self._frame_token = self.scheduler.request_frame(self.tick)

    def _emit_score(self, score: float):
        if self.callbacks.on_score is not None and not self._stopped:
            self.callbacks.on_score(score)

    def _game_over(self):
        if self.state.is_over:
            return
        self.state.is_over = True
        if self.callbacks.on_game_over is not None and not self._stopped:
            self.callbacks.on_game_over()


def start(
    surface: Optional[FrameBuffer],
    callbacks: Optional[LoopCallbacks] = None,
    scheduler: Optional[ManualFrameScheduler] = None,
    thrust: Optional[ThrustSignal] = None,
    rng: Optional[np.random.Generator] = None,
    star_count: int = STAR_COUNT,
    spawn_interval: float = SPAWN_INTERVAL,
    start_time: Optional[float] = None,
) -> LoopHandle:
    """
    Start a loop on `surface`.

    The initial scene is painted right away and the first tick is requested
    from the scheduler. `start_time` is the timestamp the first tick's dt is
    measured from; without it the first tick only records a baseline.
    A missing or zero-sized surface gives back an inert handle.
    """
    handle = LoopHandle(
        surface,
        scheduler if scheduler is not None else ManualFrameScheduler(),
        callbacks if callbacks is not None else LoopCallbacks(),
        thrust=thrust,
        rng=rng,
        star_count=star_count,
        spawn_interval=spawn_interval,
    )
    handle._start(start_time)
    return handle


def stop(handle: Optional[LoopHandle]):
    """Tear a loop down. Idempotent."""
    if handle is not None:
        handle._stop()


class GameSession:
    """Current loop plus the host-facing restart/resize operations"""

    def __init__(
        self,
        width: int,
        height: int,
        callbacks: Optional[LoopCallbacks] = None,
        scheduler: Optional[ManualFrameScheduler] = None,
        thrust: Optional[ThrustSignal] = None,
        rng: Optional[np.random.Generator] = None,
        star_count: int = STAR_COUNT,
        spawn_interval: float = SPAWN_INTERVAL,
        start_time: Optional[float] = None,
    ):
        self.callbacks = callbacks if callbacks is not None else LoopCallbacks()
        self.scheduler = scheduler if scheduler is not None else ManualFrameScheduler()
        self.thrust = thrust if thrust is not None else ThrustSignal()
        self.rng = rng if rng is not None else make_rng()
        self.star_count = star_count
        self.spawn_interval = spawn_interval

        self.surface = FrameBuffer(width, height)
        self.handle: Optional[LoopHandle] = None
        self.restart(start_time)

    @property
    def state(self) -> Optional[RunState]:
        return self.handle.state if self.handle is not None else None

    @property
    def is_over(self) -> bool:
        return self.state is not None and self.state.is_over

    def restart(self, start_time: Optional[float] = None) -> LoopHandle:
        """Throw the current run away and start a new one"""
        stop(self.handle)
        self.handle = start(
            self.surface,
            self.callbacks,
            self.scheduler,
            thrust=self.thrust,
            rng=self.rng,
            star_count=self.star_count,
            spawn_interval=self.spawn_interval,
            start_time=start_time,
        )
        return self.handle

    def resize(self, width: int, height: int, start_time: Optional[float] = None) -> LoopHandle:
        """New surface size -> full reinitialisation"""
        self.surface = FrameBuffer(width, height)
        return self.restart(start_time)

    def close(self):
        stop(self.handle)
