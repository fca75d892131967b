"""Tests for the game loop lifecycle, ticking and game over."""

import numpy as np
import pytest

from game.rocket.canvas import FrameBuffer
from game.rocket.game_loop import GameSession, ManualFrameScheduler, start, stop
from game.rocket.physics import gravity_for
from conftest import make_obstacle


def start_loop(canvas, scheduler, recorder, thrust=None, seed=0):
    return start(
        canvas,
        recorder.callbacks(),
        scheduler,
        thrust=thrust,
        rng=np.random.default_rng(seed),
        start_time=0.0,
    )


class TestStart:
    """Starting a loop."""

    def test_initial_state(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        state = handle.state
        assert state.craft.y == 400.0
        assert state.craft.velocity == 0.0
        assert len(state.stars) == 50
        assert state.obstacles == []
        assert state.score == 0.0
        assert state.spawn_timer == 0.0
        assert not state.is_over
        assert handle.running

    def test_paints_and_requests_first_frame(self, canvas, scheduler, recorder):
        start_loop(canvas, scheduler, recorder)
        assert scheduler.pending == 1
        # ground already on screen
        assert canvas.count("#00FF00") == 600 * 2
        assert recorder.scores == []

    def test_missing_surface_is_inert(self, scheduler, recorder):
        handle = start(None, recorder.callbacks(), scheduler)
        assert handle.state is None
        assert not handle.running
        assert scheduler.pending == 0

    def test_empty_surface_is_inert(self, scheduler, recorder, thrust):
        handle = start(FrameBuffer(0, 800), recorder.callbacks(), scheduler, thrust=thrust)
        assert handle.state is None
        assert scheduler.pending == 0
        assert thrust.listener_count == 0
        stop(handle)

    def test_without_start_time_first_tick_is_baseline(self, canvas, scheduler, recorder):
        handle = start(canvas, recorder.callbacks(), scheduler, rng=np.random.default_rng(0))
        scheduler.advance(12.5)
        assert handle.state.score == 0.0
        scheduler.advance(12.6)
        assert handle.state.score == pytest.approx(0.1)


class TestTick:
    """One tick at a time."""

    def test_gravity_is_per_tick_not_per_second(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        scheduler.advance(0.1)
        assert handle.state.craft.velocity == pytest.approx(gravity_for(800))
        assert handle.state.craft.y == pytest.approx(400.05)

    def test_same_step_for_any_dt(self, recorder):
        slow, fast = ManualFrameScheduler(), ManualFrameScheduler()
        a = start_loop(FrameBuffer(600, 800), slow, recorder)
        b = start_loop(FrameBuffer(600, 800), fast, recorder)
        slow.advance(0.5)
        fast.advance(0.001)
        assert a.state.craft.velocity == pytest.approx(b.state.craft.velocity)
        assert a.state.craft.y == pytest.approx(b.state.craft.y)

    def test_score_accumulates_seconds(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        for t in (0.1, 0.2, 0.35):
            scheduler.advance(t)
        assert handle.state.score == pytest.approx(0.35)
        assert recorder.scores == pytest.approx([0.1, 0.2, 0.35])
        assert handle.ticks == 3

    def test_one_frame_in_flight(self, canvas, scheduler, recorder):
        start_loop(canvas, scheduler, recorder)
        for i in range(1, 20):
            assert scheduler.advance(i / 60) == 1
            assert scheduler.pending == 1

    def test_stars_scroll(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        before = [(s.y, s.speed) for s in handle.state.stars]
        scheduler.advance(0.016)
        for star, (y, speed) in zip(handle.state.stars, before):
            assert star.y == pytest.approx(y + speed) or star.y == 0.0

    def test_spawn_after_interval(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        for k in range(1, 7):
            scheduler.advance(0.25 * k)
        # timer at exactly 1.5: not yet
        assert handle.state.obstacles == []
        assert handle.state.spawn_timer == pytest.approx(1.5)
        scheduler.advance(0.25 * 7)
        assert len(handle.state.obstacles) == 1
        assert handle.state.spawn_timer == 0.0

    def test_obstacles_move(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        o = make_obstacle(x=10.0, y=50.0, speed=2.0)
        handle.state.obstacles.append(o)
        scheduler.advance(0.016)
        assert o.x == pytest.approx(12.0)


class TestThrust:
    """Input signal handling."""

    def test_thrust_pushes_up(self, canvas, scheduler, recorder, thrust):
        handle = start_loop(canvas, scheduler, recorder, thrust=thrust)
        thrust.press()
        scheduler.advance(0.016)
        assert handle.state.craft.velocity == pytest.approx(0.05 - 0.15)

    def test_last_write_wins(self, canvas, scheduler, recorder, thrust):
        handle = start_loop(canvas, scheduler, recorder, thrust=thrust)
        thrust.press()
        thrust.release()
        thrust.press()
        thrust.release()
        scheduler.advance(0.016)
        assert handle.state.craft.velocity == pytest.approx(0.05)

    def test_held_before_start(self, canvas, scheduler, recorder, thrust):
        thrust.press()
        handle = start_loop(canvas, scheduler, recorder, thrust=thrust)
        assert handle.state.thrusting


class TestGameOver:
    """Running -> Over."""

    def test_ground(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        handle.state.craft.y = 770.0
        handle.state.craft.velocity = 6.0
        scheduler.advance(0.016)
        assert handle.state.is_over
        assert not handle.running
        assert recorder.game_overs == 1
        assert scheduler.pending == 0

    def test_ceiling(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        handle.state.craft.y = 0.5
        handle.state.craft.velocity = -3.0
        scheduler.advance(0.016)
        assert handle.state.is_over
        assert recorder.game_overs == 1

    def test_obstacle(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        handle.state.obstacles.append(make_obstacle(x=290.0, y=395.0, width=20.0, height=30.0, speed=0.0))
        scheduler.advance(0.016)
        assert handle.state.is_over
        assert recorder.game_overs == 1

    def test_fires_once_for_several_conditions(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        handle.state.craft.y = 780.0
        handle.state.obstacles.append(make_obstacle(x=290.0, y=775.0, width=20.0, height=30.0, speed=0.0))
        handle.state.obstacles.append(make_obstacle(x=295.0, y=780.0, width=5.0, height=5.0, speed=0.0))
        scheduler.advance(0.016)
        scheduler.advance(0.032)
        handle.tick(0.05)
        assert recorder.game_overs == 1
        assert handle.ticks == 1

    def test_collision_uses_moved_obstacles(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        # not touching before the move, touching after it
        handle.state.obstacles.append(make_obstacle(x=281.0, y=395.0, width=10.0, height=30.0, speed=5.0))
        scheduler.advance(0.016)
        assert handle.state.is_over

    def test_falls_to_ground_eventually(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        t = 0.0
        # obstacles spawn every 1.5s; keep dt small so none reaches the centre
        while handle.running and handle.ticks < 1000:
            t += 0.001
            scheduler.advance(t)
        assert handle.state.is_over
        assert recorder.game_overs == 1
        assert handle.state.craft.y + 20 >= 776


class TestStop:
    """Teardown."""

    def test_cancels_frame_and_listeners(self, canvas, scheduler, recorder, thrust):
        handle = start_loop(canvas, scheduler, recorder, thrust=thrust)
        assert thrust.listener_count == 1
        stop(handle)
        assert scheduler.pending == 0
        assert thrust.listener_count == 0
        assert handle.stopped

    def test_idempotent(self, canvas, scheduler, recorder, thrust):
        handle = start_loop(canvas, scheduler, recorder, thrust=thrust)
        stop(handle)
        stop(handle)
        stop(None)
        assert handle.stopped

    def test_no_callbacks_after_stop(self, canvas, scheduler, recorder):
        handle = start_loop(canvas, scheduler, recorder)
        scheduler.advance(0.1)
        stop(handle)
        handle.state.craft.y = 2000.0
        handle.tick(0.2)
        scheduler.advance(0.3)
        assert recorder.scores == pytest.approx([0.1])
        assert recorder.game_overs == 0

    def test_thrust_ignored_after_stop(self, canvas, scheduler, recorder, thrust):
        handle = start_loop(canvas, scheduler, recorder, thrust=thrust)
        stop(handle)
        thrust.press()
        assert not handle.state.thrusting


class TestSession:
    """Restart and resize."""

    def make_session(self, recorder, scheduler, thrust, width=600, height=800):
        return GameSession(
            width,
            height,
            callbacks=recorder.callbacks(),
            scheduler=scheduler,
            thrust=thrust,
            rng=np.random.default_rng(99),
            start_time=0.0,
        )

    def test_restart_resets_everything(self, recorder, scheduler, thrust):
        session = self.make_session(recorder, scheduler, thrust)
        old = session.handle
        old_stars = [(s.x, s.y) for s in session.state.stars]
        for k in range(1, 40):
            scheduler.advance(0.1 * k)
        session.state.craft.y = 900.0
        scheduler.advance(4.0)
        assert session.is_over

        session.restart(start_time=4.0)
        state = session.state
        assert old.stopped
        assert session.handle is not old
        assert state.score == 0.0
        assert not state.is_over
        assert state.obstacles == []
        assert state.spawn_timer == 0.0
        assert state.craft.y == 400.0
        assert len(state.stars) == 50
        assert [(s.x, s.y) for s in state.stars] != old_stars
        assert scheduler.pending == 1
        assert thrust.listener_count == 1

    def test_restart_while_running(self, recorder, scheduler, thrust):
        session = self.make_session(recorder, scheduler, thrust)
        scheduler.advance(0.1)
        old = session.handle
        session.restart(start_time=0.1)
        assert old.stopped
        assert scheduler.pending == 1
        scheduler.advance(0.2)
        assert old.ticks == 1
        assert session.handle.ticks == 1

    def test_resize_reinitialises(self, recorder, scheduler, thrust):
        session = self.make_session(recorder, scheduler, thrust)
        scheduler.advance(0.5)
        session.resize(300, 400, start_time=0.5)
        assert session.surface.width == 300
        assert session.surface.height == 400
        assert session.state.craft.y == 200.0
        assert session.state.score == 0.0
        assert session.surface.pixels.shape == (400, 300, 3)

    def test_close(self, recorder, scheduler, thrust):
        session = self.make_session(recorder, scheduler, thrust)
        session.close()
        assert scheduler.pending == 0
        assert thrust.listener_count == 0
