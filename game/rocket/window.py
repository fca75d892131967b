"""
Arcade window hosting the game.

The window is the host the game loop talks to: it owns the scheduler clock,
turns mouse/keyboard presses into thrust, restarts on request and rebuilds the
game when it is resized. Frames are drawn by the numpy renderer and uploaded
into a texture that is shown pixelated.
"""

from __future__ import annotations

from typing import Optional

import arcade
from PIL import Image

from .canvas import FrameBuffer
from .game_loop import GameSession, LoopCallbacks, ManualFrameScheduler, ThrustSignal
from .utils import make_rng, responsive_surface_size

HUD_HEIGHT = 48


class FrameTexture:
    """A texture whose pixels are replaced by each new frame"""

    def __init__(self, ctx):
        self.ctx = ctx
        self.texture: Optional[arcade.Texture] = None
        self._size = None

    def upload(self, surface: FrameBuffer) -> arcade.Texture:
        image = Image.fromarray(surface.pixels, "RGB").convert("RGBA")
        size = (surface.width, surface.height)
        if self.texture is None or self._size != size:
            self.texture = arcade.Texture(image, hash=f"retro-rocket-frame-{size[0]}x{size[1]}")
            self._size = size
        else:
            self.texture.image.paste(image)
            self.ctx.default_atlas.update_texture_image(self.texture)
        return self.texture


class RocketWindow(arcade.Window):
    """Arcade window for playing (interactive) or watching (env) the game"""

    def __init__(
        self,
        width: int,
        height: int,
        title: str = "Retro Rocket",
        interactive: bool = True,
        seed: Optional[int] = None,
        star_count: Optional[int] = None,
        spawn_interval: Optional[float] = None,
        verbose: int = 0,
    ):
        super().__init__(width, height + HUD_HEIGHT, title, resizable=interactive)
        self.interactive = interactive
        self.verbose = verbose

        # Colors
        self.BG = (17, 24, 39)
        self.HUD_C = (255, 255, 255)
        self.HINT_C = (156, 163, 175)
        self.OVERLAY_C = (0, 0, 0, 190)

        self._frame = FrameTexture(self.ctx)
        self._surface: Optional[FrameBuffer] = None
        self.score = 0.0
        self.game_over = False

        self.clock = 0.0
        self.scheduler = ManualFrameScheduler()
        self.thrust = ThrustSignal()
        self.session: Optional[GameSession] = None

        if interactive:
            kwargs = {}
            if star_count is not None:
                kwargs["star_count"] = star_count
            if spawn_interval is not None:
                kwargs["spawn_interval"] = spawn_interval
            self.session = GameSession(
                *responsive_surface_size(width, height, 1.0, 1.0),
                callbacks=LoopCallbacks(on_game_over=self._on_game_over, on_score=self._on_score),
                scheduler=self.scheduler,
                thrust=self.thrust,
                rng=make_rng(seed),
                start_time=self.clock,
                **kwargs,
            )
            self._surface = self.session.surface

    # ----------------------------
    # Host callbacks
    # ----------------------------

    def _on_score(self, score: float):
        self.score = score

    def _on_game_over(self):
        self.game_over = True
        if self.verbose > 0:
            print(f"[RocketWindow] Game over! Score: {self.score:.2f}")

    def restart(self):
        if self.session is None:
            return
        self.score = 0.0
        self.game_over = False
        self.session.restart(start_time=self.clock)
        self._surface = self.session.surface

    # ----------------------------
    # Arcade events
    # ----------------------------

    def on_update(self, delta_time: float):
        self.clock += delta_time
        self.scheduler.advance(self.clock)

    def on_mouse_press(self, x, y, button, modifiers):
        if self.game_over:
            self.restart()
        else:
            self.thrust.press()

    def on_mouse_release(self, x, y, button, modifiers):
        self.thrust.release()

    def on_key_press(self, symbol, modifiers):
        if symbol == arcade.key.SPACE:
            self.thrust.press()
        elif symbol == arcade.key.R:
            self.restart()
        elif symbol == arcade.key.ESCAPE:
            self.close()

    def on_key_release(self, symbol, modifiers):
        if symbol == arcade.key.SPACE:
            self.thrust.release()

    def on_resize(self, width: int, height: int):
        super().on_resize(width, height)
        # arcade may resize before __init__ has built the session
        if getattr(self, "session", None) is None:
            return
        size = responsive_surface_size(width, height - HUD_HEIGHT, 1.0, 1.0)
        if size != (self.session.surface.width, self.session.surface.height):
            self.score = 0.0
            self.game_over = False
            self.session.resize(*size, start_time=self.clock)
            self._surface = self.session.surface

    # ----------------------------
    # Drawing
    # ----------------------------

    def present(self, surface: FrameBuffer, score: float, game_over: bool):
        """Show an externally driven frame (used by RocketEnv)"""
        self._surface = surface
        self.score = score
        self.game_over = game_over
        self.on_draw()
        self.flip()

    def _frame_rect(self, surface: FrameBuffer):
        # Fit the surface above the HUD keeping its aspect ratio
        avail_w = self.width
        avail_h = max(self.height - HUD_HEIGHT, 1)
        zoom = min(avail_w / surface.width, avail_h / surface.height)
        w = surface.width * zoom
        h = surface.height * zoom
        left = (avail_w - w) / 2
        bottom = HUD_HEIGHT + (avail_h - h) / 2
        return arcade.LBWH(left, bottom, w, h)

    def on_draw(self):
        self.clear(color=self.BG)

        surface = self._surface
        if surface is None or not surface.drawable:
            return

        rect = self._frame_rect(surface)
        texture = self._frame.upload(surface)
        arcade.draw_texture_rect(texture, rect, pixelated=True)

        if self.game_over:
            arcade.draw_lrbt_rectangle_filled(
                rect.left, rect.right, rect.bottom, rect.top, self.OVERLAY_C
            )
            arcade.draw_text(
                "Game Over!", rect.x, rect.y + 16, self.HUD_C, 20,
                anchor_x="center", font_name="Courier New",
            )
            if self.interactive:
                arcade.draw_text(
                    "Click or press R to restart", rect.x, rect.y - 16, self.HINT_C, 12,
                    anchor_x="center", font_name="Courier New",
                )

        # HUD
        arcade.draw_text(
            f"Score: {self.score:.2f}", 12, 24, self.HUD_C, 14, font_name="Courier New"
        )
        if self.interactive:
            arcade.draw_text(
                "Click or hold SPACE to boost the rocket!", 12, 6, self.HINT_C, 10,
                font_name="Courier New",
            )


def run_window(
    width: int = 600,
    height: int = 800,
    seed: Optional[int] = None,
    star_count: Optional[int] = None,
    spawn_interval: Optional[float] = None,
    verbose: int = 1,
):
    """Open the game window and run until it is closed"""
    window = RocketWindow(
        width,
        height,
        seed=seed,
        star_count=star_count,
        spawn_interval=spawn_interval,
        verbose=verbose,
    )
    arcade.run()
    return window
