#!/usr/bin/env python3
"""
app.py – flower wall frame driver

One cooperative loop; each tick, in strict order:
  1. drain the sensor source (keep previous raw bits if nothing valid came)
  2. debounce every channel (or run the cascade mode)
  3. fade every channel with the measured frame time
  4. rebuild buffer + layout only if the display size changed
  5. render into the virtual canvas and present both halves
Input is dispatched by events.py; control actions are applied between
ticks so a rebuilt buffer is always complete before it is drawn.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

import pygame
from pygame.locals import *

import overlays
import timing
from assets       import AssetProvider
from cascade      import CascadeEngine
from channels     import ChannelBank
from compositor   import BufferGeometry, VirtualCanvas, split_widths
from config       import Settings
from debounce     import DebounceEngine
from errors       import MalformedSample
from events       import EventManager
from fade         import FadeAnimator
from layout       import LayoutParams
from sensor_input import decode, make_source

log = logging.getLogger("flowerwall.app")


# ── main application ───────────────────────────────────────────────────────
class FlowerWall:
    def __init__(self, settings: Settings,
                 source=None,
                 assets: Optional[AssetProvider] = None,
                 screen: Optional[pygame.Surface] = None):
        self.settings = settings

        # window ----------------------------------------------------------
        pygame.init()
        self.fullscreen = settings.fullscreen
        self._own_window = screen is None
        self.screen = screen if screen is not None else self._open_window()
        self.clock = pygame.time.Clock()

        # core state ------------------------------------------------------
        n = settings.channel_count
        self.bank     = ChannelBank(n)
        self.debounce = DebounceEngine(settings.activation_delay, settings.deactivation_delay)
        self.fade     = FadeAnimator(settings.rise_tau, settings.fall_tau)
        self.cascade  = (CascadeEngine(n, settings.history_fade, timing.now_ms())
                         if settings.mode == "cascade" else None)

        # collaborators ---------------------------------------------------
        self.assets = assets if assets is not None else AssetProvider.from_settings(settings).load()
        self._screen_size = self.screen.get_size()
        self.canvas = VirtualCanvas(
            self._geometry_for(self._screen_size, settings.bezel_width),
            n,
            LayoutParams.from_settings(settings),
            settings.layout_mode,
        )
        self.source = source if source is not None else make_source(settings)

        self.show_hud = settings.show_hud
        self.running  = True
        log.info("flower wall ready: %d channels, mode=%s, layout=%s",
                 n, settings.mode, settings.layout_mode)

    # ── display ------------------------------------------------------------
    def _open_window(self) -> pygame.Surface:
        s = self.settings
        if self.fullscreen and s.dual_screens and s.left_width and s.right_width:
            # one borderless window spanning both monitors
            os.environ.setdefault("SDL_VIDEO_WINDOW_POS", "0,0")
            screen = pygame.display.set_mode((s.left_width + s.right_width, s.height), NOFRAME)
        elif self.fullscreen:
            screen = pygame.display.set_mode((0, 0), FULLSCREEN)
        else:
            screen = pygame.display.set_mode(s.windowed_size, RESIZABLE)
        pygame.display.set_caption("flowerwall")
        pygame.mouse.set_visible(not self.fullscreen)
        return screen

    def _geometry_for(self, size: tuple[int, int], bezel: int) -> BufferGeometry:
        """Physical split of a window of *size*; configured widths only apply fullscreen."""
        w, h = size
        s = self.settings
        left_cfg, right_cfg = (s.left_width, s.right_width) if self.fullscreen else (None, None)
        left, right = split_widths(w, left_cfg, right_cfg, s.dual_screens)
        return BufferGeometry(left, bezel, right, h)

    def _sync_geometry(self) -> bool:
        """Rebuild the canvas if the output surface changed size."""
        size = self.screen.get_size()
        if size == self._screen_size:
            return False
        w, h = size
        if h <= 0 or w < (2 if self.settings.dual_screens else 1):
            # too small to split; keep drawing the previous canvas
            log.debug("window %dx%d too small to split, keeping %dx%d canvas",
                      w, h, self.canvas.geometry.virtual_width, self.canvas.geometry.height)
            self._screen_size = size
            return False
        self.canvas.rebuild(self._geometry_for(size, self.canvas.geometry.bezel_width))
        self._screen_size = size
        return True

    # ── input --------------------------------------------------------------
    def ingest(self) -> int:
        """Drain the source; return how many valid samples were applied."""
        applied = 0
        while (reading := self.source.poll()) is not None:
            try:
                sample = decode(reading, self.settings.channel_count)
            except MalformedSample as e:
                shown = reading.line if reading.line is not None else reading.values
                log.warning("discarded sample %r: %s", shown, e)
                continue
            self.bank.ingest(sample)
            applied += 1
        return applied

    def apply(self, act: dict) -> None:
        t = act["type"]
        if t == "quit":
            self.running = False
        elif t == "toggle_calibration":
            on = self.canvas.toggle_calibration()
            log.info("calibration overlay %s", "on" if on else "off")
        elif t == "adjust_bezel":
            bezel = self.canvas.adjust_bezel(int(act.get("delta", 0)))
            log.info("bezel compensation %dpx", bezel)
        elif t == "toggle_hud":
            self.show_hud ^= True
        elif t == "toggle_fullscreen" and self._own_window:
            self.fullscreen ^= True
            self.screen = self._open_window()
            self._screen_size = None          # split rules differ; force a rebuild
        elif t == "resize" and self._own_window and not self.fullscreen:
            self.screen = pygame.display.set_mode(act["size"], RESIZABLE)

    # ── frame ----------------------------------------------------------------
    def tick(self, dt_ms: float, now: float) -> None:
        self.ingest()
        if self.cascade is not None:
            self.cascade.update(self.bank, now)
        else:
            self.debounce.update_all(self.bank, now)
            self.fade.step_all(self.bank, dt_ms)
        self._sync_geometry()
        self.canvas.render(self.bank, self.assets)
        self.canvas.present(self.screen)
        if self.show_hud:
            overlays.draw_hud(self.screen, self.bank, self.settings, self.clock.get_fps())

    def status(self) -> dict:
        g = self.canvas.geometry
        return {
            "mode":          self.settings.mode,
            "bezel":         g.bezel_width,
            "virtual_width": g.virtual_width,
            "left_width":    g.left_width,
            "right_width":   g.right_width,
            "height":        g.height,
            "calibration":   self.canvas.show_calibration,
            "channels":      self.bank.snapshot(),
        }

    # ── main loop ---------------------------------------------------------
    def run(self) -> None:
        try:
            while self.running:
                for e in pygame.event.get():
                    EventManager.handle(e)
                while (act := EventManager.poll()):
                    self.apply(act)
                if not self.running:
                    break

                dt = self.clock.tick(self.settings.fps)
                self.tick(dt, timing.now_ms())
                pygame.display.flip()
        finally:
            self.close()

    def close(self) -> None:
        self.source.close()
        pygame.quit()


if __name__ == "__main__":
    FlowerWall(Settings.from_config()).run()
