"""
compositor.py

Virtual-canvas compositor for two side-by-side monitors.

The whole scene is rendered into one off-screen buffer that is
`left + bezel + right` pixels wide.  Presenting copies `[0, left)` to the
left monitor and `[left + bezel, left + bezel + right)` to the right one,
directly after it, so whatever would land behind the physical bezel is
dropped and imagery stays continuous across the gap.

Any geometry change builds a brand-new buffer (never resized in place) and
recomputes the slot layout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

import pygame

import layout
import overlays
import renderer
from errors import ConfigError
from fade import SETTLED_EPSILON

log = logging.getLogger("flowerwall.compositor")


# ── geometry ───────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class BufferGeometry:
    left_width: int
    bezel_width: int
    right_width: int
    height: int

    def __post_init__(self):
        if self.left_width <= 0:
            raise ConfigError(f"left display width must be positive, got {self.left_width}")
        if self.right_width < 0:
            raise ConfigError(f"right display width must be >= 0, got {self.right_width}")
        if self.bezel_width < 0:
            raise ConfigError(f"bezel width must be >= 0, got {self.bezel_width}")
        if self.height <= 0:
            raise ConfigError(f"display height must be positive, got {self.height}")

    @property
    def virtual_width(self) -> int:
        return self.left_width + self.bezel_width + self.right_width

    @property
    def dual(self) -> bool:
        return self.right_width > 0

    @property
    def left_source(self) -> pygame.Rect:
        return pygame.Rect(0, 0, self.left_width, self.height)

    @property
    def right_source(self) -> pygame.Rect:
        return pygame.Rect(self.left_width + self.bezel_width, 0, self.right_width, self.height)

    @property
    def right_dest(self) -> tuple[int, int]:
        return self.left_width, 0

    @property
    def display_size(self) -> tuple[int, int]:
        """Size of the physical output the two halves are presented on."""
        return self.left_width + self.right_width, self.height


def split_widths(window_width: int,
                 left_cfg: Optional[int],
                 right_cfg: Optional[int],
                 dual: bool) -> tuple[int, int]:
    """Physical (left, right) widths: configured values or a window split."""
    if window_width <= 0:
        raise ConfigError(f"window width must be positive, got {window_width}")
    if not dual:
        return window_width, 0
    left  = left_cfg or window_width // 2
    right = right_cfg or window_width - left
    return left, right


# ── compositor ─────────────────────────────────────────────────────────────
class VirtualCanvas:

    def __init__(self,
                 geometry: BufferGeometry,
                 channel_count: int,
                 params: layout.LayoutParams = layout.LayoutParams(),
                 layout_mode: str = "slots"):
        self.channel_count    = channel_count
        self.layout_mode      = layout_mode
        self.layout           = layout.LayoutEngine(params)
        self.show_calibration = False
        self._cache           = renderer.ScaleCache()
        self.geometry: BufferGeometry
        self.buffer: pygame.Surface
        self.slots: list[layout.Slot] = []
        self.rebuild(geometry)

    # ── (re)configuration --------------------------------------------------
    def rebuild(self, geometry: BufferGeometry) -> None:
        buffer = pygame.Surface((geometry.virtual_width, geometry.height))
        slots  = self.layout.compute(geometry.virtual_width, geometry.height,
                                     self.channel_count)
        # swap everything together so no frame sees a half-built state
        self.geometry, self.buffer, self.slots = geometry, buffer, slots
        self._cache.clear()
        log.info("virtual canvas %dx%d (left %d | bezel %d | right %d)",
                 geometry.virtual_width, geometry.height,
                 geometry.left_width, geometry.bezel_width, geometry.right_width)

    def set_bezel(self, width: int) -> int:
        width = max(0, int(width))
        if width != self.geometry.bezel_width:
            self.rebuild(replace(self.geometry, bezel_width=width))
        return width

    def adjust_bezel(self, delta: int) -> int:
        return self.set_bezel(self.geometry.bezel_width + delta)

    def toggle_calibration(self) -> bool:
        self.show_calibration = not self.show_calibration
        return self.show_calibration

    # ── drawing ------------------------------------------------------------
    def slot_rect(self, index: int, aspect: float) -> layout.Rect:
        return layout.fit(self.slots[index], aspect)

    def render(self, bank, assets) -> None:
        """Draw background, channel images and the optional guide to the buffer."""
        surf = self.buffer
        renderer.draw_background(surf, assets.background, self._cache)

        full = (0, 0, self.geometry.virtual_width, self.geometry.height)
        for ch in bank:
            if ch.opacity <= SETTLED_EPSILON:
                continue
            image = assets.image(ch.index)
            if self.layout_mode == "fullcanvas":
                rect = full
            else:
                rect = self.slot_rect(ch.index, assets.aspect(ch.index))
            renderer.draw_tinted(surf, image, rect, ch.opacity, self._cache, ch.index)

        if self.show_calibration:
            overlays.draw_calibration(surf, self.geometry)

    def present(self, target: pygame.Surface) -> None:
        """Copy the two visible halves of the buffer onto *target*."""
        g = self.geometry
        target.fill((0, 0, 0))
        target.blit(self.buffer, (0, 0), g.left_source)
        if g.dual:
            target.blit(self.buffer, g.right_dest, g.right_source)
