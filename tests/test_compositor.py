"""
Virtual canvas compositor: geometry, rebuilds, rendering and the split blit.
"""

from __future__ import annotations

import pygame
import pytest

from compositor import BufferGeometry, VirtualCanvas, split_widths
from conftest import BLUE, GREEN, RED, solid
from errors import ConfigError
from layout import LayoutParams
from renderer import BACKGROUND_FILL, PLACEHOLDER_FILL, ScaleCache

PARAMS = LayoutParams(side_margin=10, bottom_margin=10, slot_fill=0.9,
                      target_height_fraction=0.8)


@pytest.fixture()
def canvas() -> VirtualCanvas:
    return VirtualCanvas(BufferGeometry(200, 20, 200, 100), 5, PARAMS)


def rgb(surface, pos):
    return tuple(surface.get_at(pos))[:3]


# ══════════════════════════════════════════════════════════════════════════
#  Geometry
# ══════════════════════════════════════════════════════════════════════════


class TestGeometry:

    def test_right_source_starts_after_gutter(self):
        g = BufferGeometry(1920, 60, 1920, 1080)
        assert g.virtual_width == 3900
        assert g.right_source.x == 1980
        assert g.right_source.width == 1920
        assert g.left_source == pygame.Rect(0, 0, 1920, 1080)
        assert g.right_dest == (1920, 0)
        assert g.display_size == (3840, 1080)

    @pytest.mark.parametrize("args", [
        (0, 60, 1920, 1080),
        (-5, 60, 1920, 1080),
        (1920, -1, 1920, 1080),
        (1920, 60, -1, 1080),
        (1920, 60, 1920, 0),
    ])
    def test_degenerate_geometry_rejected(self, args):
        with pytest.raises(ConfigError):
            BufferGeometry(*args)

    def test_single_screen(self):
        g = BufferGeometry(1280, 0, 0, 720)
        assert not g.dual
        assert g.virtual_width == 1280


class TestSplitWidths:

    def test_configured_widths_win(self):
        assert split_widths(3840, 1920, 1920, True) == (1920, 1920)

    def test_derived_from_window(self):
        assert split_widths(1281, None, None, True) == (640, 641)

    def test_single_screen_takes_everything(self):
        assert split_widths(1280, 1920, 1920, False) == (1280, 0)

    def test_non_positive_window_rejected(self):
        with pytest.raises(ConfigError):
            split_widths(0, None, None, True)


# ══════════════════════════════════════════════════════════════════════════
#  Rebuilds and runtime controls
# ══════════════════════════════════════════════════════════════════════════


class TestRebuild:

    def test_buffer_spans_virtual_width(self, canvas):
        assert canvas.buffer.get_size() == (420, 100)
        assert len(canvas.slots) == 5

    def test_bezel_change_rebuilds_buffer_and_layout(self, canvas):
        old_buffer, old_slots = canvas.buffer, canvas.slots
        assert canvas.adjust_bezel(+1) == 21
        g = canvas.geometry
        assert g.left_width + 21 + g.right_width == g.virtual_width == 421
        assert canvas.buffer is not old_buffer
        assert canvas.buffer.get_width() == 421
        assert canvas.slots != old_slots

    def test_bezel_clamped_at_zero(self, canvas):
        canvas.set_bezel(1)
        assert canvas.adjust_bezel(-1) == 0
        assert canvas.adjust_bezel(-1) == 0
        assert canvas.geometry.virtual_width == 400

    def test_unchanged_bezel_keeps_buffer(self, canvas):
        buffer = canvas.buffer
        canvas.set_bezel(20)
        assert canvas.buffer is buffer

    def test_toggle_calibration(self, canvas):
        assert canvas.toggle_calibration()
        assert not canvas.toggle_calibration()


# ══════════════════════════════════════════════════════════════════════════
#  Rendering
# ══════════════════════════════════════════════════════════════════════════


class TestRender:

    def slot_centre(self, canvas, index, aspect=0.5):
        x, y, w, h = canvas.slot_rect(index, aspect)
        return int(x + w / 2), int(y + h / 2)

    def test_missing_background_is_flat_fill(self, canvas, bank, assets):
        canvas.render(bank, assets)
        assert rgb(canvas.buffer, (5, 5)) == BACKGROUND_FILL

    def test_background_covers_buffer(self, canvas, bank, assets):
        assets.background = solid((50, 50), BLUE)
        canvas.render(bank, assets)
        assert rgb(canvas.buffer, (0, 0)) == BLUE
        assert rgb(canvas.buffer, (419, 99)) == BLUE

    def test_visible_channel_drawn_at_slot(self, canvas, bank, assets):
        bank[2].opacity = 255
        canvas.render(bank, assets)
        assert rgb(canvas.buffer, self.slot_centre(canvas, 2)) == RED
        assert rgb(canvas.buffer, self.slot_centre(canvas, 1)) == BACKGROUND_FILL

    def test_opaque_image_keeps_exact_colour_at_odd_scale(self):
        cache = ScaleCache()
        scaled = cache.get(0, solid((100, 200), RED), (29, 58))
        assert scaled.get_size() == (29, 58)
        assert tuple(scaled.get_at((14, 29))) == (*RED, 255)
        assert tuple(scaled.get_at((28, 57))) == (*RED, 255)

    def test_settled_invisible_channel_skipped(self, canvas, bank, assets):
        bank[0].opacity = 0.4
        canvas.render(bank, assets)
        assert rgb(canvas.buffer, self.slot_centre(canvas, 0)) == BACKGROUND_FILL

    def test_partial_opacity_blends(self, canvas, bank, assets):
        bank[0].opacity = 128
        canvas.render(bank, assets)
        r, g, b = rgb(canvas.buffer, self.slot_centre(canvas, 0))
        assert BACKGROUND_FILL[0] < r < 255
        assert g < BACKGROUND_FILL[1]

    def test_missing_image_draws_placeholder(self, canvas, bank, assets):
        assets.images[3] = None
        bank[3].opacity = 255
        canvas.render(bank, assets)
        assert rgb(canvas.buffer, self.slot_centre(canvas, 3, aspect=1.0)) == PLACEHOLDER_FILL

    def test_fullcanvas_mode_stretches_images(self, bank, assets):
        canvas = VirtualCanvas(BufferGeometry(200, 20, 200, 100), 5, PARAMS, "fullcanvas")
        assets.images[4] = solid((10, 10), GREEN)
        bank[0].opacity = 255
        bank[4].opacity = 255
        canvas.render(bank, assets)
        # later channels land on top
        assert rgb(canvas.buffer, (1, 1)) == GREEN
        assert rgb(canvas.buffer, (418, 98)) == GREEN

    def test_calibration_overlay_draws_seams(self, canvas, bank, assets):
        canvas.toggle_calibration()
        canvas.render(bank, assets)
        white = (255, 255, 255)
        for seam in (200, 220):
            assert any(rgb(canvas.buffer, (x, 60)) == white for x in (seam - 1, seam, seam + 1))
        # ticks sit outside the gutter
        assert any(rgb(canvas.buffer, (190, y)) == white for y in (79, 80, 81))
        assert any(rgb(canvas.buffer, (230, y)) == white for y in (79, 80, 81))

    def test_calibration_off_draws_nothing(self, canvas, bank, assets):
        canvas.render(bank, assets)
        assert rgb(canvas.buffer, (200, 60)) == BACKGROUND_FILL


class TestPresent:

    def test_gutter_is_skipped(self, canvas):
        g = canvas.geometry
        canvas.buffer.fill(GREEN, pygame.Rect(0, 0, g.left_width, g.height))
        canvas.buffer.fill(BLUE, pygame.Rect(g.left_width, 0, g.bezel_width, g.height))
        canvas.buffer.fill(RED, g.right_source)

        target = pygame.Surface(g.display_size)
        canvas.present(target)
        assert rgb(target, (199, 50)) == GREEN
        assert rgb(target, (200, 50)) == RED
        assert rgb(target, (399, 50)) == RED
        for x in range(target.get_width()):
            assert rgb(target, (x, 50)) != BLUE

    def test_right_pixels_come_from_offset_source(self, canvas):
        canvas.buffer.set_at((220, 10), BLUE)
        target = pygame.Surface(canvas.geometry.display_size)
        canvas.present(target)
        assert rgb(target, (200, 10)) == BLUE

    def test_single_screen_presents_left_only(self, bank, assets):
        canvas = VirtualCanvas(BufferGeometry(300, 0, 0, 100), 5, PARAMS)
        canvas.buffer.fill(RED)
        target = pygame.Surface((300, 100))
        canvas.present(target)
        assert rgb(target, (299, 99)) == RED
