"""
overlays.py

Pygame overlay renderer for the flower wall: the bezel calibration guide
and the sensor debug HUD.
"""

from __future__ import annotations

import functools

import pygame

# ── colours ────────────────────────────────────────────────────────────────
WHITE = (255, 255, 255)
GREEN = (0, 255, 0)
RED   = (255,  50, 50)
YEL   = (200, 200, 50)
BG    = (0, 0, 0, 180)

SEAM_WIDTH    = 2
TICK_INTERVAL = 40
TICK_LENGTH   = 20

pygame.font.init()


# ── helpers ────────────────────────────────────────────────────────────────
@functools.lru_cache(maxsize=8)
def _font(size: int) -> pygame.font.Font:
    return pygame.font.SysFont("monospace", size)


def _compute_font_sizes(h: int) -> tuple[int, int]:
    return max(12, h // 60), max(16, h // 45)


def _panel(lines: list[str], font: pygame.font.Font, colour=WHITE) -> pygame.Surface:
    widest = max(font.size(t)[0] for t in lines)
    pbg = pygame.Surface(
        (widest + 20, len(lines) * (font.get_linesize() + 2) + 10),
        pygame.SRCALPHA,
    )
    pbg.fill(BG)
    y = 5
    for t in lines:
        pbg.blit(font.render(t, True, colour), (10, y))
        y += font.get_linesize() + 2
    return pbg


def calibration_text(bezel_width: int) -> str:
    return f"Bezel compensation: {bezel_width}px  (+/- to adjust, C to toggle)"


# ── calibration guide ─────────────────────────────────────────────────────
def draw_calibration(surface: pygame.Surface, geometry) -> None:
    """
    Seam lines at both edges of the hidden gutter, outward ticks every
    TICK_INTERVAL px and a bezel-width readout centred above the gutter.
    """
    h      = surface.get_height()
    seam_l = geometry.left_width
    seam_r = geometry.left_width + geometry.bezel_width

    pygame.draw.line(surface, WHITE, (seam_l, 0), (seam_l, h), SEAM_WIDTH)
    pygame.draw.line(surface, WHITE, (seam_r, 0), (seam_r, h), SEAM_WIDTH)
    for y in range(0, h, TICK_INTERVAL):
        pygame.draw.line(surface, WHITE, (seam_l - TICK_LENGTH, y), (seam_l, y), SEAM_WIDTH)
        pygame.draw.line(surface, WHITE, (seam_r, y), (seam_r + TICK_LENGTH, y), SEAM_WIDTH)

    txt = _font(16).render(calibration_text(geometry.bezel_width), True, WHITE)
    surface.blit(txt, ((seam_l + seam_r) // 2 - txt.get_width() // 2, 8))


# ── sensor HUD ─────────────────────────────────────────────────────────────
def hud_lines(bank, settings) -> list[str]:
    analog = ", ".join(f"{v:g}" for v in bank.analog)
    lines = [
        f"Analog:  [{analog}]",
        f"Digital: [{', '.join(str(b) for b in bank.raw_bits)}]",
        f"Visible: [{', '.join('1' if v else '0' for v in bank.visible)}]",
        f"Opacity: [{', '.join(f'{o:3.0f}' for o in bank.opacities)}]",
    ]
    if settings.mode == "cascade":
        lines.append(f"mode=cascade  history={settings.history_fade:g}ms")
    else:
        lines.append(
            f"act={settings.activation_delay:g}ms  deact={settings.deactivation_delay:g}ms"
            f"  rise={settings.rise_tau:g}ms  fall={settings.fall_tau:g}ms"
        )
    return lines


def draw_hud(surface: pygame.Surface, bank, settings, fps: float = 0.0) -> None:
    tiny_pt, small_pt = _compute_font_sizes(surface.get_height())
    lines = hud_lines(bank, settings)
    if fps:
        lines.append(f"{fps:4.1f} fps")
    surface.blit(_panel(lines, _font(tiny_pt)), (10, 10))

    # per-slot state badges along the top edge
    fs = _font(small_pt)
    n  = len(bank)
    for ch in bank:
        colour = GREEN if ch.visible else (YEL if ch.pending else RED)
        badge  = fs.render(f"S{ch.index + 1}", True, colour)
        x = (ch.index + 0.5) * surface.get_width() / n - badge.get_width() / 2
        surface.blit(badge, (round(x), surface.get_height() - badge.get_height() - 4))
