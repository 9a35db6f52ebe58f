# config.py
"""
Configuration settings for the flower wall.

Module-level constants are the defaults; `Settings.from_config()` snapshots
them (plus any command-line overrides) into a validated, frozen object that
the rest of the program reads.
"""
from __future__ import annotations

import numbers
from dataclasses import dataclass, fields
from typing import Optional

from errors import ConfigError

FPS = 60

# ── Basic Application Settings ──────────────────────────────────────────────

# "debounce": hold-time filter + exponential fade (default)
# "cascade":  instant bits, first-dark cascade, slow fade-from-black history
MODE = "debounce"

# "slots": one image per bottom-aligned slot; "fullcanvas": layered full-frame
LAYOUT_MODE = "slots"

CHANNEL_COUNT = 5

ASSET_FOLDER     = "flower-images"
IMAGE_PATTERN    = "Fase{i}.png"
BACKGROUND_IMAGE = "wood.png"

SHOW_HUD = False

# ── Display settings ───────────────────────────────────────────────────────

FULLSCREEN    = True
WINDOWED_SIZE = (1280, 360)

DUAL_SCREENS = True     # span two monitors
LEFT_WIDTH   = 1920     # physical width of LEFT monitor (None: half window)
RIGHT_WIDTH  = 1920     # physical width of RIGHT monitor (None: remainder)
HEIGHT       = 1080
BEZEL_WIDTH  = 60       # hidden gutter for the physical bezel (tune on-site)

# ── Timing (milliseconds) ──────────────────────────────────────────────────

ACTIVATION_DELAY   = 120    # debounce: a 1 must persist this long
DEACTIVATION_DELAY = 150    # rebounce: a 0 must persist this long
RISE_TAU           = 700    # fade-in time constant
FALL_TAU           = 900    # fade-out time constant
HISTORY_FADE       = 10000  # cascade mode: dark → full brightness

# ── Layout ─────────────────────────────────────────────────────────────────

SIDE_MARGIN            = 40
BOTTOM_MARGIN          = 40
SLOT_FILL              = 0.92   # fraction of band width an image may use
TARGET_HEIGHT_FRACTION = 0.9    # fraction of canvas height

# ── Input ──────────────────────────────────────────────────────────────────

USE_MOCK_DATA       = True
SERIAL_PORT         = "/dev/ttyACM0"
SERIAL_BAUDRATE     = 9600
SERIAL_TIMEOUT      = 1.0
UPDATE_HZ           = 1.0    # mock line rate
COVERED_PROBABILITY = 0.45   # mock chance of a 1 per channel

# ── Web remote ─────────────────────────────────────────────────────────────

WEB_REMOTE = False
WEB_PORT   = 8080

_MODES        = ("debounce", "cascade")
_LAYOUT_MODES = ("slots", "fullcanvas")


@dataclass(frozen=True)
class Settings:
    mode: str = MODE
    layout_mode: str = LAYOUT_MODE
    channel_count: int = CHANNEL_COUNT
    asset_folder: str = ASSET_FOLDER
    image_pattern: str = IMAGE_PATTERN
    background_image: str = BACKGROUND_IMAGE
    show_hud: bool = SHOW_HUD
    fps: int = FPS

    fullscreen: bool = FULLSCREEN
    windowed_size: tuple = WINDOWED_SIZE
    dual_screens: bool = DUAL_SCREENS
    left_width: Optional[int] = LEFT_WIDTH
    right_width: Optional[int] = RIGHT_WIDTH
    height: int = HEIGHT
    bezel_width: int = BEZEL_WIDTH

    activation_delay: float = ACTIVATION_DELAY
    deactivation_delay: float = DEACTIVATION_DELAY
    rise_tau: float = RISE_TAU
    fall_tau: float = FALL_TAU
    history_fade: float = HISTORY_FADE

    side_margin: float = SIDE_MARGIN
    bottom_margin: float = BOTTOM_MARGIN
    slot_fill: float = SLOT_FILL
    target_height_fraction: float = TARGET_HEIGHT_FRACTION

    use_mock_data: bool = USE_MOCK_DATA
    serial_port: str = SERIAL_PORT
    serial_baudrate: int = SERIAL_BAUDRATE
    serial_timeout: float = SERIAL_TIMEOUT
    update_hz: float = UPDATE_HZ
    covered_probability: float = COVERED_PROBABILITY

    web_remote: bool = WEB_REMOTE
    web_port: int = WEB_PORT

    def __post_init__(self):
        if (isinstance(self.channel_count, bool)
                or not isinstance(self.channel_count, numbers.Integral)
                or self.channel_count <= 0):
            raise ConfigError(
                f"channel_count must be a positive integer, got {self.channel_count!r}")
        if self.mode not in _MODES:
            raise ConfigError(f"mode must be one of {_MODES}, got {self.mode!r}")
        if self.layout_mode not in _LAYOUT_MODES:
            raise ConfigError(
                f"layout_mode must be one of {_LAYOUT_MODES}, got {self.layout_mode!r}")

        if self.left_width is not None and self.left_width <= 0:
            raise ConfigError(f"left_width must be positive, got {self.left_width}")
        if self.right_width is not None:
            if self.right_width < 0:
                raise ConfigError(f"right_width must be >= 0, got {self.right_width}")
            if self.dual_screens and self.right_width == 0:
                raise ConfigError("right_width must be positive with dual_screens")
        if self.height <= 0:
            raise ConfigError(f"height must be positive, got {self.height}")
        if min(self.windowed_size) <= 0:
            raise ConfigError(f"windowed_size must be positive, got {self.windowed_size}")

        for name in ("bezel_width", "activation_delay", "deactivation_delay",
                     "side_margin", "bottom_margin", "slot_fill",
                     "target_height_fraction"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be >= 0, got {getattr(self, name)}")

        if self.history_fade <= 0:
            raise ConfigError(f"history_fade must be positive, got {self.history_fade}")
        if self.update_hz <= 0:
            raise ConfigError(f"update_hz must be positive, got {self.update_hz}")
        if not 0.0 <= self.covered_probability <= 1.0:
            raise ConfigError(
                f"covered_probability must be in [0, 1], got {self.covered_probability}")
        if self.fps <= 0:
            raise ConfigError(f"fps must be positive, got {self.fps}")

    @classmethod
    def from_config(cls, **overrides) -> "Settings":
        """
        Snapshot the module constants (read at call time, so runtime edits to
        this module are honoured) and apply *overrides*.  None-valued
        overrides are ignored so argparse defaults can be passed straight in.
        """
        module = globals()
        names  = {f.name for f in fields(cls)}
        values = {n: module[n.upper()] for n in names if n.upper() in module}
        unknown = set(overrides) - names
        if unknown:
            raise ConfigError(f"unknown option(s): {', '.join(sorted(unknown))}")
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
