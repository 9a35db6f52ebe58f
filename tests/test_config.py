"""
Settings: defaults, overrides and rejection of degenerate configuration.
"""

from __future__ import annotations

import pytest

import config
from channels import ChannelBank
from config import Settings
from errors import ConfigError


def test_module_defaults_are_valid():
    s = Settings.from_config()
    assert s.channel_count == config.CHANNEL_COUNT
    assert s.activation_delay == config.ACTIVATION_DELAY
    assert s.bezel_width == config.BEZEL_WIDTH


def test_overrides_apply_and_none_is_ignored():
    s = Settings.from_config(bezel_width=12, mode=None)
    assert s.bezel_width == 12
    assert s.mode == config.MODE


def test_runtime_module_edits_are_picked_up(monkeypatch):
    monkeypatch.setattr(config, "RISE_TAU", 123)
    assert Settings.from_config().rise_tau == 123


def test_unknown_option_rejected():
    with pytest.raises(ConfigError, match="unknown"):
        Settings.from_config(bezel=3)


@pytest.mark.parametrize("overrides", [
    {"channel_count": 0},
    {"channel_count": -2},
    {"channel_count": 2.5},
    {"channel_count": True},
    {"left_width": 0},
    {"left_width": -1920},
    {"right_width": 0},
    {"right_width": -1},
    {"height": 0},
    {"bezel_width": -1},
    {"activation_delay": -1},
    {"deactivation_delay": -0.5},
    {"side_margin": -1},
    {"slot_fill": -0.1},
    {"update_hz": 0},
    {"covered_probability": 1.5},
    {"history_fade": 0},
    {"mode": "sparkle"},
    {"layout_mode": "grid"},
    {"windowed_size": (0, 200)},
])
def test_degenerate_values_rejected(overrides):
    with pytest.raises(ConfigError):
        Settings.from_config(**overrides)


def test_zero_right_width_allowed_for_single_screen():
    s = Settings.from_config(dual_screens=False, right_width=0)
    assert s.right_width == 0


def test_non_positive_taus_are_legal():
    s = Settings.from_config(rise_tau=0, fall_tau=-1)
    assert s.rise_tau == 0


@pytest.mark.parametrize("count", [0, -1])
def test_channel_bank_rejects_bad_count(count):
    with pytest.raises(ConfigError):
        ChannelBank(count)
