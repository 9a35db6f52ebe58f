"""
fade.py – exponential-approach animator for channel opacity.
"""

from __future__ import annotations

import math

from channels import Channel, ChannelBank

OPAQUE = 255.0
CLEAR  = 0.0

# opacities this close to their target count as settled / invisible
SETTLED_EPSILON = 0.5


def approach_exp(current: float, target: float, dt_ms: float, tau_ms: float) -> float:
    """
    Single-pole low-pass step.  `k` is recomputed from *dt_ms* each call so
    the decay is frame-rate independent; tau <= 0 snaps to *target*.
    """
    if tau_ms <= 0:
        return target
    k = math.exp(-dt_ms / tau_ms)
    return target + (current - target) * k


def is_settled(opacity: float, target: float) -> bool:
    return abs(opacity - target) <= SETTLED_EPSILON


class FadeAnimator:

    def __init__(self, rise_tau: float, fall_tau: float):
        self.rise_tau = rise_tau
        self.fall_tau = fall_tau

    def step(self, channel: Channel, dt_ms: float) -> float:
        target = OPAQUE if channel.visible else CLEAR
        tau    = self.rise_tau if target > channel.opacity else self.fall_tau
        channel.opacity = approach_exp(channel.opacity, target, dt_ms, tau)
        return channel.opacity

    def step_all(self, bank: ChannelBank, dt_ms: float) -> None:
        for ch in bank:
            self.step(ch, dt_ms)
