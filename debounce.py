"""
debounce.py – edge-hold filter turning noisy raw bits into `visible`.

A rising edge must persist `activation_delay` ms before it is believed
(debounce); a falling edge must persist `deactivation_delay` ms (rebounce).
Any sample that re-confirms the current state cancels the opposite pending
edge.  Inputs that flip faster than either hold time never commit.
"""

from __future__ import annotations

import logging

from channels import Channel, ChannelBank, Edge, Pending

log = logging.getLogger("flowerwall.debounce")


class DebounceEngine:

    def __init__(self, activation_delay: float, deactivation_delay: float):
        self.activation_delay   = activation_delay
        self.deactivation_delay = deactivation_delay

    def update(self, channel: Channel, raw_bit: bool, now: float) -> bool:
        """Feed one sample; return True iff `visible` was committed."""
        channel.raw_bit = bool(raw_bit)

        if raw_bit:
            target, edge, delay = True, Edge.RISING, self.activation_delay
        else:
            target, edge, delay = False, Edge.FALLING, self.deactivation_delay

        if channel.visible == target:
            channel.pending = None
            return False

        if channel.pending_edge is not edge:
            channel.pending = Pending(edge, now)
            return False

        if now - channel.pending.since >= delay:
            channel.visible = target
            channel.pending = None
            log.debug("channel %d → %s", channel.index,
                      "visible" if target else "hidden")
            return True

        return False

    def update_all(self, bank: ChannelBank, now: float) -> list[int]:
        """Run every channel on its retained raw bit; return committed indices."""
        return [ch.index for ch in bank if self.update(ch, ch.raw_bit, now)]
