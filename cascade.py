"""
cascade.py – the simpler "always show state, fade the history" mode.

Raw bits are displayed as-is except that every channel up to and including
the first dark (0) channel is forced dark.  A dark channel sits at
brightness 0; once it lights up again it ramps linearly back to 255 over
`history_fade` ms.  No hold-time filtering happens in this mode.
"""

from __future__ import annotations

from typing import List, Sequence

from channels import ChannelBank
from fade import OPAQUE


def apply_cascade(bits: Sequence[int]) -> List[int]:
    shown = [int(b) for b in bits]
    try:
        first_dark = shown.index(0)
    except ValueError:
        return shown
    for i in range(first_dark + 1):
        shown[i] = 0
    return shown


class CascadeEngine:

    def __init__(self, count: int, history_fade: float, now: float = 0.0):
        self.history_fade = history_fade
        # last time each channel was displayed dark; everything fades in at boot
        self.last_dark = [now] * count

    def brightness(self, index: int, now: float) -> float:
        elapsed = now - self.last_dark[index]
        if elapsed >= self.history_fade:
            return OPAQUE
        return OPAQUE * max(0.0, elapsed) / self.history_fade

    def update(self, bank: ChannelBank, now: float) -> List[int]:
        shown = apply_cascade(bank.raw_bits)
        for ch, bit in zip(bank, shown):
            if bit == 0:
                self.last_dark[ch.index] = now
            ch.visible = bool(bit)
            ch.pending = None
            ch.opacity = self.brightness(ch.index, now)
        return shown
