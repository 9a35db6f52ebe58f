"""
channels.py

Per-sensor channel state and the fixed-size bank that owns it.

Each channel carries
  * `raw_bit`  – last sampled digital input,
  * `visible`  – debounced output state,
  * `pending`  – the transition currently being timed (or None),
  * `opacity`  – animated intensity in [0, 255].

The bank is created once at startup; its length never changes.
"""

from __future__ import annotations

import enum
import numbers
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence

from errors import ConfigError


class Edge(enum.Enum):
    NONE    = "none"
    RISING  = "rising"
    FALLING = "falling"


class Pending(NamedTuple):
    """A transition being timed; `since` only exists while pending."""
    edge: Edge
    since: float


# ── Data structures ─────────────────────────────────────────────────────────
@dataclass
class Channel:
    index: int
    raw_bit: bool = False
    visible: bool = False
    pending: Optional[Pending] = None
    opacity: float = 0.0

    @property
    def pending_edge(self) -> Edge:
        return self.pending.edge if self.pending else Edge.NONE

    @property
    def pending_since(self) -> Optional[float]:
        return self.pending.since if self.pending else None


@dataclass
class ChannelBank:
    """Fixed, ordered set of channels plus the latest analog readings."""

    count: int
    channels: List[Channel] = field(init=False)
    analog: List[float] = field(init=False)

    def __post_init__(self) -> None:
        if (isinstance(self.count, bool)
                or not isinstance(self.count, numbers.Integral)
                or self.count <= 0):
            raise ConfigError(f"channel count must be a positive integer, got {self.count!r}")
        self.channels = [Channel(i) for i in range(self.count)]
        self.analog   = [0.0] * self.count

    def __len__(self) -> int:
        return self.count

    def __iter__(self):
        return iter(self.channels)

    def __getitem__(self, index: int) -> Channel:
        return self.channels[index]

    # ---------------------------------------------------------------- input
    def ingest(self, sample) -> None:
        """
        Store a decoded sample's digital bits as raw bits and keep its analog
        half for display.  *sample* must already be validated.
        """
        self.set_raw(sample.digital)
        self.analog = list(sample.analog)

    def set_raw(self, bits: Sequence[int]) -> None:
        if len(bits) != self.count:
            raise ValueError(f"expected {self.count} bits, got {len(bits)}")
        for ch, bit in zip(self.channels, bits):
            ch.raw_bit = bool(bit)

    # ---------------------------------------------------------------- views
    @property
    def raw_bits(self) -> List[int]:
        return [int(ch.raw_bit) for ch in self.channels]

    @property
    def visible(self) -> List[bool]:
        return [ch.visible for ch in self.channels]

    @property
    def opacities(self) -> List[float]:
        return [ch.opacity for ch in self.channels]

    def snapshot(self) -> list[dict]:
        """JSON-friendly per-channel status (web remote / debugging)."""
        return [
            {
                "index":   ch.index,
                "raw":     int(ch.raw_bit),
                "visible": ch.visible,
                "pending": ch.pending_edge.value,
                "opacity": round(ch.opacity, 1),
                "analog":  self.analog[ch.index],
            }
            for ch in self.channels
        ]
