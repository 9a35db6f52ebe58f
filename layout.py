"""
layout.py

Slot geometry for the channel images.  The usable width (canvas minus two
side margins) is cut into `channel_count` equal bands; each image is
bottom-aligned on a common baseline and centred in its band.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

Rect = Tuple[float, float, float, float]          # x, y, w, h


@dataclass(frozen=True)
class LayoutParams:
    side_margin: float = 40
    bottom_margin: float = 40
    slot_fill: float = 0.92
    target_height_fraction: float = 0.9

    @classmethod
    def from_settings(cls, settings) -> "LayoutParams":
        return cls(settings.side_margin, settings.bottom_margin,
                   settings.slot_fill, settings.target_height_fraction)


@dataclass(frozen=True)
class Slot:
    center: float
    max_width: float
    target_height: float
    baseline: float


def compute(virtual_width: float,
            virtual_height: float,
            channel_count: int,
            params: LayoutParams = LayoutParams()) -> List[Slot]:
    usable   = max(1.0, virtual_width - 2 * params.side_margin)
    band     = usable / channel_count
    max_w    = band * params.slot_fill
    target_h = virtual_height * params.target_height_fraction
    baseline = virtual_height - params.bottom_margin
    return [
        Slot(params.side_margin + (i + 0.5) * band, max_w, target_h, baseline)
        for i in range(channel_count)
    ]


def fit(slot: Slot, aspect: float) -> Rect:
    """
    Size an image of *aspect* (w / h) into *slot*: full target height unless
    that makes it wider than the slot, then clamp the width instead.
    """
    h = slot.target_height
    w = h * aspect
    if w > slot.max_width:
        w = slot.max_width
        h = w / aspect
    return slot.center - w / 2, slot.baseline - h, w, h


def fit_cover(canvas: Tuple[float, float], image: Tuple[float, float]) -> Rect:
    """Scale *image* to cover *canvas* completely, centred (may crop)."""
    cw, ch = canvas
    iw, ih = image
    canvas_ar, image_ar = cw / ch, iw / ih
    if image_ar > canvas_ar:                 # wider – fit height
        h = ch
        w = image_ar * h
        return (cw - w) / 2, 0.0, w, h
    w = cw                                   # taller – fit width
    h = w / image_ar
    return 0.0, (ch - h) / 2, w, h


class LayoutEngine:
    """`compute()` with a one-entry cache; recompute only on new dimensions."""

    def __init__(self, params: LayoutParams = LayoutParams()):
        self.params = params
        self._key: Optional[tuple] = None
        self._slots: List[Slot] = []

    def compute(self, virtual_width: float, virtual_height: float,
                channel_count: int) -> List[Slot]:
        key = (virtual_width, virtual_height, channel_count, self.params)
        if key != self._key:
            self._slots = compute(virtual_width, virtual_height, channel_count, self.params)
            self._key   = key
        return self._slots

    @property
    def slots(self) -> List[Slot]:
        return self._slots
