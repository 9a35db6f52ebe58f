# =========  timing.py  =========
"""
Monotonic millisecond clock used for debounce timestamps and mock pacing.
"""

import time

_EPOCH = time.monotonic()          # single constant


def now_ms() -> float:
    """
    Milliseconds elapsed since the module was imported (monotonic, never
    jumps with wall-clock adjustments).
    """
    return (time.monotonic() - _EPOCH) * 1000.0
