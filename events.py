#!/usr/bin/env python3
"""
events.py  – central hub

• Translates raw Pygame events to high-level action dicts.
• Exposes a thread-safe queue so *any* external source can inject
  the same actions (web remote, GPIO buttons, tests).

Actions
-------
{"type": "quit"}
{"type": "toggle_calibration"}
{"type": "adjust_bezel", "delta": ±1}
{"type": "toggle_hud"}
{"type": "toggle_fullscreen"}
{"type": "resize", "size": (w, h)}
"""

from __future__ import annotations
import queue
from pygame.locals import *

Action = dict      # alias for readability

_INCREASE = (K_PLUS, K_EQUALS, K_KP_PLUS)
_DECREASE = (K_MINUS, K_UNDERSCORE, K_KP_MINUS)


class EventManager:
    _fifo: "queue.Queue[Action]" = queue.Queue()      # global, thread-safe

    # ── SDL / keyboard path ────────────────────────────────────────────
    @classmethod
    def handle(cls, event) -> None:
        """Translate one Pygame event → action and enqueue it."""
        act = cls._translate_pygame(event)
        if act:
            cls._fifo.put(act)

    # ── external / programmatic path ───────────────────────────────────
    @classmethod
    def post(cls, action: Action) -> None:
        """
        Any thread may call this to inject an already-formed action dict, e.g.:
            EventManager.post({"type": "adjust_bezel", "delta": -1})
        """
        cls._fifo.put(action)

    # ── main-loop consumer ─────────────────────────────────────────────
    @classmethod
    def poll(cls) -> Action | None:
        """Return next queued action or None (non-blocking)."""
        try:
            return cls._fifo.get_nowait()
        except queue.Empty:
            return None

    @classmethod
    def clear(cls) -> None:
        while cls.poll() is not None:
            pass

    # ── internal translator ───────────────────────────────────────────
    @staticmethod
    def _translate_pygame(event) -> Action | None:
        if event.type == QUIT:
            return {"type": "quit"}

        if event.type == VIDEORESIZE:
            return {"type": "resize", "size": tuple(event.size)}

        if event.type == KEYDOWN:
            if event.key in (K_ESCAPE, K_q):
                return {"type": "quit"}
            if event.key == K_c:
                return {"type": "toggle_calibration"}
            if event.key in _INCREASE:
                return {"type": "adjust_bezel", "delta": +1}
            if event.key in _DECREASE:
                return {"type": "adjust_bezel", "delta": -1}
            if event.key == K_h:
                return {"type": "toggle_hud"}
            if event.key == K_f:
                return {"type": "toggle_fullscreen"}

        return None
