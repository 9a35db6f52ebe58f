"""
sensor_input.py

Input sources for the sensor vector and its decoder.

Every update is a vector of 2·N numbers: N analog readings (shown on the
HUD only) followed by N digital bits, each exactly 0 or 1.  On the wire it
is one text line, optionally wrapped in square brackets:

    3,4,5,6,7,1,0,1,1,0
    [512,498,20,1023,7,1,0,1,1,0]

Sources are polled from the frame loop and never block; `poll()` returns
None when nothing new has arrived.
"""

from __future__ import annotations

import logging
import math
import numbers
import queue
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np
import serial

import timing
from errors import MalformedSample, SensorError

log = logging.getLogger("flowerwall.input")


# ── data ───────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Reading:
    """One update event: a raw text line *or* an already numeric vector."""
    line: Optional[str] = None
    values: Optional[Sequence[float]] = None


@dataclass(frozen=True)
class Sample:
    analog: List[float]
    digital: List[int]


# ── decoding ───────────────────────────────────────────────────────────────
def _number(token: str) -> float:
    token = token.strip()
    try:
        value = int(token)
    except ValueError:
        try:
            value = float(token)
        except ValueError:
            raise MalformedSample(f"non-numeric token {token!r}") from None
    return value


def parse_values(values: Sequence, n: int) -> Sample:
    if len(values) != 2 * n:
        raise MalformedSample(f"expected {2 * n} values, got {len(values)}")
    for v in values:
        if not isinstance(v, numbers.Real) or not math.isfinite(v):
            raise MalformedSample(f"non-numeric value {v!r}")
    digital = values[n:]
    for v in digital:
        if v not in (0, 1):
            raise MalformedSample(f"digital value {v!r} not in {{0,1}}")
    return Sample(analog=list(values[:n]), digital=[int(v) for v in digital])


def parse_line(line: str, n: int) -> Sample:
    text = line.strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    if not text:
        raise MalformedSample("empty line")
    return parse_values([_number(tok) for tok in text.split(",")], n)


def decode(reading: Reading, n: int) -> Sample:
    if reading.values is not None:
        return parse_values(reading.values, n)
    if reading.line is not None:
        return parse_line(reading.line, n)
    raise MalformedSample("empty reading")


# ── mock generator ────────────────────────────────────────────────────────
class MockSource:
    """Random Arduino-style vectors at `update_hz`."""

    def __init__(self, n: int, update_hz: float = 1.0,
                 covered_probability: float = 0.45,
                 seed: Optional[int] = None,
                 clock: Callable[[], float] = timing.now_ms):
        self.n     = n
        self.interval = 1000.0 / update_hz
        self.covered_probability = covered_probability
        self.clock = clock
        self._rng  = np.random.default_rng(seed)
        self._next_at = float("-inf")

    def generate(self) -> List[int]:
        analog  = self._rng.integers(0, 1024, self.n)
        digital = (self._rng.random(self.n) < self.covered_probability).astype(int)
        return [int(v) for v in np.concatenate([analog, digital])]

    def poll(self) -> Optional[Reading]:
        now = self.clock()
        if now < self._next_at:
            return None
        self._next_at = now + self.interval
        values = self.generate()
        log.debug("[%s]", ",".join(map(str, values)))
        return Reading(values=values)

    def close(self) -> None:
        pass


# ── serial transport ──────────────────────────────────────────────────────
class SerialSource:
    """
    Reads newline-terminated vectors from the Arduino on a daemon thread.
    A serial failure stops the reader; the display keeps the last state.
    """

    def __init__(self, port: str, baudrate: int = 9600,
                 timeout: float = 1.0, maxsize: int = 64):
        self.port     = port
        self.baudrate = baudrate
        self.timeout  = timeout
        self._q: "queue.Queue[Reading]" = queue.Queue(maxsize=maxsize)
        self._dev: Optional[serial.Serial] = None
        self._thread: Optional[threading.Thread] = None
        self._running = False

    def open(self, start: bool = True) -> "SerialSource":
        try:
            self._dev = serial.Serial(self.port, baudrate=self.baudrate, timeout=self.timeout)
        except serial.SerialException as e:
            raise SensorError(f"Cannot open {self.port}: {e}") from e
        log.info("serial port %s open at %d baud", self.port, self.baudrate)
        if start:
            self._running = True
            self._thread = threading.Thread(target=self._reader, name="serial-reader",
                                            daemon=True)
            self._thread.start()
        return self

    @property
    def is_open(self) -> bool:
        return self._dev is not None and self._dev.is_open

    def read_once(self, dev: Optional[serial.Serial] = None) -> Optional[Reading]:
        """Read one line from the device and queue it; None on timeout/garbage."""
        if dev is None:
            dev = self._dev
        if dev is None:
            return None
        raw = dev.readline()
        if not raw:
            return None
        try:
            line = raw.decode("utf8").strip()
        except UnicodeDecodeError:
            log.warning("undecodable bytes from %s: %r", self.port, raw)
            return None
        if not line:
            return None
        reading = Reading(line=line)
        self._push(reading)
        return reading

    def _reader(self) -> None:
        # close() may drop self._dev while a readline is still blocked
        dev = self._dev
        while self._running:
            try:
                self.read_once(dev)
            except (serial.SerialException, OSError) as e:
                log.error("serial port %s failed: %s – reader stopped", self.port, e)
                break
        self._running = False

    def _push(self, reading: Reading) -> None:
        # keep the newest lines when the frame loop falls behind
        while True:
            try:
                self._q.put_nowait(reading)
                return
            except queue.Full:
                try:
                    self._q.get_nowait()
                except queue.Empty:
                    pass

    def poll(self) -> Optional[Reading]:
        try:
            return self._q.get_nowait()
        except queue.Empty:
            return None

    def close(self) -> None:
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=self.timeout + 0.5)
            self._thread = None
        if self._dev is not None:
            self._dev.close()
            log.info("serial port %s closed", self.port)
            self._dev = None


def make_source(settings):
    """Mock generator or opened serial transport, per settings."""
    if settings.use_mock_data:
        log.info("using mock sensor data (%.2f Hz, p=%.2f)",
                 settings.update_hz, settings.covered_probability)
        return MockSource(settings.channel_count, settings.update_hz,
                          settings.covered_probability)
    return SerialSource(settings.serial_port, settings.serial_baudrate,
                        settings.serial_timeout).open()
