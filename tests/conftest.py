"""Shared pytest fixtures for the flower wall tests."""

from __future__ import annotations

import os
import time

# headless SDL before pygame is imported anywhere
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from assets import AssetProvider
from channels import ChannelBank
from config import Settings
from events import EventManager
from sensor_input import Reading

RED   = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE  = (0, 0, 255)


class FakeSerial:
    """Stand-in for ``serial.Serial`` that replays canned lines.

    Once the lines run out ``readline`` behaves like a read timeout and
    returns ``b""`` after a short sleep.
    """

    def __init__(self, lines=()) -> None:
        self.lines: list[bytes] = list(lines)
        self.is_open = True

    def readline(self) -> bytes:
        if self.lines:
            return self.lines.pop(0)
        time.sleep(0.01)
        return b""

    def close(self) -> None:
        self.is_open = False


class ListSource:
    """Input source fed by the test; mirrors the poll/close interface."""

    def __init__(self, readings=()) -> None:
        self.readings = list(readings)
        self.closed = False

    def push(self, line=None, values=None) -> None:
        self.readings.append(Reading(line=line, values=values))

    def poll(self):
        return self.readings.pop(0) if self.readings else None

    def close(self) -> None:
        self.closed = True


def solid(size, colour) -> pygame.Surface:
    surf = pygame.Surface(size, pygame.SRCALPHA)
    surf.fill((*colour, 255))
    return surf


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session", autouse=True)
def _pygame():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture(autouse=True)
def _clean_events():
    EventManager.clear()
    yield
    EventManager.clear()


@pytest.fixture()
def bank() -> ChannelBank:
    return ChannelBank(5)


@pytest.fixture()
def settings() -> Settings:
    return Settings.from_config(fullscreen=False, use_mock_data=True,
                                windowed_size=(800, 200), bezel_width=10)


@pytest.fixture()
def assets() -> AssetProvider:
    """Five tall red images (aspect 0.5), no background."""
    provider = AssetProvider("unused", 5, background=None)
    provider.images = [solid((100, 200), RED) for _ in range(5)]
    return provider


@pytest.fixture()
def fake_serial() -> FakeSerial:
    return FakeSerial()


@pytest.fixture()
def source() -> ListSource:
    return ListSource()
