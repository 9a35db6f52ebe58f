"""
assets.py – per-channel images and the background, loaded once at startup.

A file that fails to load leaves its slot as None; the compositor draws a
placeholder there instead of failing the frame.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

import pygame

log = logging.getLogger("flowerwall.assets")


def _load(path: str) -> Optional[pygame.Surface]:
    try:
        img = pygame.image.load(path)
    except (pygame.error, FileNotFoundError) as e:
        log.warning("failed to load %s (%s)", path, e)
        return None
    # convert only once a display exists (headless tools and tests have none)
    if pygame.display.get_init() and pygame.display.get_surface() is not None:
        img = img.convert_alpha()
    log.info("loaded %s", path)
    return img


class AssetProvider:

    def __init__(self, folder: str, count: int,
                 image_pattern: str = "Fase{i}.png",
                 background: Optional[str] = "wood.png"):
        self.folder          = folder
        self.count           = count
        self.image_pattern   = image_pattern
        self.background_name = background
        self.images: List[Optional[pygame.Surface]] = [None] * count
        self.background: Optional[pygame.Surface]   = None

    @classmethod
    def from_settings(cls, settings) -> "AssetProvider":
        return cls(settings.asset_folder, settings.channel_count,
                   settings.image_pattern, settings.background_image)

    def load(self) -> "AssetProvider":
        for i in range(self.count):
            self.images[i] = _load(os.path.join(self.folder, self.image_pattern.format(i=i)))
        if self.background_name:
            self.background = _load(os.path.join(self.folder, self.background_name))
        missing = sum(img is None for img in self.images)
        if missing:
            log.warning("%d of %d channel images missing – placeholders will be drawn",
                        missing, self.count)
        return self

    def image(self, index: int) -> Optional[pygame.Surface]:
        return self.images[index]

    def aspect(self, index: int) -> float:
        """Width / height of channel *index*; 1.0 (square) when missing."""
        img = self.images[index]
        if img is None or img.get_height() == 0:
            return 1.0
        return img.get_width() / img.get_height()
