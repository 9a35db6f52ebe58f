import pygame

from layout import fit_cover

BACKGROUND_FILL  = (40, 40, 40)
PLACEHOLDER_FILL = (60, 60, 60)


class ScaleCache:
    """Scaled copies of source images keyed by (key, size)."""

    def __init__(self):
        self._cache: dict = {}

    def get(self, key, image: pygame.Surface, size: tuple[int, int]) -> pygame.Surface:
        size = (max(1, size[0]), max(1, size[1]))
        hit = self._cache.get((key, size))
        if hit is None:
            hit = self._cache[(key, size)] = pygame.transform.scale(image, size)
        return hit

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


def _int_rect(rect) -> pygame.Rect:
    x, y, w, h = rect
    return pygame.Rect(round(x), round(y), round(w), round(h))


def draw_background(surface: pygame.Surface, image, cache: ScaleCache) -> None:
    """
    Cover-fit *image* onto `surface`, or fill flat grey when it is missing.
    """
    if image is None:
        surface.fill(BACKGROUND_FILL)
        return
    r = _int_rect(fit_cover(surface.get_size(), image.get_size()))
    surface.fill((0, 0, 0))
    surface.blit(cache.get("background", image, r.size), r.topleft)


def draw_tinted(surface: pygame.Surface, image, rect, alpha: float,
                cache: ScaleCache, key) -> pygame.Rect:
    """
    Blit *image* scaled into *rect* with uniform opacity *alpha* (0–255).
    A missing image draws a flat placeholder rectangle in its place.
    """
    r = _int_rect(rect)
    a = int(max(0, min(255, round(alpha))))
    if image is None:
        box = pygame.Surface((max(1, r.width), max(1, r.height)), pygame.SRCALPHA)
        box.fill((*PLACEHOLDER_FILL, a))
        surface.blit(box, r.topleft)
        return r
    scaled = cache.get(key, image, r.size)
    scaled.set_alpha(a)
    surface.blit(scaled, r.topleft)
    return r
