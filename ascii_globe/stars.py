"""Twinkling starfield background.

The host draws stars into its frame before the globe renders on top, so
the sphere covers any star behind it and the empty sky keeps twinkling.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, MutableSequence, Optional

# Roughly one star per STAR_DENSITY cells, never more than MAX_STARS.
STAR_DENSITY = 20
MAX_STARS = 500

# Glyphs by apparent brightness: faint, medium, bright.
UNICODE_STAR_CHARS = ("·", "•", "✦")
ASCII_STAR_CHARS = (".", "*", "+")


@dataclass(frozen=True)
class Star:
    """A single star.

    Attributes:
        x: Column.
        y: Row.
        brightness: Base brightness, 1-5.
        twinkle_speed: Angular speed of the twinkle, 0.1-0.5.
    """

    x: int
    y: int
    brightness: int
    twinkle_speed: float

    def current_brightness(self, elapsed: float) -> int:
        """Brightness level 0-6 at *elapsed* seconds."""
        wave = math.sin(elapsed * self.twinkle_speed * 0.5)
        twinkle = (wave + 1.0) / 2.0 * 1.8
        return int(max(0.0, min(6.0, self.brightness * twinkle)))


def star_char(level: int, ascii_only: bool = False) -> str:
    """Glyph for a brightness *level*.  Levels 1 and below share the faint glyph."""
    chars = ASCII_STAR_CHARS if ascii_only else UNICODE_STAR_CHARS
    if level <= 1:
        return chars[0]
    if level <= 3:
        return chars[1]
    return chars[2]


class NightSky:
    """Randomly scattered stars for a *width* x *height* area.

    Args:
        width: Area columns.
        height: Area rows.
        seed: Optional seed so the layout is reproducible.
        ascii_only: Use ASCII glyphs instead of Unicode.
    """

    def __init__(
        self,
        width: int,
        height: int,
        seed: Optional[int] = None,
        *,
        ascii_only: bool = False,
    ) -> None:
        self._seed = seed
        self.ascii_only = ascii_only
        self.width = 0
        self.height = 0
        self.stars: List[Star] = []
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        """Scatter a fresh set of stars for the new area size."""
        self.width = max(width, 0)
        self.height = max(height, 0)
        rng = random.Random(self._seed)
        count = min(self.width * self.height // STAR_DENSITY, MAX_STARS)
        self.stars = [
            Star(
                x=rng.randrange(self.width),
                y=rng.randrange(self.height),
                brightness=rng.randint(1, 5),
                twinkle_speed=rng.uniform(0.1, 0.5),
            )
            for _ in range(count)
        ]

    def fill(self, canvas: List[MutableSequence[str]], elapsed: float) -> int:
        """Draw the stars visible at *elapsed* seconds into *canvas*.

        Returns:
            The number of cells written.
        """
        written = 0
        for star in self.stars:
            if star.y >= len(canvas) or star.x >= len(canvas[star.y]):
                continue
            canvas[star.y][star.x] = star_char(
                star.current_brightness(elapsed), self.ascii_only
            )
            written += 1
        return written
