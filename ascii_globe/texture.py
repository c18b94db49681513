"""Character textures and the luminance palette.

A texture is a grid of characters read from a plain UTF-8 text file: each
line is one row and each code point one texel.  The palette orders
characters from dimmest to brightest and is used both to decode a texel
into a luminance index and to encode a blended index back into a
character.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

#: Default luminance alphabet, dimmest first.
DEFAULT_PALETTE_CHARS = " .:;',wiogOLXHWYV@"


class TextureError(Exception):
    """Raised when a texture cannot be loaded or is unusable.

    Attributes:
        path: The offending file or directory, when known.
    """

    def __init__(self, message: str, path: Optional[PathLike] = None) -> None:
        super().__init__(message)
        self.path = path


class Palette:
    """Ordered set of distinct characters from dimmest to brightest.

    The character-to-index table is built once here so that per-pixel
    lookups are a single dict access.

    Args:
        chars: The palette string.  Must be non-empty and contain no
            repeated characters.

    Raises:
        ValueError: If *chars* is empty or has duplicates.
    """

    def __init__(self, chars: str = DEFAULT_PALETTE_CHARS) -> None:
        if not chars:
            raise ValueError("Palette must contain at least one character")
        if len(set(chars)) != len(chars):
            raise ValueError(f"Palette characters must be distinct, got {chars!r}")
        self._chars = chars
        self._lookup: Dict[str, int] = {ch: i for i, ch in enumerate(chars)}

    @property
    def chars(self) -> str:
        return self._chars

    @property
    def brightest(self) -> str:
        return self._chars[-1]

    @property
    def dimmest(self) -> str:
        return self._chars[0]

    def __len__(self) -> int:
        return len(self._chars)

    def __contains__(self, ch: object) -> bool:
        return ch in self._lookup

    def __repr__(self) -> str:
        return f"Palette({self._chars!r})"

    def index(self, ch: str) -> int:
        """Return the luminance index of *ch*, or ``-1`` if not in the palette."""
        return self._lookup.get(ch, -1)

    def char(self, index: int) -> str:
        """Return the character at *index*, clamped into the valid range."""
        return self._chars[min(max(index, 0), len(self._chars) - 1)]


DEFAULT_PALETTE = Palette()


@dataclass(frozen=True)
class TextureGrid:
    """Immutable grid of texel characters.

    Rows may differ in length; :attr:`width` is the length of the first
    row and :meth:`texel` reports ``None`` for anything outside a row.

    Attributes:
        rows: The texture scanlines, top row first.
    """

    rows: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "TextureGrid":
        return cls(tuple(lines))

    @classmethod
    def from_text(cls, text: str) -> "TextureGrid":
        """Split *text* on line boundaries, one row per line."""
        return cls(tuple(text.splitlines()))

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def is_empty(self) -> bool:
        """True when the grid has no rows or its first row is empty."""
        return self.width == 0

    @property
    def is_rectangular(self) -> bool:
        width = self.width
        return all(len(row) == width for row in self.rows)

    def texel(self, col: int, row: int) -> Optional[str]:
        """Return the character at (*col*, *row*), or ``None`` if absent."""
        if row < 0 or row >= len(self.rows):
            return None
        line = self.rows[row]
        if col < 0 or col >= len(line):
            return None
        return line[col]

    def to_text(self) -> str:
        """Serialize back to newline-delimited text (trailing newline)."""
        return "".join(row + "\n" for row in self.rows)


def load_texture(path: PathLike) -> TextureGrid:
    """Read a texture file.

    Args:
        path: Path to a UTF-8 text file.

    Returns:
        The loaded :class:`TextureGrid`.  Rectangularity is not checked.

    Raises:
        TextureError: If the file cannot be read or decoded.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise TextureError(f"Error loading texture: {os.fspath(path)}: {exc}", path) from exc

    grid = TextureGrid.from_text(text)
    logger.info("Loaded texture %s (%dx%d)", os.fspath(path), grid.width, grid.height)
    if not grid.is_rectangular:
        logger.debug("Texture %s has irregular row lengths", os.fspath(path))
    return grid
