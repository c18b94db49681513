"""Built-in Earth textures.

Holds a 360x180 one-degree land/ocean bitmap, compressed and base64-encoded
for embedding directly in source code, and turns it into the day and night
character textures the globe samples.  Every generated character is taken
from the default luminance palette.

Texture layout matches the renderer's texture coordinates: row 0 is the
north pole, the last row the south pole, and column 0 is 180W.
"""

from __future__ import annotations

import base64
import enum
import functools
import logging
import os
import zlib
from typing import Tuple

from ascii_globe.globe import DAY_TEXTURE_NAME, NIGHT_TEXTURE_NAME
from ascii_globe.texture import PathLike, TextureGrid

logger = logging.getLogger(__name__)


class TerrainType(enum.Enum):
    """Classification of terrain at a given coordinate."""

    OCEAN = 0
    LAND = 1
    COASTLINE = 2
    ICE = 3


DEFAULT_TEXTURE_WIDTH = 120
DEFAULT_TEXTURE_HEIGHT = 60

# Texel characters per terrain type.  Day values sit high in the palette,
# night values low so the terminator reads clearly.
DAY_CHARS = {
    TerrainType.OCEAN: ":",
    TerrainType.COASTLINE: "o",
    TerrainType.LAND: "X",
    TerrainType.ICE: "@",
}
NIGHT_CHARS = {
    TerrainType.OCEAN: " ",
    TerrainType.COASTLINE: "w",  # coastal city lights
    TerrainType.LAND: ",",
    TerrainType.ICE: ".",
}

# Grid dimensions: 1 degree per cell
_MAP_WIDTH = 360
_MAP_HEIGHT = 180

# Rows go from 90N (row 0) to 89S (row 179).
# Columns go from 180W (col 0) to 179E (col 359).
# Encoding: 1 bit per cell, zlib-compressed, then base64-encoded.
_MAP_DATA_B64 = (
    "eNrt2NFtgzAQANBD98HnbdCM4rX6B1UH6AhdJaO4ygDNJ5WQr5AEbGM7wdikVOI+8hEeKLbPdw4A"
    "eySFYDPkZjAy11vB6L9hEVbWbKDxgHpL2Bqbov5jCserWbDg77wY9VDmYeJITN7xJWCWQkIU7iMK"
    "V9lxc8shH679GNUmcKWEI4tobG+X7JjsjRmFPRswjIsxX30lOwoX9ndPxWohhjG99RpJmIs/HuPG"
    "xFac5FJcWROUE1+z7OjtdNalaEx2SzpcWqYuL1ULSzGaa+Li8rgYg7kmTr1dEU8OEVGYgvhdX1iI"
    "z/AawioFd8mjhhQlXSbXw9SfhBQk4QO3IVyLs4udmhrEIBpwmwYqSMfg7tcLpnRMx8kA+/3bBPFt"
    "f8/B2HoxMqRimPTMyyqr7hnpGG/axC8A3a9bA3cZprx/tlAXUnqISXeKZ2GfjsbDCBPwyfXrYTTa"
    "o4nh8Bg3Q0Hhz9kYSq5xA/h65R4mt+3Mxdh6d+wwux3+UU/AwtMqzD7N/HUfYwAje95gLMaC3zLj"
    "xsXI7FnPpbib55wYrMo44tJ3qErAOncyYDSPa23oVJuIS2OuMmDSO97EhXdRyHw7JdMwp+BQFaL+"
    "3r/H0OeMjYUKFk1aEwuZgO8W+41iGfOefRuY6k3gPf5h8B577LFHZPwC9Tmb3g=="
)

# Decoded once at import time for O(1) indexed lookup.
_map_bytes: bytes = zlib.decompress(base64.b64decode(_MAP_DATA_B64))


def _latlon_to_grid(lat: float, lon: float) -> Tuple[int, int]:
    """Nearest bitmap (row, col) for a coordinate in degrees."""
    lon = ((lon + 180.0) % 360.0) - 180.0
    lat = max(-89.5, min(89.5, lat))

    row = int(round(90.0 - lat))
    col = int(round(lon + 180.0))

    row = max(0, min(_MAP_HEIGHT - 1, row))
    col = max(0, min(_MAP_WIDTH - 1, col))
    return row, col


def _get_bit(row: int, col: int) -> int:
    """1 for land, 0 for ocean."""
    offset = row * _MAP_WIDTH + col
    return (_map_bytes[offset // 8] >> (7 - offset % 8)) & 1


def _is_coastline(row: int, col: int) -> bool:
    """A land cell with at least one 4-connected ocean neighbour."""
    if _get_bit(row, col) == 0:
        return False

    for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
        nr = row + dr
        nc = (col + dc) % _MAP_WIDTH  # longitude wraps
        if 0 <= nr < _MAP_HEIGHT and _get_bit(nr, nc) == 0:
            return True

    return False


def is_land(lat: float, lon: float) -> bool:
    """Whether the coordinate (degrees, longitude wrapping) is land."""
    return _get_bit(*_latlon_to_grid(lat, lon)) == 1


def classify(lat: float, lon: float) -> TerrainType:
    """Terrain at a coordinate in degrees.

    Polar land (south of 60S or north of 75N) counts as ice.
    """
    row, col = _latlon_to_grid(lat, lon)

    if _get_bit(row, col) == 0:
        return TerrainType.OCEAN
    if lat < -60.0 or lat > 75.0:
        return TerrainType.ICE
    if _is_coastline(row, col):
        return TerrainType.COASTLINE
    return TerrainType.LAND


def texel_latlon(col: int, row: int, width: int, height: int) -> Tuple[float, float]:
    """Coordinate sampled by texel (*col*, *row*) of a *width* x *height* texture."""
    lat = 90.0 - 180.0 * row / (height - 1) if height > 1 else 0.0
    lon = -180.0 + 360.0 * col / (width - 1) if width > 1 else 0.0
    return lat, lon


def _build(chars: dict, width: int, height: int) -> TextureGrid:
    if width <= 0 or height <= 0:
        raise ValueError(f"Texture size must be positive, got {width}x{height}")
    rows = []
    for row in range(height):
        line = []
        for col in range(width):
            lat, lon = texel_latlon(col, row, width, height)
            line.append(chars[classify(lat, lon)])
        rows.append("".join(line))
    return TextureGrid.from_lines(rows)


@functools.lru_cache(maxsize=8)
def day_texture(
    width: int = DEFAULT_TEXTURE_WIDTH,
    height: int = DEFAULT_TEXTURE_HEIGHT,
) -> TextureGrid:
    """Daylight Earth: bright land and ice over a dim ocean."""
    return _build(DAY_CHARS, width, height)


@functools.lru_cache(maxsize=8)
def night_texture(
    width: int = DEFAULT_TEXTURE_WIDTH,
    height: int = DEFAULT_TEXTURE_HEIGHT,
) -> TextureGrid:
    """Night Earth: black ocean, faint land, lit coastlines."""
    return _build(NIGHT_CHARS, width, height)


def write_textures(
    directory: PathLike,
    width: int = DEFAULT_TEXTURE_WIDTH,
    height: int = DEFAULT_TEXTURE_HEIGHT,
) -> Tuple[str, str]:
    """Write the built-in textures as ``earth.txt`` / ``earth_night.txt``.

    Args:
        directory: Target directory, created if missing.
        width: Texture columns.
        height: Texture rows.

    Returns:
        The (day, night) file paths.
    """
    os.makedirs(directory, exist_ok=True)
    day_path = os.path.join(os.fspath(directory), DAY_TEXTURE_NAME)
    night_path = os.path.join(os.fspath(directory), NIGHT_TEXTURE_NAME)
    for path, grid in ((day_path, day_texture(width, height)),
                       (night_path, night_texture(width, height))):
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(grid.to_text())
        logger.info("Wrote texture %s (%dx%d)", path, width, height)
    return day_path, night_path
