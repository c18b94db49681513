"""Tests for ascii_globe.earthmap - the built-in Earth textures.

Covers:
- Bitmap lookups for well-known land and ocean coordinates
- Terrain classification (ice caps, coastlines)
- Texture generation: size, palette membership, day/night alignment
- write_textures output files
"""

from __future__ import annotations

import pytest

from ascii_globe.earthmap import (
    DAY_CHARS,
    DEFAULT_TEXTURE_HEIGHT,
    DEFAULT_TEXTURE_WIDTH,
    NIGHT_CHARS,
    TerrainType,
    classify,
    day_texture,
    is_land,
    night_texture,
    texel_latlon,
    write_textures,
)
from ascii_globe.globe import DAY_TEXTURE_NAME, NIGHT_TEXTURE_NAME
from ascii_globe.texture import DEFAULT_PALETTE, load_texture


# ---------------------------------------------------------------------------
# Bitmap lookups
# ---------------------------------------------------------------------------

class TestIsLand:
    @pytest.mark.parametrize(
        "lat, lon",
        [
            (5.0, 25.0),     # Africa
            (40.0, -100.0),  # North America
            (-25.0, 135.0),  # Australia
            (40.0, 80.0),    # Asia
        ],
    )
    def test_land(self, lat: float, lon: float) -> None:
        assert is_land(lat, lon)

    @pytest.mark.parametrize(
        "lat, lon",
        [
            (0.0, -160.0),   # Central Pacific
            (0.0, -30.0),    # Central Atlantic
            (-30.0, 80.0),   # Indian Ocean
        ],
    )
    def test_ocean(self, lat: float, lon: float) -> None:
        assert not is_land(lat, lon)

    def test_longitude_wraps(self) -> None:
        assert is_land(5.0, 25.0 + 360.0) == is_land(5.0, 25.0)


class TestClassify:
    def test_ocean(self) -> None:
        assert classify(0.0, -160.0) is TerrainType.OCEAN

    def test_paris_is_land(self) -> None:
        assert classify(48.8, 2.3) in (TerrainType.LAND, TerrainType.COASTLINE)

    def test_antarctica_is_ice(self) -> None:
        assert classify(-80.0, 0.0) is TerrainType.ICE

    def test_some_coastline_exists(self) -> None:
        found = {
            classify(lat, lon)
            for lat in range(-60, 76, 5)
            for lon in range(-180, 180, 5)
        }
        assert TerrainType.COASTLINE in found


# ---------------------------------------------------------------------------
# Textures
# ---------------------------------------------------------------------------

class TestTextures:
    def test_default_size(self) -> None:
        day = day_texture()
        assert day.width == DEFAULT_TEXTURE_WIDTH
        assert day.height == DEFAULT_TEXTURE_HEIGHT
        assert day.is_rectangular

    def test_day_night_same_shape(self) -> None:
        assert night_texture(40, 20).height == day_texture(40, 20).height
        assert night_texture(40, 20).width == 40

    def test_all_chars_in_palette(self) -> None:
        for grid in (day_texture(), night_texture()):
            for row in grid.rows:
                assert all(ch in DEFAULT_PALETTE for ch in row)

    def test_char_tables_in_palette(self) -> None:
        for chars in (DAY_CHARS, NIGHT_CHARS):
            assert set(chars) == set(TerrainType)
            assert all(ch in DEFAULT_PALETTE for ch in chars.values())

    def test_day_brighter_than_night(self) -> None:
        for terrain in TerrainType:
            assert DEFAULT_PALETTE.index(DAY_CHARS[terrain]) > DEFAULT_PALETTE.index(NIGHT_CHARS[terrain])

    def test_day_and_night_aligned(self) -> None:
        """Ocean texels line up between the two textures."""
        day = day_texture(60, 30)
        night = night_texture(60, 30)
        for d_row, n_row in zip(day.rows, night.rows):
            for d, n in zip(d_row, n_row):
                assert (d == DAY_CHARS[TerrainType.OCEAN]) == (n == NIGHT_CHARS[TerrainType.OCEAN])

    def test_south_pole_is_ice(self) -> None:
        day = day_texture()
        assert DAY_CHARS[TerrainType.ICE] in day.rows[-1]

    def test_cached(self) -> None:
        assert day_texture(30, 15) is day_texture(30, 15)

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError):
            day_texture(0, 10)

    def test_single_texel(self) -> None:
        grid = night_texture(1, 1)
        assert grid.width == 1 and grid.height == 1


class TestTexelLatLon:
    def test_corners(self) -> None:
        assert texel_latlon(0, 0, 10, 5) == (90.0, -180.0)
        assert texel_latlon(9, 4, 10, 5) == (-90.0, 180.0)

    def test_single_texel_is_origin(self) -> None:
        assert texel_latlon(0, 0, 1, 1) == (0.0, 0.0)


# ---------------------------------------------------------------------------
# write_textures
# ---------------------------------------------------------------------------

class TestWriteTextures:
    def test_writes_both_files(self, tmp_path) -> None:
        target = tmp_path / "tex"
        day_path, night_path = write_textures(target, 24, 12)
        assert day_path.endswith(DAY_TEXTURE_NAME)
        assert night_path.endswith(NIGHT_TEXTURE_NAME)
        assert load_texture(day_path) == day_texture(24, 12)
        assert load_texture(night_path) == night_texture(24, 12)

    def test_existing_directory(self, tmp_path) -> None:
        write_textures(tmp_path, 8, 4)
        write_textures(tmp_path, 8, 4)
        assert (tmp_path / DAY_TEXTURE_NAME).read_text(encoding="utf-8").count("\n") == 4
