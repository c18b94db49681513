"""Tests for ascii_globe.texture - palette, texture grid, loader.

Covers:
- Palette index/char lookup, clamping and validation
- TextureGrid dimensions, irregular rows, texel bounds
- load_texture reads UTF-8 files one code point per texel
- Unreadable files raise TextureError naming the path
"""

from __future__ import annotations

import pytest

from ascii_globe.texture import (
    DEFAULT_PALETTE,
    DEFAULT_PALETTE_CHARS,
    Palette,
    TextureError,
    TextureGrid,
    load_texture,
)


# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

class TestPalette:
    def test_default_order(self) -> None:
        assert DEFAULT_PALETTE.chars == DEFAULT_PALETTE_CHARS
        assert DEFAULT_PALETTE.dimmest == " "
        assert DEFAULT_PALETTE.brightest == "@"
        assert len(DEFAULT_PALETTE) == 18

    def test_index_of_known_chars(self) -> None:
        assert DEFAULT_PALETTE.index(" ") == 0
        assert DEFAULT_PALETTE.index("@") == 17
        assert DEFAULT_PALETTE.index("w") == 6

    def test_index_of_unknown_char(self) -> None:
        assert DEFAULT_PALETTE.index("#") == -1
        assert "#" not in DEFAULT_PALETTE

    def test_char_clamps(self) -> None:
        p = Palette("abc")
        assert p.char(-5) == "a"
        assert p.char(1) == "b"
        assert p.char(99) == "c"

    def test_empty_palette_rejected(self) -> None:
        with pytest.raises(ValueError):
            Palette("")

    def test_duplicate_chars_rejected(self) -> None:
        with pytest.raises(ValueError, match="distinct"):
            Palette("aba")


# ---------------------------------------------------------------------------
# TextureGrid
# ---------------------------------------------------------------------------

class TestTextureGrid:
    def test_dimensions(self) -> None:
        grid = TextureGrid.from_lines(["abcd", "efgh", "ijkl"])
        assert grid.width == 4
        assert grid.height == 3
        assert grid.is_rectangular

    def test_empty(self) -> None:
        assert TextureGrid().is_empty
        assert TextureGrid().width == 0
        assert TextureGrid.from_lines([""]).is_empty

    def test_width_is_first_row(self) -> None:
        grid = TextureGrid.from_lines(["ab", "abcdef", "a"])
        assert grid.width == 2
        assert not grid.is_rectangular

    def test_texel_lookup(self) -> None:
        grid = TextureGrid.from_lines(["ab", "cd"])
        assert grid.texel(0, 0) == "a"
        assert grid.texel(1, 1) == "d"

    def test_texel_out_of_range(self) -> None:
        grid = TextureGrid.from_lines(["ab", "c"])
        assert grid.texel(1, 1) is None  # short row
        assert grid.texel(-1, 0) is None
        assert grid.texel(0, 2) is None

    def test_from_text_splits_lines(self) -> None:
        grid = TextureGrid.from_text("ab\ncd\n")
        assert grid.rows == ("ab", "cd")

    def test_from_text_crlf(self) -> None:
        grid = TextureGrid.from_text("ab\r\ncd\r\n")
        assert grid.rows == ("ab", "cd")

    def test_to_text(self) -> None:
        grid = TextureGrid.from_lines(["ab", "cd"])
        assert grid.to_text() == "ab\ncd\n"

    def test_frozen(self) -> None:
        grid = TextureGrid.from_lines(["ab"])
        with pytest.raises(AttributeError):
            grid.rows = ()  # type: ignore[misc]


# ---------------------------------------------------------------------------
# load_texture
# ---------------------------------------------------------------------------

class TestLoadTexture:
    def test_loads_rows(self, tmp_path) -> None:
        path = tmp_path / "t.txt"
        path.write_text(" .:\n@@@\n", encoding="utf-8")
        grid = load_texture(path)
        assert grid.rows == (" .:", "@@@")

    def test_unicode_scalar_per_texel(self, tmp_path) -> None:
        path = tmp_path / "t.txt"
        path.write_text("░▒▓\n", encoding="utf-8")
        grid = load_texture(path)
        assert grid.width == 3
        assert grid.texel(2, 0) == "▓"

    def test_irregular_rows_accepted(self, tmp_path) -> None:
        path = tmp_path / "t.txt"
        path.write_text("abc\na\n", encoding="utf-8")
        grid = load_texture(str(path))
        assert grid.height == 2
        assert grid.width == 3

    def test_empty_file_gives_empty_grid(self, tmp_path) -> None:
        path = tmp_path / "t.txt"
        path.write_text("", encoding="utf-8")
        assert load_texture(path).is_empty

    def test_missing_file_raises(self, tmp_path) -> None:
        path = tmp_path / "missing.txt"
        with pytest.raises(TextureError) as excinfo:
            load_texture(path)
        assert excinfo.value.path == path
        assert "missing.txt" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_invalid_utf8_raises(self, tmp_path) -> None:
        path = tmp_path / "bad.txt"
        path.write_bytes(b"\xff\xfe\xfa\n")
        with pytest.raises(TextureError):
            load_texture(path)
