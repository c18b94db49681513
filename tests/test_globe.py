"""Tests for ascii_globe.globe - GlobeState construction and rendering.

Covers:
- wrap_angle keeps every input in [0, 2*pi)
- Construction rejects empty textures
- from_directory loading and error paths
- Settings round trip through GlobeSettings
- render_frame / render on the end-to-end 10x10 scenario
"""

from __future__ import annotations

import math

import pytest

from ascii_globe.camera import Camera
from ascii_globe.config import GlobeSettings
from ascii_globe.globe import (
    CAMERA_DISTANCE,
    DAY_TEXTURE_NAME,
    NIGHT_TEXTURE_NAME,
    TWO_PI,
    GlobeState,
    wrap_angle,
)
from ascii_globe.texture import TextureError, TextureGrid


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _solid(ch: str, width: int = 4, height: int = 4) -> TextureGrid:
    return TextureGrid.from_lines([ch * width] * height)


def _globe(**kwargs) -> GlobeState:
    return GlobeState(_solid("@"), _solid(" "), **kwargs)


def _write_textures(directory, day: str = "@@@@\n@@@@\n", night: str = "    \n    \n") -> None:
    (directory / DAY_TEXTURE_NAME).write_text(day, encoding="utf-8")
    (directory / NIGHT_TEXTURE_NAME).write_text(night, encoding="utf-8")


# ---------------------------------------------------------------------------
# wrap_angle
# ---------------------------------------------------------------------------

class TestWrapAngle:
    @pytest.mark.parametrize(
        "angle",
        [0.0, 1.0, TWO_PI, 3 * TWO_PI + 0.25, -0.25, -1e-18, -TWO_PI, 1e12, -1e12],
    )
    def test_always_in_range(self, angle: float) -> None:
        wrapped = wrap_angle(angle)
        assert 0.0 <= wrapped < TWO_PI

    def test_identity_inside_range(self) -> None:
        assert wrap_angle(1.5) == 1.5

    def test_negative_wraps_up(self) -> None:
        assert wrap_angle(-0.5) == pytest.approx(TWO_PI - 0.5)

    def test_full_turn_is_zero(self) -> None:
        assert wrap_angle(TWO_PI) == pytest.approx(0.0)

    @pytest.mark.parametrize("angle", [math.inf, -math.inf, math.nan, 1.7e308, -1.7e308])
    def test_extreme_inputs_in_range(self, angle: float) -> None:
        wrapped = wrap_angle(angle)
        assert 0.0 <= wrapped < TWO_PI

    def test_non_finite_is_zero(self) -> None:
        assert wrap_angle(math.inf) == 0.0
        assert wrap_angle(math.nan) == 0.0


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_defaults(self) -> None:
        g = _globe()
        assert g.angle_offset == 0.0
        assert g.scale == 1.0
        assert g.speed == 1.0
        assert g.tilt == 23.5
        assert g.lighting is True

    def test_default_camera_distance(self) -> None:
        g = _globe()
        assert g.camera.eye[0] == pytest.approx(CAMERA_DISTANCE)

    def test_custom_camera(self) -> None:
        cam = Camera(3.0)
        assert _globe(camera=cam).camera is cam

    def test_empty_day_rejected(self) -> None:
        with pytest.raises(TextureError, match="Day"):
            GlobeState(TextureGrid(), _solid(" "))

    def test_empty_night_rejected(self) -> None:
        with pytest.raises(TextureError, match="Night"):
            GlobeState(_solid("@"), TextureGrid())

    def test_builtin(self) -> None:
        g = GlobeState.builtin(lighting=False)
        assert not g.day.is_empty
        assert g.day.width == g.night.width
        assert g.lighting is False


class TestFromDirectory:
    def test_loads_both_textures(self, tmp_path) -> None:
        _write_textures(tmp_path)
        g = GlobeState.from_directory(tmp_path, scale=2.0)
        assert g.day.rows == ("@@@@", "@@@@")
        assert g.night.rows == ("    ", "    ")
        assert g.scale == 2.0

    def test_accepts_str_path(self, tmp_path) -> None:
        _write_textures(tmp_path)
        assert GlobeState.from_directory(str(tmp_path)).day.height == 2

    def test_missing_night_texture(self, tmp_path) -> None:
        (tmp_path / DAY_TEXTURE_NAME).write_text("@@\n", encoding="utf-8")
        with pytest.raises(TextureError) as excinfo:
            GlobeState.from_directory(tmp_path)
        assert NIGHT_TEXTURE_NAME in str(excinfo.value.path)

    def test_missing_directory(self, tmp_path) -> None:
        with pytest.raises(TextureError):
            GlobeState.from_directory(tmp_path / "nope")

    def test_empty_file(self, tmp_path) -> None:
        _write_textures(tmp_path, day="")
        with pytest.raises(TextureError, match="empty") as excinfo:
            GlobeState.from_directory(tmp_path)
        assert DAY_TEXTURE_NAME in str(excinfo.value.path)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestSettings:
    def test_apply_settings(self) -> None:
        g = _globe()
        g.apply_settings(GlobeSettings(scale=0.5, speed=-2.0, tilt=0.0, lighting=False))
        assert (g.scale, g.speed, g.tilt, g.lighting) == (0.5, -2.0, 0.0, False)

    def test_settings_round_trip(self) -> None:
        g = _globe(scale=1.3, speed=0.5, tilt=10.0, lighting=False)
        s = g.settings(texture_path="/tmp/tex")
        assert s == GlobeSettings(
            scale=1.3, speed=0.5, tilt=10.0, lighting=False, texture_path="/tmp/tex",
        )

    def test_apply_settings_keeps_offset(self) -> None:
        g = _globe()
        g.update(0.1)
        offset = g.angle_offset
        g.apply_settings(GlobeSettings())
        assert g.angle_offset == offset


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRender:
    def test_end_to_end_scenario(self) -> None:
        g = _globe(lighting=False)
        canvas = [["."] * 10 for _ in range(10)]
        written = g.render_frame(canvas, 10, 10)
        assert written > 0
        for row, col in ((4, 4), (4, 5), (5, 4), (5, 5)):
            assert canvas[row][col] == "@"
        for row, col in ((0, 0), (0, 9), (9, 0), (9, 9)):
            assert canvas[row][col] == "."

    def test_render_allocates_grid(self) -> None:
        grid = _globe(lighting=False).render(12, 8, fill="#")
        assert len(grid) == 8
        assert all(len(row) == 12 for row in grid)
        assert grid[0][0] == "#"
        assert grid[4][6] == "@"

    def test_render_twice_identical(self) -> None:
        g = GlobeState.builtin(lighting=True)
        g.update(0.37)
        assert g.render(40, 20) == g.render(40, 20)

    def test_update_changes_frame(self) -> None:
        g = GlobeState.builtin(lighting=False, tilt=0.0)
        before = g.render(40, 20)
        g.update(0.45)
        assert g.render(40, 20) != before

    def test_render_zero_size(self) -> None:
        assert _globe().render(0, 0) == []

    def test_overflowing_update_stays_wrapped(self) -> None:
        g = _globe(speed=1e308)
        g.update(1.0)
        assert 0.0 <= g.angle_offset < TWO_PI
        g.update(-1.0)
        assert 0.0 <= g.angle_offset < TWO_PI

    @pytest.mark.parametrize("setting", [{"tilt": math.inf}, {"scale": math.inf}, {"scale": math.nan}])
    def test_non_finite_settings_render_blank(self, setting) -> None:
        grid = _globe(**setting).render(10, 10, fill="#")
        assert grid == [["#"] * 10 for _ in range(10)]

    def test_offset_stays_wrapped(self) -> None:
        g = _globe(speed=1000.0)
        for _ in range(50):
            g.update(math.e)
            assert 0.0 <= g.angle_offset < TWO_PI
