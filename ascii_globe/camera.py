"""Orbit camera and the per-pixel sphere rasterizer.

The camera sits on a sphere of radius ``radius`` around the origin at the
given azimuth/elevation and looks at the origin.  Its 4x4 basis matrix is
written down directly from the trigonometric values of the two angles, so
transforming a camera-space ray ``(sx, sy, -1)`` and subtracting the eye
yields the world-space ray without a separate look-at step.

For each character cell :meth:`Camera.render_sphere` casts one ray,
solves the ray-sphere intersection analytically, lights the hit point,
maps it to (theta, phi) texture coordinates and blends the day and night
texels through the luminance palette.  Cells whose ray misses the sphere,
or whose texels are not palette characters, are left untouched.
"""

from __future__ import annotations

import math
from typing import List, MutableSequence, Optional

from ascii_globe.texture import DEFAULT_PALETTE, Palette, TextureGrid
from ascii_globe.vecmath import (
    Mat4,
    Vec3,
    clamp,
    clamp_int,
    dot,
    normalize,
    rotation_x,
    subtract,
    transform_affine,
    transform_linear,
)

# Horizontal stretch of screen x, compensating for character cells being
# taller than wide.
DEFAULT_FOV_STRETCH = 1.2

# A point far along +Y, close enough to a directional light.
DEFAULT_LIGHT: Vec3 = (0.0, 999999.0, 0.0)

# Lighting remap: luminance = clamp(SHARPNESS * (n . l) + BIAS, 0, 1).
# The steep slope keeps the day/night terminator a narrow band.
TERMINATOR_SHARPNESS = 5.0
TERMINATOR_BIAS = 0.5

Canvas = List[MutableSequence[str]]


def basis_matrix(radius: float, azimuth: float, elevation: float) -> Mat4:
    """Return the camera basis for an eye orbiting at *radius*.

    Rows 0-2 hold the right, up and backward axes in world space and row 3
    the eye position.
    """
    a = math.sin(azimuth)
    b = math.cos(azimuth)
    c = math.sin(elevation)
    d = math.cos(elevation)
    x, y, z = eye_position(radius, azimuth, elevation)
    return (
        -a, b, 0.0, 0.0,
        b * c, a * c, -d, 0.0,
        b * d, a * d, c, 0.0,
        x, y, z, 1.0,
    )


def eye_position(radius: float, azimuth: float, elevation: float) -> Vec3:
    """Spherical to Cartesian conversion of the camera position."""
    cos_el = math.cos(elevation)
    return (
        radius * math.cos(azimuth) * cos_el,
        radius * math.sin(azimuth) * cos_el,
        radius * math.sin(elevation),
    )


def blend_index(lum: float, day_idx: int, night_idx: int, max_index: int) -> int:
    """Mix two palette indices by luminance, rounding half up.

    ``lum`` 1 gives *day_idx* and 0 gives *night_idx*; the result is
    clamped into ``[0, max_index]``.
    """
    blended = (1.0 - lum) * night_idx + lum * day_idx
    return clamp_int(int(math.floor(blended + 0.5)), 0, max_index)


class Camera:
    """Fixed orbit camera rendering a textured sphere centred at the origin.

    Attributes:
        eye: World-space eye position.
        matrix: Row-major 4x4 basis (see :func:`basis_matrix`).
        fov_stretch: Horizontal field-of-view multiplier.
        light: World-space light position.
    """

    def __init__(
        self,
        radius: float,
        azimuth: float = 0.0,
        elevation: float = 0.0,
        *,
        fov_stretch: float = DEFAULT_FOV_STRETCH,
        light: Vec3 = DEFAULT_LIGHT,
    ) -> None:
        self.eye: Vec3 = eye_position(radius, azimuth, elevation)
        self.matrix: Mat4 = basis_matrix(radius, azimuth, elevation)
        self.fov_stretch = fov_stretch
        self.light = light

    def __repr__(self) -> str:
        return f"Camera(eye={self.eye!r}, fov_stretch={self.fov_stretch!r})"

    # -- Ray generation --------------------------------------------------------

    def screen_coords(self, col: int, row: int, width: int, height: int) -> tuple[float, float]:
        """Map a cell to camera-space screen coordinates.

        Both axes run over roughly [-1, 1] with a half-cell offset; x is
        flipped and stretched by :attr:`fov_stretch`.
        """
        half_w = width / 2.0
        half_h = height / 2.0
        sx = -((col - half_w) + 0.5) / half_w * self.fov_stretch
        sy = ((row - half_h) + 0.5) / half_h
        return sx, sy

    def ray_direction(self, col: int, row: int, width: int, height: int) -> Vec3:
        """World-space unit direction of the ray through cell (*col*, *row*)."""
        sx, sy = self.screen_coords(col, row, width, height)
        world = transform_affine((sx, sy, -1.0), self.matrix)
        return normalize(subtract(world, self.eye))

    # -- Intersection ----------------------------------------------------------

    def discriminant(self, direction: Vec3, radius: float) -> float:
        """Quadratic discriminant of the ray from the eye along *direction*.

        Negative means the line misses the sphere of *radius*.
        """
        u_dot_o = dot(direction, self.eye)
        return u_dot_o * u_dot_o - dot(self.eye, self.eye) + radius * radius

    def intersect(self, direction: Vec3, radius: float) -> Optional[Vec3]:
        """Return the near intersection with the sphere, or ``None`` on a miss.

        The eye is outside the sphere, so the near root is always the
        visible surface.
        """
        disc = self.discriminant(direction, radius)
        if disc < 0.0:
            return None
        o = self.eye
        # Near root.
        t = -math.sqrt(disc) - dot(direction, o)
        return (o[0] + t * direction[0], o[1] + t * direction[1], o[2] + t * direction[2])

    # -- Shading ---------------------------------------------------------------

    def luminance(self, point: Vec3, lighting: bool) -> float:
        """Day weight in [0, 1] for a surface point of a sphere at the origin."""
        if not lighting:
            return 1.0
        n = normalize(point)
        l = normalize(subtract(self.light, point))
        return clamp(TERMINATOR_SHARPNESS * dot(n, l) + TERMINATOR_BIAS, 0.0, 1.0)

    # -- Rendering -------------------------------------------------------------

    def render_sphere(
        self,
        canvas: Canvas,
        radius: float,
        angle_offset: float,
        day: TextureGrid,
        night: TextureGrid,
        scale: float,
        tilt: float,
        lighting: bool,
        width: int,
        height: int,
        palette: Palette = DEFAULT_PALETTE,
    ) -> int:
        """Rasterize the textured sphere into *canvas*.

        Args:
            canvas: Caller-owned rows of characters, at least *height* x
                *width*.  Only cells covered by the sphere are written.
            radius: Sphere radius before scaling.
            angle_offset: Accumulated spin in radians, added to longitude.
            day: Texture shown at full luminance.
            night: Texture shown at zero luminance.
            scale: Radius multiplier.
            tilt: Axial tilt in degrees.
            lighting: When false every hit samples the day texture only.
            width: Number of columns to trace.
            height: Number of rows to trace.
            palette: Luminance alphabet used to decode and encode texels.

        Returns:
            The number of cells written.
        """
        tex_w = day.width
        tex_h = day.height
        if tex_w == 0 or tex_h == 0 or width <= 0 or height <= 0:
            return 0

        r = radius * scale
        if r == 0.0 or not all(math.isfinite(v) for v in (r, tilt, angle_offset)):
            return 0
        untilt = rotation_x(-math.radians(tilt))
        spin = angle_offset / 2.0 / math.pi
        max_index = len(palette) - 1
        written = 0

        for row in range(height):
            for col in range(width):
                u = self.ray_direction(col, row, width, height)
                inter = self.intersect(u, r)
                if inter is None:
                    continue

                lum = self.luminance(inter, lighting)

                # Texture coordinates in the untilted frame; z is the spin axis.
                px, py, pz = transform_linear(inter, untilt)
                phi = -pz / r / 2.0 + 0.5
                theta = -math.atan2(py, px) / math.pi + 0.5 + spin
                if not (math.isfinite(theta) and math.isfinite(phi)):
                    continue
                theta -= math.floor(theta)

                tx = clamp_int(int(theta * (tex_w - 1)), 0, tex_w - 1)
                ty = clamp_int(int(phi * (tex_h - 1)), 0, tex_h - 1)

                day_char = day.texel(tx, ty)
                night_char = night.texel(tx, ty)
                if day_char is None or night_char is None:
                    continue
                day_idx = palette.index(day_char)
                night_idx = palette.index(night_char)
                if day_idx < 0 or night_idx < 0:
                    continue

                if row < len(canvas) and col < len(canvas[row]):
                    index = blend_index(lum, day_idx, night_idx, max_index)
                    canvas[row][col] = palette.char(index)
                    written += 1

        return written
