"""Small vector and matrix helpers for the sphere renderer.

Vectors are plain ``(x, y, z)`` tuples.  Matrices are flat tuples: 16
floats for a row-major 4x4 affine transform (translation in the last row)
and 9 floats for a row-major 3x3 rotation.  Only these two shapes are ever
needed, so there is no general matrix type.

All functions are pure and total over floats.  NaN simply propagates.
"""

from __future__ import annotations

import math
from typing import Tuple

# Type aliases
Vec3 = Tuple[float, float, float]
Mat3 = Tuple[float, ...]  # 9 floats, row-major
Mat4 = Tuple[float, ...]  # 16 floats, row-major, translation in m[12:15]

IDENTITY4: Mat4 = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
)


def dot(a: Vec3, b: Vec3) -> float:
    """Dot product of two 3D vectors."""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Right-handed cross product ``a x b``."""
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def magnitude(v: Vec3) -> float:
    """Euclidean length of *v*."""
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def normalize(v: Vec3) -> Vec3:
    """Scale *v* to unit length.

    A vector whose magnitude is exactly zero is returned unchanged instead
    of dividing by zero.
    """
    mag = magnitude(v)
    if mag == 0.0:
        return v
    return (v[0] / mag, v[1] / mag, v[2] / mag)


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def subtract(a: Vec3, b: Vec3) -> Vec3:
    """Vector from *b* to *a* (``a - b``)."""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(v: Vec3, s: float) -> Vec3:
    return (v[0] * s, v[1] * s, v[2] * s)


def transform_affine(v: Vec3, m: Mat4) -> Vec3:
    """Transform *v* as a row vector by the 4x4 affine matrix *m*.

    The implicit fourth component is 1, so the translation stored in
    ``m[12:15]`` is applied.

    Args:
        v: Input vector.
        m: 16 floats, row-major.

    Returns:
        The transformed (x, y, z).
    """
    x, y, z = v
    return (
        x * m[0] + y * m[4] + z * m[8] + m[12],
        x * m[1] + y * m[5] + z * m[9] + m[13],
        x * m[2] + y * m[6] + z * m[10] + m[14],
    )


def transform_linear(v: Vec3, m: Mat3) -> Vec3:
    """Multiply the 3x3 row-major matrix *m* by the column vector *v*."""
    x, y, z = v
    return (
        m[0] * x + m[1] * y + m[2] * z,
        m[3] * x + m[4] * y + m[5] * z,
        m[6] * x + m[7] * y + m[8] * z,
    )


def rotation_x(theta: float) -> Mat3:
    """Build the 3x3 matrix rotating about the X axis by *theta* radians."""
    sin_t = math.sin(theta)
    cos_t = math.cos(theta)
    return (
        1.0, 0.0, 0.0,
        0.0, cos_t, -sin_t,
        0.0, sin_t, cos_t,
    )


def rotate_x(v: Vec3, theta: float) -> Vec3:
    """Rotate *v* around the X axis by *theta* radians.

    Args:
        v: Input vector.
        theta: Rotation angle in radians.

    Returns:
        Rotated (x, y, z).
    """
    return transform_linear(v, rotation_x(theta))


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp *x* into ``[lo, hi]``."""
    return min(max(x, lo), hi)


def clamp_int(x: int, lo: int, hi: int) -> int:
    """Integer variant of :func:`clamp`, used for texel indices."""
    return min(max(x, lo), hi)
