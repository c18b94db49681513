"""Globe animation state.

Provides the GlobeState class, which owns the camera and the day/night
textures, carries the animation parameters (rotation offset, scale, speed,
tilt, lighting) and renders frames on request.

The camera is fixed on the equator looking at the origin; only the
sphere's own rotation offset animates.  The host calls :meth:`update` with
the elapsed time and then :meth:`render_frame` on the same tick.
"""

from __future__ import annotations

import logging
import math
import os
from typing import List, Optional

from ascii_globe.camera import Camera, Canvas
from ascii_globe.config import GlobeSettings
from ascii_globe.texture import (
    DEFAULT_PALETTE,
    Palette,
    PathLike,
    TextureError,
    TextureGrid,
    load_texture,
)

logger = logging.getLogger(__name__)

DAY_TEXTURE_NAME = "earth.txt"
NIGHT_TEXTURE_NAME = "earth_night.txt"

# Camera orbit radius and sphere radius in world units.
CAMERA_DISTANCE = 2.0
SPHERE_RADIUS = 1.0

# Spin rate at speed=1.0: roughly one revolution every 1.8 seconds.
ROTATION_RATE = 3.49

DEFAULT_TILT = 23.5

TWO_PI = 2.0 * math.pi


def wrap_angle(angle: float) -> float:
    """Wrap *angle* into ``[0, 2*pi)`` for any sign or magnitude.

    Infinities and NaN have no meaningful phase and map to 0.
    """
    if not math.isfinite(angle):
        return 0.0
    wrapped = angle - TWO_PI * math.floor(angle / TWO_PI)
    # Rounding can land exactly on 2*pi for tiny negative inputs.
    if wrapped >= TWO_PI or wrapped < 0.0:
        return 0.0
    return wrapped


class GlobeState:
    """Textured, spinning globe.

    Attributes:
        angle_offset: Accumulated spin in radians, always in [0, 2*pi).
        scale: Sphere size multiplier.  Not validated; 0 renders nothing.
        speed: Rotation rate multiplier.  Negative spins backwards.
        tilt: Axial tilt in degrees.
        lighting: Whether the day/night terminator is shaded.
        camera: The fixed orbit camera.
        day: Texture sampled at full luminance.
        night: Texture sampled at zero luminance.
        palette: Luminance alphabet shared by both textures.

    Raises:
        TextureError: If either texture is empty.
    """

    def __init__(
        self,
        day: TextureGrid,
        night: TextureGrid,
        *,
        scale: float = 1.0,
        speed: float = 1.0,
        tilt: float = DEFAULT_TILT,
        lighting: bool = True,
        camera: Optional[Camera] = None,
        palette: Palette = DEFAULT_PALETTE,
    ) -> None:
        if day.is_empty:
            raise TextureError("Day texture is empty")
        if night.is_empty:
            raise TextureError("Night texture is empty")

        self.day = day
        self.night = night
        self.camera = camera or Camera(CAMERA_DISTANCE, 0.0, 0.0)
        self.palette = palette
        self.angle_offset = 0.0
        self.scale = scale
        self.speed = speed
        self.tilt = tilt
        self.lighting = lighting

    # -- Construction helpers --------------------------------------------------

    @classmethod
    def from_directory(cls, texture_dir: PathLike, **kwargs: object) -> "GlobeState":
        """Load ``earth.txt`` and ``earth_night.txt`` from *texture_dir*.

        Raises:
            TextureError: If either file is unreadable or empty.  The
                exception's ``path`` names the offending file.
        """
        textures = []
        for name in (DAY_TEXTURE_NAME, NIGHT_TEXTURE_NAME):
            path = os.path.join(os.fspath(texture_dir), name)
            grid = load_texture(path)
            if grid.is_empty:
                raise TextureError(f"Texture is empty: {path}", path)
            textures.append(grid)
        return cls(textures[0], textures[1], **kwargs)  # type: ignore[arg-type]

    @classmethod
    def builtin(cls, **kwargs: object) -> "GlobeState":
        """Globe over the generated Earth textures."""
        from ascii_globe.earthmap import day_texture, night_texture

        return cls(day_texture(), night_texture(), **kwargs)  # type: ignore[arg-type]

    # -- Settings --------------------------------------------------------------

    def apply_settings(self, settings: GlobeSettings) -> None:
        """Copy the tunable parameters from a config section."""
        self.scale = settings.scale
        self.speed = settings.speed
        self.tilt = settings.tilt
        self.lighting = settings.lighting

    def settings(self, texture_path: Optional[str] = None) -> GlobeSettings:
        """Return the current tunables as a config section."""
        return GlobeSettings(
            scale=self.scale,
            speed=self.speed,
            tilt=self.tilt,
            lighting=self.lighting,
            texture_path=texture_path,
        )

    # -- Animation -------------------------------------------------------------

    def update(self, dt: float) -> None:
        """Advance the spin by ``ROTATION_RATE * speed * dt`` radians.

        Args:
            dt: Elapsed time in seconds since the last update.
        """
        self.angle_offset = wrap_angle(self.angle_offset + ROTATION_RATE * self.speed * dt)

    # -- Rendering -------------------------------------------------------------

    def render_frame(self, canvas: Canvas, width: int, height: int) -> int:
        """Draw the globe into the caller's *canvas*.

        Cells outside the sphere are left as the caller filled them.

        Returns:
            The number of cells written.
        """
        written = self.camera.render_sphere(
            canvas,
            SPHERE_RADIUS,
            self.angle_offset,
            self.day,
            self.night,
            self.scale,
            self.tilt,
            self.lighting,
            width,
            height,
            self.palette,
        )
        logger.debug("Rendered %dx%d frame, %d globe cells", width, height, written)
        return written

    def render(self, width: int, height: int, fill: str = " ") -> List[List[str]]:
        """Render into a freshly allocated *height* x *width* grid."""
        canvas: List[List[str]] = [[fill] * max(width, 0) for _ in range(max(height, 0))]
        self.render_frame(canvas, width, height)
        return canvas
