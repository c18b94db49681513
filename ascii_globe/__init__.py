"""ascii_globe - a textured, day/night shaded globe rendered as characters."""

__version__ = "0.1.0"
