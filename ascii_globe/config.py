"""Persisted settings.

Settings live in a small JSON file under the user's config directory.  A
missing file means "use the defaults"; a file that exists but cannot be
parsed is an error, so a typo never silently resets the user's settings.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

APP_DIR_NAME = "ascii_globe"
CONFIG_FILE_NAME = "config.json"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read, parsed or validated."""


@dataclass
class GlobeSettings:
    """Tunable globe parameters exposed to the host UI.

    Attributes:
        scale: Sphere size multiplier.
        speed: Rotation rate multiplier.
        tilt: Axial tilt in degrees.
        lighting: Day/night shading on or off.
        texture_path: Directory holding ``earth.txt`` and
            ``earth_night.txt``, or ``None`` for the built-in textures.
    """

    scale: float = 1.15
    speed: float = 1.0
    tilt: float = 23.5
    lighting: bool = False
    texture_path: Optional[str] = None


@dataclass
class UISettings:
    """Host display options."""

    target_fps: int = 30
    stars: bool = True


@dataclass
class AppConfig:
    """Top-level configuration document."""

    globe: GlobeSettings = field(default_factory=GlobeSettings)
    ui: UISettings = field(default_factory=UISettings)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Build a config from parsed JSON.

        Missing sections and keys take their defaults and unknown keys are
        ignored.

        Raises:
            ConfigError: If a section is not an object or a value has the
                wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be an object, got {type(data).__name__}")
        return cls(
            globe=_section(GlobeSettings, data.get("globe", {}), "globe"),
            ui=_section(UISettings, data.get("ui", {}), "ui"),
        )


# Accepted JSON types per field annotation.  bool is excluded from the
# numeric fields because it is a subclass of int.
_FIELD_TYPES: Dict[str, tuple] = {
    "float": (int, float),
    "int": (int,),
    "bool": (bool,),
    "Optional[str]": (str, type(None)),
}


def _section(cls: Any, data: Any, name: str) -> Any:
    if not isinstance(data, dict):
        raise ConfigError(f"Config section '{name}' must be an object")
    values: Dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        accepted = _FIELD_TYPES.get(str(f.type), (object,))
        if not isinstance(value, accepted) or (
            isinstance(value, bool) and bool not in accepted
        ):
            raise ConfigError(
                f"Config field '{name}.{f.name}' expects {f.type}, "
                f"got {type(value).__name__}"
            )
        if str(f.type) == "float":
            value = float(value)
        values[f.name] = value
    return cls(**values)


def default_config_path() -> Path:
    """Return ``$XDG_CONFIG_HOME/ascii_globe/config.json``.

    Falls back to ``~/.config`` when ``XDG_CONFIG_HOME`` is unset.
    """
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(
        os.path.expanduser("~"), ".config"
    )
    return Path(base) / APP_DIR_NAME / CONFIG_FILE_NAME


def load_config(
    path: Optional[Union[str, Path]] = None,
    *,
    create: bool = False,
) -> AppConfig:
    """Load the configuration file.

    Args:
        path: File to read.  Defaults to :func:`default_config_path`.
        create: Write the defaults out when the file does not exist yet.

    Returns:
        The parsed :class:`AppConfig`, or defaults for a missing file.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    config_path = Path(path) if path is not None else default_config_path()

    if not config_path.exists():
        logger.info("No config at %s, using defaults", config_path)
        config = AppConfig()
        if create:
            save_config(config, config_path)
        return config

    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read config from {config_path}: {exc}") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse config from {config_path}: {exc}") from exc

    config = AppConfig.from_dict(data)
    logger.info("Loaded config from %s", config_path)
    return config


def save_config(config: AppConfig, path: Optional[Union[str, Path]] = None) -> Path:
    """Write *config* as pretty-printed JSON, creating parent directories.

    Returns:
        The path written.

    Raises:
        ConfigError: If the directory or file cannot be written.
    """
    config_path = Path(path) if path is not None else default_config_path()
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(
            json.dumps(config.to_dict(), indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
    except OSError as exc:
        raise ConfigError(f"Failed to write config to {config_path}: {exc}") from exc
    logger.info("Saved config to %s", config_path)
    return config_path
