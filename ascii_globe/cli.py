"""CLI argument parsing and entry point.

Loads settings and textures, then either prints a single frame to stdout
or runs the curses display loop: update the globe with the elapsed time,
draw the starfield, draw the globe over it, and flush the frame.
"""

from __future__ import annotations

import argparse
import curses
import logging
import sys
import time
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Sequence

from ascii_globe import __version__
from ascii_globe.config import (
    AppConfig,
    ConfigError,
    default_config_path,
    load_config,
    save_config,
)
from ascii_globe.earthmap import write_textures
from ascii_globe.globe import GlobeState
from ascii_globe.renderer import Renderer, grid_to_text
from ascii_globe.stars import ASCII_STAR_CHARS, UNICODE_STAR_CHARS, NightSky
from ascii_globe.texture import TextureError
from ascii_globe.utils import (
    ResizeDebouncer,
    detect_unicode_support,
    get_terminal_size,
    is_terminal,
    setup_logging,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# CLI configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class CLIConfig:
    """Parsed CLI options.  ``None`` means "not given, use the config file"."""

    textures: Optional[str] = None
    scale: Optional[float] = None
    speed: Optional[float] = None
    tilt: Optional[float] = None
    lighting: Optional[bool] = None
    stars: Optional[bool] = None
    fps: Optional[int] = None
    config_path: Optional[str] = None
    save_config: bool = False
    once: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    export_textures: Optional[str] = None
    verbose: bool = False
    debug: bool = False
    log_file: Optional[str] = None


# ---------------------------------------------------------------------------
# Key bindings
# ---------------------------------------------------------------------------

SCALE_STEP = 0.05
SPEED_STEP = 0.25
TILT_STEP = 5.0

# ---------------------------------------------------------------------------
# Frame timing
# ---------------------------------------------------------------------------

MAX_FPS = 240


def compute_frame_sleep(frame_start: float, target: float) -> float:
    """Compute the sleep duration needed to hit the target frame time.

    Args:
        frame_start: Monotonic timestamp of the frame start.
        target: Desired frame duration in seconds.

    Returns:
        Seconds to sleep (>= 0).  Returns 0 when the frame already
        exceeded the target duration.
    """
    elapsed = time.monotonic() - frame_start
    return max(0.0, target - elapsed)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> CLIConfig:
    """Parse CLI arguments and return a :class:`CLIConfig`.

    Parameters
    ----------
    argv : sequence of str or None
        Command-line arguments to parse.  When ``None``, reads from
        ``sys.argv[1:]`` (the default argparse behavior).
    """
    parser = argparse.ArgumentParser(
        prog="ascii_globe",
        description="A spinning, day/night shaded ASCII Earth in the terminal.",
    )

    parser.add_argument(
        "--textures", metavar="DIR",
        help="Directory containing earth.txt and earth_night.txt "
             "(default: built-in textures)",
    )
    parser.add_argument("--scale", type=float, metavar="F", help="Globe size multiplier")
    parser.add_argument("--speed", type=float, metavar="F", help="Rotation speed multiplier")
    parser.add_argument("--tilt", type=float, metavar="DEG", help="Axial tilt in degrees")
    parser.add_argument(
        "--lighting", dest="lighting", action="store_true", default=None,
        help="Shade the night side",
    )
    parser.add_argument(
        "--no-lighting", dest="lighting", action="store_false",
        help="Show the whole globe in daylight",
    )
    parser.add_argument(
        "--no-stars", dest="stars", action="store_false", default=None,
        help="Disable the starfield background",
    )
    parser.add_argument("--fps", type=_positive_int, metavar="N", help="Target frame rate")
    parser.add_argument(
        "--config", dest="config_path", metavar="PATH",
        help=f"Settings file (default: {default_config_path()})",
    )
    parser.add_argument(
        "--save-config", action="store_true",
        help="Write the effective settings back to the settings file",
    )
    parser.add_argument(
        "--once", action="store_true",
        help="Print a single frame to stdout and exit",
    )
    parser.add_argument("--width", type=_positive_int, metavar="N", help="Frame width for --once")
    parser.add_argument("--height", type=_positive_int, metavar="N", help="Frame height for --once")
    parser.add_argument(
        "--export-textures", metavar="DIR",
        help="Write the built-in textures to DIR and exit",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--log-file", metavar="PATH", help="Write log records to PATH")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)

    fps = args.fps
    if fps is not None:
        fps = min(fps, MAX_FPS)

    return CLIConfig(
        textures=args.textures,
        scale=args.scale,
        speed=args.speed,
        tilt=args.tilt,
        lighting=args.lighting,
        stars=args.stars,
        fps=fps,
        config_path=args.config_path,
        save_config=args.save_config,
        once=args.once,
        width=args.width,
        height=args.height,
        export_textures=args.export_textures,
        verbose=args.verbose,
        debug=args.debug,
        log_file=args.log_file,
    )


def resolve_settings(cli: CLIConfig, app_config: AppConfig) -> AppConfig:
    """Overlay the options given on the command line onto *app_config*."""
    globe = app_config.globe
    ui = app_config.ui
    overrides = {
        "scale": cli.scale,
        "speed": cli.speed,
        "tilt": cli.tilt,
        "lighting": cli.lighting,
        "texture_path": cli.textures,
    }
    globe = replace(globe, **{k: v for k, v in overrides.items() if v is not None})
    if cli.fps is not None:
        ui = replace(ui, target_fps=cli.fps)
    if cli.stars is not None:
        ui = replace(ui, stars=cli.stars)
    return AppConfig(globe=globe, ui=ui)


# ---------------------------------------------------------------------------
# Globe construction and frames
# ---------------------------------------------------------------------------

def build_globe(app_config: AppConfig) -> GlobeState:
    """Create the globe from the texture directory or the built-in map.

    Raises:
        TextureError: If a configured texture directory is unusable.
    """
    settings = app_config.globe
    if settings.texture_path:
        globe = GlobeState.from_directory(settings.texture_path)
    else:
        globe = GlobeState.builtin()
    globe.apply_settings(settings)
    return globe


def compose_frame(
    globe: GlobeState,
    width: int,
    height: int,
    sky: Optional[NightSky] = None,
    elapsed: float = 0.0,
) -> List[List[str]]:
    """Blank background, then stars, then the globe on top."""
    canvas: List[List[str]] = [[" "] * width for _ in range(height)]
    if sky is not None:
        sky.fill(canvas, elapsed)
    globe.render_frame(canvas, width, height)
    return canvas


def apply_key(globe: GlobeState, key: int) -> bool:
    """Apply a tuning key to *globe*.  Returns ``True`` if it was handled."""
    if key in (ord("+"), ord("=")):
        globe.scale += SCALE_STEP
    elif key in (ord("-"), ord("_")):
        globe.scale -= SCALE_STEP
    elif key == ord(">"):
        globe.speed += SPEED_STEP
    elif key == ord("<"):
        globe.speed -= SPEED_STEP
    elif key == ord("]"):
        globe.tilt += TILT_STEP
    elif key == ord("["):
        globe.tilt -= TILT_STEP
    elif key in (ord("l"), ord("L")):
        globe.lighting = not globe.lighting
    else:
        return False
    logger.info(
        "Globe settings: scale=%.2f speed=%.2f tilt=%.1f lighting=%s",
        globe.scale, globe.speed, globe.tilt, globe.lighting,
    )
    return True


_STAR_GLYPHS = frozenset(UNICODE_STAR_CHARS + ASCII_STAR_CHARS)


def _attrs_for(ch: str) -> int:
    """Bold the brightest globe glyphs and dim the stars."""
    if ch in "HWYV@":
        return curses.A_BOLD
    if ch in _STAR_GLYPHS:
        return curses.A_DIM
    return 0


# ---------------------------------------------------------------------------
# Display loop
# ---------------------------------------------------------------------------

def _save_settings(
    globe: GlobeState,
    app_config: AppConfig,
    config_path: Optional[str],
) -> None:
    updated = AppConfig(
        globe=globe.settings(texture_path=app_config.globe.texture_path),
        ui=app_config.ui,
    )
    try:
        save_config(updated, config_path)
    except ConfigError as exc:
        logger.warning("%s", exc)


def _display_loop(
    stdscr: Any,
    globe: GlobeState,
    app_config: Optional[AppConfig] = None,
    config_path: Optional[str] = None,
) -> None:
    """Main curses display loop.

    Spins the globe until the user presses ``q`` or sends a keyboard
    interrupt (Ctrl+C).  Terminal resize events are debounced to prevent
    excessive re-renders during rapid resizing.

    Parameters
    ----------
    stdscr : curses window
        The curses standard screen.
    globe : GlobeState
        The globe to animate.
    app_config : AppConfig or None
        Effective settings.  When ``None``, defaults are used.
    config_path : str or None
        Where ``s`` saves the settings.
    """
    if app_config is None:
        app_config = AppConfig()

    renderer = Renderer(stdscr)
    sky: Optional[NightSky] = None
    if app_config.ui.stars:
        sky = NightSky(
            renderer.cols, renderer.rows,
            ascii_only=not detect_unicode_support(),
        )

    frame_time = 1.0 / max(1, min(app_config.ui.target_fps, MAX_FPS))
    debouncer = ResizeDebouncer(interval=0.1)

    start = time.monotonic()
    prev_frame_time = start

    while True:
        frame_start = time.monotonic()
        dt = frame_start - prev_frame_time
        prev_frame_time = frame_start

        try:
            key = stdscr.getch()
        except curses.error:
            key = -1

        if key in (ord("q"), ord("Q")):
            break

        if key == curses.KEY_RESIZE:
            if debouncer.should_handle():
                renderer.handle_resize()
        elif key in (ord("s"), ord("S")):
            _save_settings(globe, app_config, config_path)
        elif key != -1:
            apply_key(globe, key)

        if debouncer.flush():
            renderer.handle_resize()

        if sky is not None and (sky.width, sky.height) != (renderer.cols, renderer.rows):
            sky.resize(renderer.cols, renderer.rows)

        globe.update(dt)
        frame = compose_frame(
            globe, renderer.cols, renderer.rows, sky, frame_start - start,
        )
        renderer.render_frame(frame, _attrs_for)

        sleep_time = compute_frame_sleep(frame_start, frame_time)
        if sleep_time > 0.001:
            time.sleep(sleep_time)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for ascii_globe.

    Parses CLI arguments, loads settings and textures, then prints one
    frame (``--once``), exports textures (``--export-textures``), or runs
    the curses display loop under ``curses.wrapper`` so the terminal is
    restored even if an exception occurs.

    Texture and settings errors print a one-line message and exit with
    status 1.

    Parameters
    ----------
    argv : sequence of str or None
        Command-line arguments.  When ``None``, reads from ``sys.argv``.
    """
    cli = parse_args(argv)
    interactive = not (cli.once or cli.export_textures)
    setup_logging(cli.verbose, cli.debug, cli.log_file, to_stderr=not interactive)

    if cli.export_textures:
        for path in write_textures(cli.export_textures):
            print(path)
        return

    try:
        app_config = resolve_settings(cli, load_config(cli.config_path))
        if cli.save_config:
            save_config(app_config, cli.config_path)
        globe = build_globe(app_config)
    except (ConfigError, TextureError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if cli.once:
        cols, rows = get_terminal_size()
        width = cli.width or cols
        height = cli.height or rows
        print(grid_to_text(compose_frame(globe, width, height)))
        return

    # Cannot run curses in a pipe
    if not is_terminal():
        print(
            "Error: ascii_globe requires an interactive terminal. "
            "Use --once to print a single frame.",
            file=sys.stderr,
        )
        sys.exit(1)

    try:
        curses.wrapper(
            lambda stdscr: _display_loop(stdscr, globe, app_config, cli.config_path)
        )
    except KeyboardInterrupt:
        pass  # Clean exit on Ctrl-C
