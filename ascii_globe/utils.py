"""Terminal detection, resize debouncing, logging setup.

Helpers used by the CLI layer: whether stdout is a terminal, its size,
whether Unicode glyphs are safe to print, a debouncer for resize events,
and the one place that configures logging.
"""

from __future__ import annotations

import locale
import logging
import os
import shutil
import sys
import time
from typing import Callable, Optional, Tuple

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def detect_unicode_support() -> bool:
    """Check if the current terminal likely supports Unicode output.

    Heuristics (in order):
    1. ``LANG`` / ``LC_ALL`` / ``LC_CTYPE`` environment variable contains
       ``utf`` (case-insensitive).
    2. Python's preferred encoding (from :func:`locale.getpreferredencoding`)
       contains ``utf``.
    3. ``sys.stdout.encoding`` contains ``utf``.

    Returns:
        ``True`` if Unicode is probably supported, ``False`` otherwise.
    """
    for var in ("LC_ALL", "LC_CTYPE", "LANG"):
        value = os.environ.get(var, "")
        if "utf" in value.lower():
            return True

    preferred = locale.getpreferredencoding(False) or ""
    if "utf" in preferred.lower():
        return True

    encoding = getattr(sys.stdout, "encoding", None) or ""
    return "utf" in encoding.lower()


def is_terminal() -> bool:
    """Check whether stdout is connected to a real terminal.

    Returns ``False`` when output is piped or redirected, which means
    the application should not attempt interactive curses rendering.
    """
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def get_terminal_size() -> Tuple[int, int]:
    """Return the current terminal dimensions as ``(columns, rows)``.

    Falls back to (80, 24) when the real size cannot be determined
    (e.g. piped output).
    """
    try:
        size = shutil.get_terminal_size(fallback=(80, 24))
    except OSError:
        return (80, 24)
    return (size.columns, size.lines)


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    log_file: Optional[str] = None,
    to_stderr: bool = True,
) -> None:
    """Configure the root logger.

    WARNING by default, INFO with *verbose*, DEBUG with *debug*.  Records
    go to *log_file* when given, otherwise to stderr unless *to_stderr* is
    false, in which case they are discarded.  Curses sessions pass
    ``to_stderr=False`` so log lines cannot corrupt the screen.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    elif to_stderr:
        handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


# ---------------------------------------------------------------------------
# Resize debouncing
# ---------------------------------------------------------------------------

class ResizeDebouncer:
    """Debounce rapid terminal resize events.

    Prevents re-rendering more than once per *interval* seconds.
    The caller should invoke :meth:`should_handle` on each resize event;
    it returns ``True`` only when enough time has elapsed since the last
    handled resize.

    Args:
        interval: Minimum seconds between handled resizes.  Default is
            0.1 (100 ms).
        clock: Optional callable returning the current time in seconds
            (defaults to :func:`time.monotonic`).  Useful for testing.
    """

    def __init__(
        self,
        interval: float = 0.1,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if interval < 0:
            raise ValueError("interval must be non-negative")
        self._interval = interval
        self._clock = clock or time.monotonic
        self._last_handled: float = 0.0
        self._pending: bool = False

    @property
    def pending(self) -> bool:
        """Whether a resize event is pending (was suppressed)."""
        return self._pending

    def should_handle(self) -> bool:
        """Record a resize event and return whether it should be processed.

        Suppressed events are marked pending so :meth:`flush` can pick
        them up later.
        """
        now = self._clock()
        if now - self._last_handled >= self._interval:
            self._last_handled = now
            self._pending = False
            return True
        self._pending = True
        return False

    def flush(self) -> bool:
        """Return ``True`` (clearing the flag) if a pending resize is now due."""
        if not self._pending:
            return False
        now = self._clock()
        if now - self._last_handled >= self._interval:
            self._last_handled = now
            self._pending = False
            return True
        return False
