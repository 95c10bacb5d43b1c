"""
Logging setup for the podforge CLI.

``resolve_level`` picks the console level from the global flags, falling
back to ``PODFORGE_LOG_LEVEL`` and then WARNING.  ``setup_logging`` is
called once per process and installs a stderr handler plus an optional
file handler (``PODFORGE_LOG_FILE`` / ``PODFORGE_LOG_FILE_LEVEL``).

Modules that log once per service, hook candidate or plugin run are
held at INFO unless the console itself is at DEBUG, so a debug log file
does not drown in them.  Warnings from every module still get through.
"""

from __future__ import annotations

import logging
import os
import sys

LEVEL_ENV = "PODFORGE_LOG_LEVEL"
FILE_ENV = "PODFORGE_LOG_FILE"
FILE_LEVEL_ENV = "PODFORGE_LOG_FILE_LEVEL"

_FMT_CONSOLE = "%(levelname)s: %(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"

# Loggers that emit one line per service, hook file or plugin call.
PER_ITEM_LOGGERS = (
    "podforge.core.compose",
    "podforge.core.hooks",
    "podforge.core.plugins",
)

# Handlers added by the last setup_logging call.
_installed: list[logging.Handler] = []


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Console level name: ``--debug`` > ``-v`` > ``-q`` > env var > WARNING."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LEVEL_ENV) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install podforge's handlers on the root logger.

    Args:
        level: Console level name.  Unknown names mean WARNING.
        log_file: Optional path to append log records to.
        log_file_level: Level for ``log_file``; defaults to ``level``.
    """
    console_level = _parse_level(level)

    if console_level <= logging.DEBUG:
        fmt = _FMT_DEBUG
    elif console_level <= logging.INFO:
        fmt = _FMT_VERBOSE
    else:
        fmt = _FMT_CONSOLE

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))

    reset_logging()
    root = logging.getLogger()
    root.addHandler(console)
    _installed.append(console)

    effective = console_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        effective = min(effective, file_level)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(fh)
        _installed.append(fh)

    root.setLevel(effective)

    per_item_level = logging.NOTSET if console_level <= logging.DEBUG else logging.INFO
    for name in PER_ITEM_LOGGERS:
        logging.getLogger(name).setLevel(per_item_level)


def reset_logging() -> None:
    """Remove the handlers installed by ``setup_logging``."""
    root = logging.getLogger()
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()
    for name in PER_ITEM_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)


def _parse_level(level: str | None) -> int:
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
