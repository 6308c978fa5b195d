"""
Logging setup for the zephir-installer CLI.

Diagnostics only.  Requirement status lines, prompts and compiler output
go through the Reporter on stdout; log records go to stderr through
``click`` so a ``--json`` run keeps stdout parseable.

Console records are tagged ``zephir-installer <level>:`` so they cannot
be mistaken for a Reporter status line.  With ``--debug`` the tag also
carries the emitting module and line.

Level precedence:  --debug / --verbose / --quiet  >  ZI_LOG_LEVEL  >  WARNING

``ZI_LOG_FILE`` adds a file handler (full detail, timestamped) at
``ZI_LOG_FILE_LEVEL`` or the console level.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

import click

ENV_LOG_LEVEL = "ZI_LOG_LEVEL"
ENV_LOG_FILE = "ZI_LOG_FILE"
ENV_LOG_FILE_LEVEL = "ZI_LOG_FILE_LEVEL"

_CONSOLE_FMT = "zephir-installer %(levelname)s: %(message)s"
_CONSOLE_FMT_DEBUG = "zephir-installer %(levelname)s [%(name)s:%(lineno)d]: %(message)s"
_FILE_FMT = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d %(message)s"

_LEVEL_COLORS = {
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


class ConsoleHandler(logging.Handler):
    """Echo records to stderr, coloured by level."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            click.secho(message, err=True, fg=_LEVEL_COLORS.get(record.levelno))
        except Exception:
            self.handleError(record)


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from CLI flags, then ``ZI_LOG_LEVEL``."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    environ = os.environ if environ is None else environ
    return environ.get(ENV_LOG_LEVEL) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    environ: Mapping[str, str] | None = None,
) -> None:
    """Replace the root logger's handlers with the CLI console handler.

    Args:
        level: Console level name; unknown names mean WARNING.
        environ: Source of ``ZI_LOG_FILE`` / ``ZI_LOG_FILE_LEVEL``
            (default: ``os.environ``).
    """
    environ = os.environ if environ is None else environ
    console_level = _parse_level(level)

    console = ConsoleHandler()
    console.setLevel(console_level)
    fmt = _CONSOLE_FMT_DEBUG if console_level <= logging.DEBUG else _CONSOLE_FMT
    console.setFormatter(logging.Formatter(fmt))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.addHandler(console)
    root_level = console_level

    log_file = environ.get(ENV_LOG_FILE)
    if log_file:
        file_level = _parse_level(environ.get(ENV_LOG_FILE_LEVEL) or level)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FMT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(fh)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)


def _parse_level(level: str | None) -> int:
    numeric = logging.getLevelName(level.upper()) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
