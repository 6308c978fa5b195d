"""
Command runner — the SINGLE PLACE where external processes are spawned.

Used by the environment check (package-manager remediation) and by the
extension pipeline (``zephir fullclean`` / ``zephir compile``).

Output contract:
    - stdout is streamed line by line as a rewritable progress line
    - stderr is reported as error output once the process exits,
      unless ``quiet`` is set
    - a non-zero exit code is RETURNED, never raised
    - failing to start the process at all raises ``CommandSpawnError``

There is no timeout: a hung process blocks the caller.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import threading
from pathlib import Path
from typing import IO

from zephir_installer.core.errors import CommandSpawnError
from zephir_installer.core.support.reporter import Reporter

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run command lines and stream their output to a Reporter."""

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter

    def run(
        self,
        command_line: str,
        working_directory: str | Path | None = None,
        quiet: bool = False,
    ) -> int:
        """Run ``command_line`` and block until it exits.

        Args:
            command_line: Shell-style command line, split with ``shlex``.
            working_directory: Directory to run in (default: current).
            quiet: Suppress stderr from the reporter.

        Returns:
            The process exit code.

        Raises:
            CommandSpawnError: If the process could not be started.
        """
        self.reporter.write(f"      $ {command_line}")

        cwd = str(working_directory) if working_directory is not None else None

        try:
            args = shlex.split(command_line, posix=os.name != "nt")
            logger.debug("Running %s (cwd=%s)", args, cwd or os.getcwd())
            proc = subprocess.Popen(
                args,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            logger.warning("Could not spawn %s: %s", command_line, e)
            raise CommandSpawnError(command_line, str(e)) from e

        # stderr is drained on a helper thread so a chatty child can't
        # block on a full pipe.  All reporter calls stay on this thread.
        stderr_lines: list[str] = []
        with proc:
            drain = threading.Thread(
                target=_drain, args=(proc.stderr, stderr_lines), daemon=True,
            )
            drain.start()

            if proc.stdout:
                for raw in proc.stdout:
                    self._progress(_decode(raw))
            drain.join()

        self.reporter.overwrite("", newline=False)

        if not quiet:
            for line in stderr_lines:
                self.reporter.write_error(line)

        logger.info("'%s' exited with %d", command_line, proc.returncode)
        return proc.returncode

    def _progress(self, line: str) -> None:
        """Show the last non-empty carriage-return segment of a stdout line."""
        segments = [s for s in line.split("\r") if s.strip()]
        if segments:
            self.reporter.overwrite(segments[-1], newline=False)


def _decode(raw: bytes) -> str:
    return raw.decode(errors="replace").rstrip("\r\n")


def _drain(stream: IO[bytes] | None, sink: list[str]) -> None:
    if stream is None:
        return
    for raw in stream:
        line = _decode(raw)
        if line:
            sink.append(line)
