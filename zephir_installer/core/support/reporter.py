"""
Reporter — the output sink for everything the user sees.

The environment check, the command runner and the extension pipeline
never print directly.  They talk to a Reporter, which the CLI backs
with the terminal (``ui.cli.reporter.ClickReporter``) and tests back
with an in-memory recorder.

``overwrite`` replaces the most recently written line in place, so a
requirement can show ``checking...`` and then turn into ``OK`` or
``Fail`` on the same line.
"""

from __future__ import annotations

from typing import Protocol


class Reporter(Protocol):
    """Line-oriented, rewritable output with a yes/no prompt."""

    def write(self, text: str, newline: bool = True) -> None:
        """Append ``text`` as new output."""

    def overwrite(self, text: str, newline: bool = True) -> None:
        """Replace the last written line with ``text``."""

    def ask(self, prompt: str, default: str) -> str:
        """Ask the user a question, returning ``default`` when non-interactive."""

    def write_error(self, text: str) -> None:
        """Report ``text`` as error-level output."""
