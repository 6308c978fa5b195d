"""
Terminal reporter — the Reporter the CLI hands to the core.

On a terminal, ``overwrite`` rewrites the previous line in place with
ANSI cursor codes.  When output is not a terminal (CI logs, pipes,
CliRunner) the rewrite degrades to plain appended lines, and an empty
progress clear only ends a line left open.
"""

from __future__ import annotations

import sys

import click

_CLEAR_LINE = "\r\x1b[2K"
_CURSOR_UP = "\x1b[1A"


class ClickReporter:
    """Reporter backed by ``click.echo`` / ``click.prompt``.

    ``err=True`` sends progress to stderr so stdout stays machine-readable.
    """

    def __init__(
        self,
        interactive: bool = True,
        decorated: bool | None = None,
        err: bool = False,
    ) -> None:
        self.interactive = interactive
        self.err = err
        stream = sys.stderr if err else sys.stdout
        self.decorated = stream.isatty() if decorated is None else decorated
        # True while the last write did not end with a newline
        self._open_line = False

    def write(self, text: str, newline: bool = True) -> None:
        click.echo(text, nl=newline, err=self.err)
        self._open_line = not newline

    def overwrite(self, text: str, newline: bool = True) -> None:
        if self.decorated:
            prefix = _CLEAR_LINE if self._open_line else _CURSOR_UP + _CLEAR_LINE
            click.echo(prefix + text, nl=newline, err=self.err, color=True)
            self._open_line = not newline
            return

        if not text:
            # A progress clear closes the open line instead of erasing it
            if self._open_line:
                click.echo("", err=self.err)
                self._open_line = False
            return
        if self._open_line:
            click.echo("", err=self.err)
        click.echo(text, nl=newline, err=self.err)
        self._open_line = not newline

    def ask(self, prompt: str, default: str) -> str:
        if not self.interactive:
            self.write(f"{prompt}{default}")
            return default
        if self._open_line:
            click.echo("", err=self.err)
        self._open_line = False
        return click.prompt(
            prompt, default=default, show_default=False, prompt_suffix="", err=self.err,
        )

    def write_error(self, text: str) -> None:
        click.secho(text, fg="red", err=True)
