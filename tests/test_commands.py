"""
Tests for the command runner — real subprocesses, streamed output.
"""

import shlex
import sys
from pathlib import Path

import pytest

from zephir_installer.core.errors import CommandSpawnError
from zephir_installer.core.support.commands import CommandRunner
from tests.fakes import RecordingReporter

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX command lines")


def _python(code: str) -> str:
    """Command line running ``code`` with the current interpreter."""
    return f"{shlex.quote(sys.executable)} -c {shlex.quote(code)}"


class TestCommandRunner:
    def test_echoes_command_line(self, reporter: RecordingReporter):
        command = _python("pass")
        CommandRunner(reporter).run(command)
        assert reporter.events[0] == ("write", f"      $ {command}")

    def test_returns_zero(self, reporter):
        assert CommandRunner(reporter).run(_python("pass")) == 0

    def test_returns_non_zero_without_raising(self, reporter):
        assert CommandRunner(reporter).run(_python("import sys; sys.exit(7)")) == 7

    def test_stdout_streams_as_overwrites_in_order(self, reporter):
        CommandRunner(reporter).run(_python("print('one'); print('two'); print('three')"))
        progress = [t for t in reporter.texts("overwrite") if t]
        assert progress == ["one", "two", "three"]
        # Progress line cleared at the end
        assert reporter.events[-1] == ("overwrite", "")

    def test_carriage_return_keeps_last_segment(self, reporter):
        CommandRunner(reporter).run(_python("print('10%\\r50%\\r100%')"))
        assert [t for t in reporter.texts("overwrite") if t] == ["100%"]

    def test_stderr_reported_as_error(self, reporter):
        code = CommandRunner(reporter).run(
            _python("import sys; sys.stderr.write('boom\\n'); sys.exit(2)"),
        )
        assert code == 2
        assert reporter.texts("error") == ["boom"]

    def test_quiet_suppresses_stderr_but_keeps_exit_code(self, reporter):
        code = CommandRunner(reporter).run(
            _python("import sys; sys.stderr.write('boom\\n'); sys.exit(3)"),
            quiet=True,
        )
        assert code == 3
        assert reporter.texts("error") == []

    def test_working_directory(self, reporter, tmp_path: Path):
        CommandRunner(reporter).run(_python("import os; print(os.getcwd())"), tmp_path)
        progress = [t for t in reporter.texts("overwrite") if t]
        assert Path(progress[0]).resolve() == tmp_path.resolve()

    def test_missing_executable_is_spawn_error(self, reporter):
        with pytest.raises(CommandSpawnError) as exc:
            CommandRunner(reporter).run("definitely-not-a-real-binary-zi --version")
        assert exc.value.command_line == "definitely-not-a-real-binary-zi --version"

    def test_missing_working_directory_is_spawn_error(self, reporter, tmp_path: Path):
        with pytest.raises(CommandSpawnError):
            CommandRunner(reporter).run(_python("pass"), tmp_path / "missing")

    def test_permission_denied_is_spawn_error(self, reporter, tmp_path: Path):
        script = tmp_path / "not-executable"
        script.write_text("#!/bin/sh\necho hi\n")
        script.chmod(0o644)
        with pytest.raises(CommandSpawnError):
            CommandRunner(reporter).run(shlex.quote(str(script)))

    def test_unbalanced_quotes_is_spawn_error(self, reporter):
        with pytest.raises(CommandSpawnError) as exc:
            CommandRunner(reporter).run("zephir compile 'unterminated")
        assert exc.value.command_line == "zephir compile 'unterminated"
