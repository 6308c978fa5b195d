"""
Tests for logging setup — level precedence, console tagging, file output.
"""

import logging
from pathlib import Path

import pytest

from zephir_installer.core.observability.logging_config import (
    ConsoleHandler,
    _parse_level,
    resolve_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("ERROR") == logging.ERROR

    def test_unknown_falls_back_to_warning(self):
        assert _parse_level("chatty") == logging.WARNING
        assert _parse_level(None) == logging.WARNING


class TestResolveLevel:
    def test_flags_win_over_env(self):
        env = {"ZI_LOG_LEVEL": "ERROR"}
        assert resolve_level(debug=True, environ=env) == "DEBUG"
        assert resolve_level(verbose=True, environ=env) == "INFO"

    def test_env_then_default(self):
        assert resolve_level(environ={"ZI_LOG_LEVEL": "INFO"}) == "INFO"
        assert resolve_level(environ={}) == "WARNING"

    def test_quiet(self):
        assert resolve_level(quiet=True, environ={}) == "ERROR"


class TestSetupLogging:
    def test_single_console_handler(self):
        setup_logging("INFO", environ={})
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], ConsoleHandler)
        assert root.level == logging.INFO

    def test_console_records_are_tagged_on_stderr(self, capsys):
        setup_logging("WARNING", environ={})
        logging.getLogger("zephir_installer.test").warning("no %s found", "re2c")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "zephir-installer WARNING: no re2c found\n"

    def test_debug_tag_names_module(self, capsys):
        setup_logging("DEBUG", environ={})
        logging.getLogger("zephir_installer.test").debug("spawning")
        assert "[zephir_installer.test:" in capsys.readouterr().err

    def test_file_handler_lowers_root_level(self, tmp_path: Path):
        log_file = tmp_path / "install.log"
        setup_logging(
            "WARNING",
            environ={"ZI_LOG_FILE": str(log_file), "ZI_LOG_FILE_LEVEL": "DEBUG"},
        )
        root = logging.getLogger()
        assert len(root.handlers) == 2
        assert root.level == logging.DEBUG

        logging.getLogger("zephir_installer.test").debug("compiled %s", "fast.so")
        for handler in root.handlers:
            handler.flush()
        assert "compiled fast.so" in log_file.read_text()
