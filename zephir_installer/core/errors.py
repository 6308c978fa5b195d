"""
Installer errors — one hierarchy for every failure the CLI reports.

Requirement failures are NOT errors: a missing binary is data carried
in the environment report. Only conditions that stop the pipeline
are raised.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base error for this package."""


# ── Environment ─────────────────────────────────────────────────


class EnvironmentCheckError(InstallerError):
    """Base for problems with the build environment itself."""


class EnvironmentDetectionError(EnvironmentCheckError):
    """Raised when the host OS matches no known platform."""


class PlatformNotImplementedError(EnvironmentCheckError):
    """Raised when a recognised platform has no working detector."""


class BrokenEnvironmentError(EnvironmentCheckError):
    """Raised when the toolchain check failed and compilation must not start."""


# ── Processes ───────────────────────────────────────────────────


class CommandSpawnError(InstallerError):
    """Raised when an external command cannot be started at all."""

    def __init__(self, command_line: str, reason: str) -> None:
        super().__init__(f"Can not run '{command_line}': {reason}")
        self.command_line = command_line
        self.reason = reason


class CompileError(InstallerError):
    """Raised when a compiler step exits non-zero."""

    def __init__(self, command_line: str, exit_code: int) -> None:
        super().__init__(f"'{command_line}' failed with exit code {exit_code}")
        self.command_line = command_line
        self.exit_code = exit_code


# ── Artifacts ───────────────────────────────────────────────────


class ExtensionNotFoundError(InstallerError):
    """Raised when a compile produced no loadable extension."""


class StagingError(InstallerError):
    """Raised when the ext directory, an artifact or the ini cannot be written."""


# ── Configuration ───────────────────────────────────────────────


class ConfigError(InstallerError):
    """Raised when installer settings or composer metadata are invalid."""
