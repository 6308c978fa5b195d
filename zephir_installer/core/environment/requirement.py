"""
Requirement — one named capability check with an optional remediation.

A requirement pairs a detection predicate (``() -> bool``) with a
remediation action (``(reporter, runner) -> bool``).  When detection
passes the remediation is never touched.  When it fails, the
remediation decides the outcome.

Remediation success is trusted as reported unless
``verify_remediation`` is set, in which case detection runs once more.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from zephir_installer.core.errors import CommandSpawnError
from zephir_installer.core.support.reporter import Reporter

if TYPE_CHECKING:
    from zephir_installer.core.support.commands import CommandRunner

logger = logging.getLogger(__name__)

Detect = Callable[[], bool]
Remediate = Callable[[Reporter, "CommandRunner"], bool]

STATUS_CHECKING = "checking..."
STATUS_OK = "OK"
STATUS_FAIL = "Fail"


def no_remediation(reporter: Reporter, runner: CommandRunner) -> bool:
    """Default remediation: nothing to try."""
    return False


def status_line(name: str, status: str) -> str:
    """Format the single rewritable status line of a requirement."""
    return f"  - {name}: {status}"


@dataclass
class Requirement:
    """A named check that can optionally try to fix itself."""

    name: str
    detect: Detect
    remediate: Remediate = no_remediation
    verify_remediation: bool = False

    def on_error(self, remediate: Remediate) -> Requirement:
        """Register the remediation to run when detection fails."""
        self.remediate = remediate
        return self

    @property
    def has_remediation(self) -> bool:
        return self.remediate is not no_remediation

    def check(self, reporter: Reporter, runner: CommandRunner) -> bool:
        """Evaluate the requirement, remediating on failure.

        Args:
            reporter: Sink for the status line and remediation output.
            runner: Command runner handed to the remediation.

        Returns:
            True when the capability is present or was remediated.
        """
        if self.detect():
            reporter.overwrite(status_line(self.name, STATUS_OK))
            return True

        reporter.overwrite(status_line(self.name, STATUS_FAIL))
        if not self.has_remediation:
            return False

        logger.info("Remediating requirement %s", self.name)
        try:
            passed = bool(self.remediate(reporter, runner))
        except CommandSpawnError as e:
            reporter.write_error(f"    {e}")
            passed = False

        if passed and self.verify_remediation:
            passed = bool(self.detect())
            if not passed:
                logger.warning(
                    "Remediation of %s reported success but detection still fails",
                    self.name,
                )

        reporter.write(status_line(self.name, STATUS_OK if passed else STATUS_FAIL))
        return passed
