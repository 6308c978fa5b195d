"""
Environment check — run the platform requirements once per process.

The first ``check_once()`` creates the detector, evaluates every
requirement (never stopping at the first failure, so the user sees
the whole picture) and stores the report.  Every later call returns
the stored result without touching the host again.

State is an explicit token:

    NotChecked  ──check_once()──▶  Checked(report)

A detection error (unknown OS, unimplemented platform) propagates and
leaves the state at NotChecked.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from zephir_installer.core.environment.detectors import PlatformDetector
from zephir_installer.core.environment.factory import create_detector
from zephir_installer.core.environment.requirement import STATUS_CHECKING, status_line
from zephir_installer.core.models.settings import InstallerSettings
from zephir_installer.core.support.commands import CommandRunner
from zephir_installer.core.support.reporter import Reporter

logger = logging.getLogger(__name__)

DetectorFactory = Callable[..., PlatformDetector]


@dataclass
class RequirementStatus:
    """Outcome of one requirement."""

    name: str
    passed: bool

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "passed": self.passed}


@dataclass
class EnvironmentReport:
    """Aggregate outcome of a full requirement pass."""

    platform: str
    requirements: list[RequirementStatus] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.passed for r in self.requirements)

    @property
    def failed(self) -> list[str]:
        return [r.name for r in self.requirements if not r.passed]

    def to_dict(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "ok": self.ok,
            "requirements": [r.to_dict() for r in self.requirements],
        }


class NotChecked:
    """State token: no check has run in this process yet."""


@dataclass(frozen=True)
class Checked:
    """State token: the check ran and produced ``report``."""

    report: EnvironmentReport


class EnvironmentCheck:
    """Memoized build-environment check."""

    def __init__(
        self,
        reporter: Reporter,
        runner: CommandRunner,
        os_identifier: str | None = None,
        environ: Mapping[str, str] | None = None,
        settings: InstallerSettings | None = None,
        detector_factory: DetectorFactory = create_detector,
    ) -> None:
        self.reporter = reporter
        self.runner = runner
        self.os_identifier = os_identifier
        self.environ = environ
        self.settings = settings
        self.detector_factory = detector_factory
        self._state: NotChecked | Checked = NotChecked()

    @property
    def checked(self) -> bool:
        return isinstance(self._state, Checked)

    @property
    def report(self) -> EnvironmentReport | None:
        """The stored report, or None before the first check."""
        if isinstance(self._state, Checked):
            return self._state.report
        return None

    def check_once(self) -> bool:
        """Run the check on first call; return the stored result afterwards.

        Returns:
            True when every requirement passed (directly or remediated).

        Raises:
            EnvironmentDetectionError: Unknown host OS.
            PlatformNotImplementedError: Recognised but unsupported host.
        """
        if isinstance(self._state, Checked):
            logger.debug("Environment already checked (ok=%s)", self._state.report.ok)
            return self._state.report.ok

        report = self._run()
        self._state = Checked(report)
        return report.ok

    def _run(self) -> EnvironmentReport:
        detector = self.detector_factory(
            self.os_identifier, environ=self.environ, settings=self.settings,
        )
        requirements = detector.requirements()

        self.reporter.write(f"Checking {detector.name} environment...")
        report = EnvironmentReport(platform=detector.name)

        for requirement in requirements:
            self.reporter.write(
                status_line(requirement.name, STATUS_CHECKING), newline=False,
            )
            passed = requirement.check(self.reporter, self.runner)
            report.requirements.append(RequirementStatus(requirement.name, passed))

        if report.ok:
            logger.info("%s environment OK", detector.name)
        else:
            logger.warning(
                "%s environment is missing: %s", detector.name, ", ".join(report.failed),
            )
        return report
