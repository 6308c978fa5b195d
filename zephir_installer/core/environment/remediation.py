"""
Remediation actions — what to try when a required binary is missing.

Two kinds:
    package_installer   install the distro package that ships the binary,
                        using the first package manager found on the
                        search path, after asking the user
    zephir_guidance     print how to install the zephir compiler;
                        never automated, always reports failure

Each factory returns a ``(reporter, runner) -> bool`` closure that is
registered on a Requirement via ``on_error``.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from zephir_installer.core.environment.requirement import Remediate
from zephir_installer.core.support.reporter import Reporter

if TYPE_CHECKING:
    from zephir_installer.core.environment.detectors import PlatformDetector
    from zephir_installer.core.support.commands import CommandRunner

logger = logging.getLogger(__name__)

ZEPHIR_INSTALL_URL = "https://docs.zephir-lang.com/latest/installation"

_YES = ("y", "yes")


def find_package_manager(detector: PlatformDetector) -> str | None:
    """First configured package manager present on the detector's search path."""
    for manager in detector.settings.package_managers:
        if detector.has_binary(manager):
            return manager
    return None


def _needs_sudo(detector: PlatformDetector) -> bool:
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None or geteuid() == 0:
        return False
    return detector.has_binary("sudo")


def install_command(manager: str, package: str, sudo: bool = False) -> str:
    """Non-interactive install command line for ``package``."""
    command = f"{manager} install -y {package}"
    return f"sudo {command}" if sudo else command


def package_installer(
    detector: PlatformDetector,
    packages: dict[str, str],
) -> Remediate:
    """Build a remediation that installs a distro package.

    Args:
        detector: Detector whose search path and settings decide which
            package manager is used and what the prompt defaults to.
        packages: Package name per package manager binary.  Managers
            missing from the mapping fall back to its first value.
    """

    def remediate(reporter: Reporter, runner: CommandRunner) -> bool:
        manager = find_package_manager(detector)
        if manager is None:
            tried = ", ".join(detector.settings.package_managers)
            reporter.write_error(f"    No supported package manager found (tried {tried})")
            return False

        package = packages.get(manager) or next(iter(packages.values()))
        default = "y" if detector.settings.assume_yes else "n"
        hint = "[Y/n]" if default == "y" else "[y/N]"
        answer = reporter.ask(f"    Install {package} using {manager}? {hint} ", default)
        if answer.strip().lower() not in _YES:
            reporter.write(f"    Skipped installing {package}")
            return False

        reporter.write(f"    Installing {package} using {manager}")
        command = install_command(manager, package, sudo=_needs_sudo(detector))
        code = runner.run(command)
        if code != 0:
            logger.warning("%s exited with %d", command, code)
            reporter.write_error(f"    {manager} failed with exit code {code}")
            return False
        return True

    return remediate


def zephir_guidance(detector: PlatformDetector) -> Remediate:
    """Build a remediation that only explains how to install zephir."""

    def remediate(reporter: Reporter, runner: CommandRunner) -> bool:
        reporter.write("    Zephir is not installed or not on the PATH.")
        reporter.write(f"    See {ZEPHIR_INSTALL_URL} for {detector.name} instructions,")
        reporter.write("    then run the install again.")
        return False

    return remediate
