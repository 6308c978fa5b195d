"""
Detector factory — map the host OS identifier to a PlatformDetector.

Classification (case-insensitive, first match wins):
    linux | unix | freebsd          exact   → Linux
    win* | cygwin*                  prefix  → Windows
    darwin | mac                    exact   → Darwin

Anything else is an error.  There is no default platform.
"""

from __future__ import annotations

import logging
import platform
from collections.abc import Mapping

from zephir_installer.core.environment.detectors import Platform, PlatformDetector
from zephir_installer.core.errors import EnvironmentDetectionError
from zephir_installer.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

_LINUX_NAMES = ("linux", "unix", "freebsd")
_WINDOWS_PREFIXES = ("win", "cygwin")
_DARWIN_NAMES = ("darwin", "mac")


def classify(os_identifier: str) -> Platform:
    """Return the platform for ``os_identifier``.

    Raises:
        EnvironmentDetectionError: If the identifier matches no platform.
    """
    lowered = os_identifier.strip().lower()
    if lowered in _LINUX_NAMES:
        return Platform.LINUX
    if lowered.startswith(_WINDOWS_PREFIXES):
        return Platform.WINDOWS
    if lowered in _DARWIN_NAMES:
        return Platform.DARWIN
    raise EnvironmentDetectionError(
        f"Can not detect environment. Invalid operating system {os_identifier}"
    )


def create_detector(
    os_identifier: str | None = None,
    environ: Mapping[str, str] | None = None,
    settings: InstallerSettings | None = None,
) -> PlatformDetector:
    """Create the detector for the given (or running) host.

    Args:
        os_identifier: Host OS name; defaults to ``platform.system()``.
        environ: Environment variables; defaults to ``os.environ``.
        settings: Installer settings; defaults to built-in defaults.
    """
    if os_identifier is None:
        os_identifier = platform.system()

    detected = classify(os_identifier)
    logger.debug("Host %r classified as %s", os_identifier, detected.value)

    kwargs: dict = {"platform": detected}
    if environ is not None:
        kwargs["environ"] = environ
    if settings is not None:
        kwargs["settings"] = settings
    return PlatformDetector(**kwargs)
