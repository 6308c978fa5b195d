"""
Platform detectors — what a build host must provide, per OS.

One ``PlatformDetector`` dataclass covers every platform.  The
``Platform`` tag selects the search-path convention and the
requirement list:

    Linux    PATH split on ":"            gcc, make, sed, re2c, phpize, zephir
    Windows  PATH split on ";" + PHP_SDK   cl.exe, nmake.exe, ... zephir.bat
             + PHP_DEVPACK
    Darwin   PATH split on ":"            not implemented (raises)

Binary lookup is literal: a binary exists when a regular
file with exactly that name sits directly in one of the search-path
directories.  Windows callers ask for ``x.exe`` / ``x.bat`` themselves.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from zephir_installer.core.environment.remediation import (
    package_installer,
    zephir_guidance,
)
from zephir_installer.core.environment.requirement import Requirement
from zephir_installer.core.errors import PlatformNotImplementedError
from zephir_installer.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)


class Platform(str, Enum):
    LINUX = "linux"
    WINDOWS = "windows"
    DARWIN = "darwin"


_PLATFORM_NAMES = {
    Platform.LINUX: "Linux",
    Platform.WINDOWS: "Windows",
    Platform.DARWIN: "Mac OS",
}

# Distro package that provides each remediable binary, per package manager.
LINUX_PACKAGES: dict[str, dict[str, str]] = {
    "re2c": {"apt-get": "re2c", "aptitude": "re2c", "yum": "re2c"},
    "phpize": {"apt-get": "php-dev", "aptitude": "php-dev", "yum": "php-devel"},
}

WINDOWS_BINARIES = [
    # Compiler
    "cl.exe",
    # PHP sources
    "buildconf.bat",
    "configure.bat",
    # PHP SDK
    "link.exe",
    "nmake.exe",
    "lib.exe",
    "bison.exe",
    "sed.exe",
    "re2c.exe",
    "zip.exe",
    # PHP devpack
    "phpize.bat",
]


def env_lookup(environ: Mapping[str, str], name: str) -> str:
    """Case-insensitive environment variable lookup (``Path`` == ``PATH``)."""
    if name in environ:
        return environ[name]
    wanted = name.lower()
    for key, value in environ.items():
        if key.lower() == wanted:
            return value
    return ""


def split_paths(value: str, separator: str) -> list[str]:
    """Split a path list, dropping empty entries."""
    return [p for p in value.split(separator) if p.strip()]


@dataclass
class PlatformDetector:
    """Requirement policy and binary lookup for one platform."""

    platform: Platform
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    settings: InstallerSettings = field(default_factory=InstallerSettings)

    @property
    def name(self) -> str:
        return _PLATFORM_NAMES[self.platform]

    # ── Search paths ────────────────────────────────────────────

    def search_paths(self) -> list[str]:
        """Directories consulted by ``has_binary``, in order."""
        if self.platform is Platform.WINDOWS:
            paths = split_paths(env_lookup(self.environ, "PATH"), ";")
            for var in ("PHP_SDK", "PHP_DEVPACK"):
                extra = env_lookup(self.environ, var)
                if extra.strip():
                    paths.append(extra)
            return paths
        return split_paths(env_lookup(self.environ, "PATH"), ":")

    def has_binary(self, binary: str) -> bool:
        """True if ``binary`` is a regular file directly in a search path."""
        for path in self.search_paths():
            if os.path.isfile(os.path.join(path, binary)):
                return True
        return False

    # ── Requirements ────────────────────────────────────────────

    def requirements(self) -> list[Requirement]:
        """Build the ordered requirement list for this platform.

        Raises:
            PlatformNotImplementedError: On Darwin.
        """
        if self.platform is Platform.LINUX:
            return self._linux_requirements()
        if self.platform is Platform.WINDOWS:
            return self._windows_requirements()
        if self.platform is Platform.DARWIN:
            raise PlatformNotImplementedError(
                f"{self.name} environment detection is not implemented yet"
            )
        raise PlatformNotImplementedError(f"No requirements for {self.platform!r}")

    def _binary(self, name: str, binary: str | None = None) -> Requirement:
        binary = binary or name
        return Requirement(
            name=name,
            detect=lambda: self.has_binary(binary),
            verify_remediation=self.settings.verify_remediation,
        )

    def _linux_requirements(self) -> list[Requirement]:
        return [
            # Compiler (also drives the linker)
            self._binary("gcc"),
            # Build tools
            self._binary("make"),
            self._binary("sed"),
            self._binary("re2c").on_error(
                package_installer(self, LINUX_PACKAGES["re2c"])
            ),
            # PHP dev headers
            self._binary("phpize").on_error(
                package_installer(self, LINUX_PACKAGES["phpize"])
            ),
            # Zephir
            self._binary("zephir").on_error(zephir_guidance(self)),
        ]

    def _windows_requirements(self) -> list[Requirement]:
        requirements = [
            self._binary(binary.rsplit(".", 1)[0], binary)
            for binary in WINDOWS_BINARIES
        ]
        requirements.append(
            self._binary("zephir", "zephir.bat").on_error(zephir_guidance(self))
        )
        return requirements
