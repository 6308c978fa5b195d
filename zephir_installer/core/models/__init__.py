"""
Domain models — Pydantic types for the installer.

    from zephir_installer.core.models import ExtensionConfig, InstallerSettings
"""

from zephir_installer.core.models.extension import ExtensionConfig
from zephir_installer.core.models.settings import (
    DEFAULT_PACKAGE_MANAGERS,
    InstallerSettings,
)

__all__ = [
    "DEFAULT_PACKAGE_MANAGERS",
    "ExtensionConfig",
    "InstallerSettings",
]
