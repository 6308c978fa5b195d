"""
Settings loader — reads zephir-installer.yml into InstallerSettings.

The file is optional.  A project without one gets the defaults; a
project with an invalid one gets a ConfigError, never silent defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from zephir_installer.core.errors import ConfigError
from zephir_installer.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

# Default settings filename
SETTINGS_FILE = "zephir-installer.yml"


def find_settings_file(project_root: Path) -> Path | None:
    """Return the settings file in ``project_root``, or None."""
    candidate = project_root / SETTINGS_FILE
    return candidate if candidate.is_file() else None


def load_settings(path: Path | None = None, project_root: Path | None = None) -> InstallerSettings:
    """Load and validate installer settings.

    Args:
        path: Explicit settings file.  Must exist when given.
        project_root: Where to look for the default file when ``path`` is None.

    Returns:
        Validated InstallerSettings (defaults when no file is found).

    Raises:
        ConfigError: If the file is missing (explicit path) or invalid.
    """
    if path is None:
        path = find_settings_file(project_root or Path.cwd())
        if path is None:
            logger.debug("No %s found, using defaults", SETTINGS_FILE)
            return InstallerSettings()
    elif not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return InstallerSettings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return InstallerSettings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid installer settings in {path}: {e}") from e
