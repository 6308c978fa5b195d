"""
Composer metadata — where Zephir builds are declared.

A package declares one or more zephir ``config.json`` files under
``extra.zephir`` in its composer.json:

    "extra": {"zephir": "ext/config.json"}
    "extra": {"zephir": ["a/config.json", "b/config.json"]}

The root package's paths are relative to the project root; installed
packages (read from ``<vendor>/composer/installed.json``) are relative
to ``<vendor>/<package-name>``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from zephir_installer.core.errors import ConfigError
from zephir_installer.core.models.extension import ExtensionConfig
from zephir_installer.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

COMPOSER_FILE = "composer.json"
INSTALLED_FILE = "composer/installed.json"
DEFAULT_VENDOR_DIR = "vendor"
EXTRA_KEY = "zephir"


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e


def read_composer_json(project_root: Path) -> dict[str, Any]:
    """Load the root composer.json (empty mapping when absent)."""
    path = project_root / COMPOSER_FILE
    if not path.is_file():
        logger.debug("No %s in %s", COMPOSER_FILE, project_root)
        return {}
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a JSON object in {path}")
    return data


def resolve_vendor_dir(
    project_root: Path,
    composer: dict[str, Any],
    settings: InstallerSettings | None = None,
) -> Path:
    """Vendor directory: settings, then composer ``config.vendor-dir``, then ``vendor``."""
    configured = settings.vendor_dir if settings else None
    if not configured:
        config = composer.get("config")
        if isinstance(config, dict):
            configured = config.get("vendor-dir")
    vendor = Path(configured or DEFAULT_VENDOR_DIR)
    if not vendor.is_absolute():
        vendor = project_root / vendor
    return vendor.resolve()


def extra_configs(package: dict[str, Any]) -> list[str]:
    """The ``extra.zephir`` entries of one package, as a list."""
    extra = package.get("extra")
    if not isinstance(extra, dict) or EXTRA_KEY not in extra:
        return []
    value = extra[EXTRA_KEY]
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str) and v]
    logger.warning(
        "Ignoring extra.%s of %s: expected string or list",
        EXTRA_KEY, package.get("name", "<root>"),
    )
    return []


def installed_packages(vendor_dir: Path) -> list[dict[str, Any]]:
    """Packages recorded by Composer in ``installed.json`` (v1 and v2 layouts)."""
    path = vendor_dir / INSTALLED_FILE
    if not path.is_file():
        return []
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("packages", [])
    if not isinstance(data, list):
        raise ConfigError(f"Unexpected layout in {path}")
    return [p for p in data if isinstance(p, dict)]


def iter_extension_configs(
    project_root: Path,
    vendor_dir: Path,
    composer: dict[str, Any] | None = None,
) -> Iterator[ExtensionConfig]:
    """Yield every declared Zephir build: root package first, then dependencies."""
    if composer is None:
        composer = read_composer_json(project_root)

    root_name = composer.get("name") or project_root.name
    for config in extra_configs(composer):
        yield ExtensionConfig(
            package=root_name,
            config_path=(project_root / config).resolve(),
            display_path=f"~/{config}",
        )

    for package in installed_packages(vendor_dir):
        name = package.get("name")
        if not name:
            continue
        for config in extra_configs(package):
            relative = f"{name}/{config}"
            yield ExtensionConfig(
                package=name,
                config_path=(vendor_dir / relative).resolve(),
                display_path=f"~/{vendor_dir.name}/{relative}",
            )
