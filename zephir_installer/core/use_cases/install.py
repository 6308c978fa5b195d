"""
Install use case — the post-install / post-update pipeline.

    discover configs ─▶ for each: check environment (once) ─▶ compile
                     ─▶ stage artifact ─▶ write ini manifest

Nothing is compiled unless the environment check passed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from zephir_installer.core.config.composer import (
    iter_extension_configs,
    read_composer_json,
    resolve_vendor_dir,
)
from zephir_installer.core.environment.orchestrator import EnvironmentCheck
from zephir_installer.core.errors import BrokenEnvironmentError
from zephir_installer.core.models.extension import ExtensionConfig
from zephir_installer.core.models.settings import InstallerSettings
from zephir_installer.core.services.extension_ops import (
    compile_extension,
    create_ini_file,
    prepare_ext_dir,
    save_extension,
)
from zephir_installer.core.support.commands import CommandRunner
from zephir_installer.core.support.reporter import Reporter

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """What an install run produced."""

    ext_dir: Path
    ini_path: Path | None = None
    extensions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "ext_dir": str(self.ext_dir),
            "ini_path": str(self.ini_path) if self.ini_path else None,
            "extensions": self.extensions,
        }


def discover_configs(
    project_root: Path,
    settings: InstallerSettings,
) -> tuple[Path, list[ExtensionConfig]]:
    """Return the vendor dir and every declared extension config."""
    composer = read_composer_json(project_root)
    vendor_dir = resolve_vendor_dir(project_root, composer, settings)
    configs = list(iter_extension_configs(project_root, vendor_dir, composer))
    logger.info("Found %d zephir config(s) under %s", len(configs), project_root)
    return vendor_dir, configs


def run_install(
    project_root: Path,
    reporter: Reporter,
    runner: CommandRunner,
    settings: InstallerSettings | None = None,
    environment: EnvironmentCheck | None = None,
) -> InstallResult:
    """Compile and stage every declared extension.

    Args:
        project_root: Directory holding the root composer.json.
        reporter: User-facing output.
        runner: Runs the zephir compiler.
        settings: Installer settings (defaults when None).
        environment: Environment check to gate compilation on; a fresh
            one for the running host when None.

    Raises:
        BrokenEnvironmentError: If the toolchain check failed.
        CompileError / ExtensionNotFoundError / StagingError: From the
            individual pipeline steps.
    """
    settings = settings or InstallerSettings()
    if environment is None:
        environment = EnvironmentCheck(reporter, runner, settings=settings)

    vendor_dir, configs = discover_configs(project_root, settings)
    result = InstallResult(ext_dir=prepare_ext_dir(vendor_dir, settings.ext_dir))

    for config in configs:
        reporter.write(f"  - Zephir {config.package} ({config.display_path})")

        if not environment.check_once():
            raise BrokenEnvironmentError(
                f"Can not compile {config.package} sources. "
                "Broken environment configuration."
            )

        artifact = compile_extension(config, runner, reporter)
        result.extensions.append(save_extension(artifact, result.ext_dir, reporter))

    result.ini_path = create_ini_file(
        result.extensions, result.ext_dir, settings.ini_name, reporter,
    )
    reporter.write(f"Do not forget include {settings.ini_name} and restart server.")
    return result
