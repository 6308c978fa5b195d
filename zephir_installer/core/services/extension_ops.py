"""
Extension operations — compile, locate, stage, and register extensions.

    prepare_ext_dir     create <vendor>/ext
    compile_extension   zephir fullclean + zephir compile, then locate
    find_extension      first *.so, then *.dll, in <config dir>/ext/modules
    save_extension      copy the artifact into <vendor>/ext
    create_ini_file     write the loader manifest listing every artifact
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from zephir_installer.core.errors import (
    CompileError,
    ExtensionNotFoundError,
    StagingError,
)
from zephir_installer.core.models.extension import ExtensionConfig
from zephir_installer.core.support.commands import CommandRunner
from zephir_installer.core.support.reporter import Reporter

logger = logging.getLogger(__name__)

COMPILE_STEPS = ("zephir fullclean", "zephir compile")
MODULES_DIR = Path("ext") / "modules"
EXTENSION_PATTERNS = ("*.so", "*.dll")


def prepare_ext_dir(vendor_dir: Path, name: str = "ext") -> Path:
    """Create (if needed) and return the staging directory.

    Raises:
        StagingError: If the directory cannot be created.
    """
    ext_dir = vendor_dir / name
    try:
        ext_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StagingError(f"Can not create {ext_dir} directory: {e}") from e
    return ext_dir


def compile_extension(
    config: ExtensionConfig,
    runner: CommandRunner,
    reporter: Reporter,
) -> Path:
    """Compile one extension and return the produced artifact.

    Raises:
        CompileError: If a zephir step exits non-zero.
        ExtensionNotFoundError: If no artifact was produced.
        CommandSpawnError: If zephir cannot be started.
    """
    reporter.write("Compiling...")
    for step in COMPILE_STEPS:
        code = runner.run(step, config.source_dir)
        if code != 0:
            raise CompileError(step, code)

    return find_extension(config.source_dir / MODULES_DIR)


def find_extension(modules_dir: Path) -> Path:
    """Return the first compiled extension in ``modules_dir``.

    Raises:
        ExtensionNotFoundError: If there is none.
    """
    for pattern in EXTENSION_PATTERNS:
        matches = sorted(p for p in modules_dir.glob(pattern) if p.is_file())
        if matches:
            logger.debug("Found extension %s", matches[0])
            return matches[0]
    raise ExtensionNotFoundError(f"Could not find extension in {modules_dir}")


def save_extension(artifact: Path, ext_dir: Path, reporter: Reporter) -> str:
    """Copy ``artifact`` into ``ext_dir``, replacing a previous version.

    Returns:
        The artifact's file name.

    Raises:
        StagingError: If the old copy can't be removed or the new one written.
    """
    name = artifact.name
    dest = ext_dir / name
    reporter.write(f"Copying extension {name} into {dest}")

    try:
        dest.unlink(missing_ok=True)
    except OSError as e:
        raise StagingError(f"Could not delete previous version of {name}: {e}") from e

    try:
        shutil.copyfile(artifact, dest)
    except OSError as e:
        raise StagingError(f"Could not create a new version of {name}: {e}") from e

    return name


def ini_body(names: list[str]) -> str:
    """Loader manifest contents: one ``extension=./<name>`` line per artifact."""
    return "\n".join(f"extension=./{name}" for name in names)


def create_ini_file(
    names: list[str],
    ext_dir: Path,
    ini_name: str,
    reporter: Reporter,
) -> Path:
    """Write the loader manifest, replacing any previous one.

    Raises:
        StagingError: If the file cannot be replaced.
    """
    ini = ext_dir / ini_name
    try:
        ini.unlink(missing_ok=True)
        ini.write_text(ini_body(names), encoding="utf-8")
    except OSError as e:
        raise StagingError(f"Could not write {ini}: {e}") from e

    reporter.write(f"Creating ({ini})")
    return ini
