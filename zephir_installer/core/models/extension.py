"""
Extension config — one declared Zephir build found in composer metadata.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class ExtensionConfig(BaseModel):
    """A ``config.json`` declared under ``extra.zephir`` by some package."""

    package: str          # composer package name that declared it
    config_path: Path     # absolute path to the zephir config.json
    display_path: str     # short form for output (~/..., ~/vendor/...)

    @property
    def source_dir(self) -> Path:
        """Directory the zephir compiler runs in."""
        return self.config_path.parent

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "config_path": str(self.config_path),
            "display_path": self.display_path,
        }
