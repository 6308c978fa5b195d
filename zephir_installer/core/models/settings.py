"""
Installer settings — the optional ``zephir-installer.yml`` file.

Every field has a default, so a project without a settings file gets
the same behaviour as an empty one.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_PACKAGE_MANAGERS = ["apt-get", "aptitude", "yum"]


class InstallerSettings(BaseModel):
    """Build and remediation policy for one project."""

    # ── Layout ───────────────────────────────────────────────────
    vendor_dir: str | None = None        # default: composer config.vendor-dir, then "vendor"
    ext_dir: str = "ext"                 # relative to the vendor dir
    ini_name: str = "zephir_extensions.ini"

    # ── Remediation policy ───────────────────────────────────────
    assume_yes: bool = False             # default answer to install prompts
    verify_remediation: bool = False     # re-run detection after a fix
    package_managers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PACKAGE_MANAGERS),
    )

    @field_validator("package_managers")
    @classmethod
    def _non_empty_names(cls, value: list[str]) -> list[str]:
        names = [v.strip() for v in value if v and v.strip()]
        if not names:
            raise ValueError("package_managers must name at least one binary")
        return names
