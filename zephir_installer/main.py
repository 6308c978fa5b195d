"""
zephir-installer — CLI entrypoint.

Wire it into composer.json so it runs after every install/update:

    "scripts": {
        "post-install-cmd": "zephir-installer install",
        "post-update-cmd": "zephir-installer install"
    }

Usage:
    zephir-installer --help
    zephir-installer install
    zephir-installer env check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from zephir_installer import __version__
from zephir_installer.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="zephir-installer")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to zephir-installer.yml (default: <project-dir>/zephir-installer.yml).",
)
@click.option(
    "--project-dir",
    "-d",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the root composer.json (default: cwd).",
)
@click.option(
    "--no-interaction",
    "-n",
    is_flag=True,
    help="Never prompt; use the configured default answers.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    project_dir: str | None,
    no_interaction: bool,
) -> None:
    """zephir-installer — compile Zephir extensions after Composer installs."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["project_dir"] = Path(project_dir).resolve() if project_dir else Path.cwd()
    ctx.obj["interactive"] = not no_interaction

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(resolve_level(debug=debug, verbose=verbose, quiet=quiet))


def load_context_settings(ctx: click.Context):
    """Load settings for the current invocation, exiting on a bad file."""
    from zephir_installer.core.config.loader import load_settings
    from zephir_installer.core.errors import ConfigError

    try:
        return load_settings(ctx.obj.get("config_path"), ctx.obj["project_dir"])
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, as_json: bool) -> None:
    """Check the toolchain, compile every declared extension, write the ini."""
    from zephir_installer.core.errors import CompileError, InstallerError
    from zephir_installer.core.support.commands import CommandRunner
    from zephir_installer.core.use_cases.install import run_install
    from zephir_installer.ui.cli.reporter import ClickReporter

    settings = load_context_settings(ctx)
    reporter = ClickReporter(interactive=ctx.obj["interactive"], err=as_json)
    runner = CommandRunner(reporter)

    try:
        result = run_install(ctx.obj["project_dir"], reporter, runner, settings)
    except CompileError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(e.exit_code or 1)
    except InstallerError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def configs(ctx: click.Context, as_json: bool) -> None:
    """List the Zephir configs declared by the root package and its dependencies."""
    from zephir_installer.core.errors import ConfigError
    from zephir_installer.core.use_cases.install import discover_configs

    settings = load_context_settings(ctx)
    try:
        vendor_dir, found = discover_configs(ctx.obj["project_dir"], settings)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(
            {"vendor_dir": str(vendor_dir), "configs": [c.to_dict() for c in found]},
            indent=2,
        ))
        return

    if not found:
        click.secho("⚠️  No zephir configs declared", fg="yellow")
        return

    for config in found:
        click.echo(f"  - Zephir {config.package} ({config.display_path})")


# ── Sub-groups ──────────────────────────────────────────────────

from zephir_installer.ui.cli.env import env  # noqa: E402

cli.add_command(env)


if __name__ == "__main__":
    cli()
