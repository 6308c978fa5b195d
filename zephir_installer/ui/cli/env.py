"""
CLI commands for the build environment.

Thin wrappers over ``zephir_installer.core.environment``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def env() -> None:
    """Build environment — check requirements, show search paths."""


@env.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--os", "os_identifier", default=None, help="Host OS name (default: this host).")
@click.pass_context
def check(ctx: click.Context, as_json: bool, os_identifier: str | None) -> None:
    """Check that every required build tool is installed."""
    from zephir_installer.core.environment.orchestrator import EnvironmentCheck
    from zephir_installer.core.errors import EnvironmentCheckError
    from zephir_installer.core.support.commands import CommandRunner
    from zephir_installer.main import load_context_settings
    from zephir_installer.ui.cli.reporter import ClickReporter

    settings = load_context_settings(ctx)
    # JSON mode must not interleave prompts with the document
    reporter = ClickReporter(
        interactive=ctx.obj["interactive"] and not as_json, err=as_json,
    )
    check_env = EnvironmentCheck(
        reporter, CommandRunner(reporter),
        os_identifier=os_identifier, settings=settings,
    )

    try:
        ok = check_env.check_once()
    except EnvironmentCheckError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    report = check_env.report
    if as_json and report is not None:
        click.echo(json.dumps(report.to_dict(), indent=2))
    elif ok:
        click.secho("✅ Environment OK", fg="green", bold=True)
    else:
        click.secho("❌ Broken environment configuration", fg="red", bold=True)

    sys.exit(0 if ok else 1)


@env.command()
@click.option("--os", "os_identifier", default=None, help="Host OS name (default: this host).")
@click.pass_context
def paths(ctx: click.Context, os_identifier: str | None) -> None:
    """Show the directories searched for build tools."""
    from zephir_installer.core.environment.factory import create_detector
    from zephir_installer.core.errors import EnvironmentCheckError
    from zephir_installer.main import load_context_settings

    settings = load_context_settings(ctx)
    try:
        detector = create_detector(os_identifier, settings=settings)
    except EnvironmentCheckError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    click.secho(f"{detector.name} search paths:", fg="cyan", bold=True)
    for path in detector.search_paths():
        click.echo(f"   {path}")
