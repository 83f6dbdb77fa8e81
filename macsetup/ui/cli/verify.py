"""
CLI command: ``macsetup verify`` — smoke-test installed components.
"""

from __future__ import annotations

import json
import sys

import click

from macsetup.core.engine.driver import Selection
from macsetup.core.engine.errors import InvalidSelectionError
from macsetup.core.observability.health import HEALTHY, UNHEALTHY
from macsetup.ui.cli.common import build_provisioner

_ICONS = {"healthy": "✅", "degraded": "⚠️ ", "unhealthy": "❌"}


@click.command()
@click.argument("names", nargs=-1)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def verify(ctx: click.Context, names: tuple[str, ...], as_json: bool) -> None:
    """Check that components are installed and configured."""
    selection = Selection.named(names) if names else Selection.all()
    provisioner = build_provisioner(ctx, dry_run=False, skip_checks=True)

    try:
        system = provisioner.verify(selection)
    except InvalidSelectionError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)

    if as_json:
        click.echo(json.dumps(system.to_dict(), indent=2))
        sys.exit(1 if system.status == UNHEALTHY else 0)

    click.secho("🔍 Verification", fg="cyan", bold=True)
    for health in system.components:
        icon = _ICONS.get(health.status, "•")
        click.echo(f"   {icon} {health.name:<10} {health.message}")
        for warning in health.warnings:
            click.secho(f"      ⚠ {warning}", fg="yellow")

    click.echo()
    color = "green" if system.status == HEALTHY else "yellow" if system.failed == 0 else "red"
    click.secho(f"   Passed: {system.passed}  Failed: {system.failed}", fg=color, bold=True)
    click.echo()

    if system.status == UNHEALTHY:
        sys.exit(1)
