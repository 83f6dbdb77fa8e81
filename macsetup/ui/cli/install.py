"""
CLI command: ``macsetup install``.

Thin wrapper over ``macsetup.core.engine.driver.Provisioner.install``.
"""

from __future__ import annotations

import sys

import click

from macsetup.core.engine.driver import Selection
from macsetup.core.engine.errors import InvalidSelectionError, PreconditionError
from macsetup.core.engine.registry import build_default_registry
from macsetup.ui.cli.common import build_provisioner, print_summary, start_run_log
from macsetup.ui.cli.selection import prompt_checklist


@click.command()
@click.argument("names", nargs=-1)
@click.option("--list", "list_only", is_flag=True, help="List components and exit.")
@click.option("--selective", "-s", is_flag=True, help="Choose components from a checklist.")
@click.option("--dry-run", is_flag=True, help="Log what would happen without changing anything.")
@click.option(
    "--skip-checks",
    is_flag=True,
    envvar="MACSETUP_SKIP_CHECKS",
    help="Skip the macOS / root / Homebrew preflight.",
)
@click.pass_context
def install(
    ctx: click.Context,
    names: tuple[str, ...],
    list_only: bool,
    selective: bool,
    dry_run: bool,
    skip_checks: bool,
) -> None:
    """Install components (all of them when no NAMES are given)."""
    if list_only:
        click.secho("📦 Components (install order):", fg="cyan", bold=True)
        for component in build_default_registry():
            click.echo(f"   • {component.name:<10} {component.description}")
        return

    if selective and names:
        raise click.UsageError("--selective cannot be combined with component names")

    if selective:
        selection = Selection.interactive()
    elif names:
        selection = Selection.named(names)
    else:
        selection = Selection.all()

    start_run_log(ctx)
    provisioner = build_provisioner(ctx, dry_run=dry_run, skip_checks=skip_checks)

    try:
        summary = provisioner.install(selection, chooser=prompt_checklist)
    except InvalidSelectionError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        click.echo("   Run 'macsetup install --list' to see available components.", err=True)
        sys.exit(2)
    except PreconditionError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    print_summary(summary, dry_run=dry_run)
