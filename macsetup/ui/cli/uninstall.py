"""
CLI command: ``macsetup uninstall``.

Removes packages, their profile lines (after a backup) and their
config files. Homebrew, Git, Go and iTerm2 are never removed.
"""

from __future__ import annotations

import sys

import click

from macsetup.core.engine.driver import UNINSTALL, Selection
from macsetup.core.engine.errors import InvalidSelectionError, PreconditionError
from macsetup.ui.cli.common import build_provisioner, print_summary, start_run_log


@click.command()
@click.argument("names", nargs=-1)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.option("--dry-run", is_flag=True, help="Log what would happen without changing anything.")
@click.option(
    "--skip-checks",
    is_flag=True,
    envvar="MACSETUP_SKIP_CHECKS",
    help="Skip the macOS / root / Homebrew preflight.",
)
@click.pass_context
def uninstall(
    ctx: click.Context,
    names: tuple[str, ...],
    yes: bool,
    dry_run: bool,
    skip_checks: bool,
) -> None:
    """Remove components (vscode, singbox, nodejs, rust, java by default)."""
    selection = Selection.named(names) if names else Selection.all()
    provisioner = build_provisioner(ctx, dry_run=dry_run, skip_checks=skip_checks)

    try:
        components = provisioner.resolve(selection, action=UNINSTALL) or []
    except InvalidSelectionError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)

    if not yes and not dry_run:
        click.secho("This will remove:", fg="yellow", bold=True)
        for component in components:
            click.echo(f"   • {component.name}")
        if not click.confirm("Continue?", default=False):
            click.secho("⏹  Cancelled, nothing was changed", fg="yellow")
            return

    start_run_log(ctx)
    try:
        summary = provisioner.uninstall(selection)
    except PreconditionError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    print_summary(summary, dry_run=dry_run)
    if summary.succeeded and not dry_run:
        click.echo("   Restart your terminal or source your shell profile to apply the changes.")
