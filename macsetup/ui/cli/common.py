"""
Shared CLI plumbing — run log, provisioner wiring, summary output.

The command modules stay thin: they parse options, call into
``macsetup.core.engine`` and hand the result to the printers here.
"""

from __future__ import annotations

import os

import click

from macsetup.adapters import CommandRunner, MockRunner, homebrew_env
from macsetup.core.config.loader import Settings
from macsetup.core.engine.context import ProvisionContext
from macsetup.core.engine.driver import Provisioner
from macsetup.core.engine.registry import build_default_registry
from macsetup.core.models.summary import RunSummary
from macsetup.core.observability.logging_config import (
    current_log_file,
    run_log_path,
    setup_logging,
)

_STATUS_STYLE = {
    "ok": ("✅", "green"),
    "partial": ("⚠️ ", "yellow"),
    "failed": ("❌", "red"),
    "cancelled": ("⏹ ", "yellow"),
}


def get_settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def start_run_log(ctx: click.Context) -> None:
    """Attach the per-run log file (``macOS_setup_*.log``) to logging."""
    settings = get_settings(ctx)
    log_file = os.environ.get("MACSETUP_LOG_FILE") or run_log_path(settings.log_dir)
    setup_logging(
        level=ctx.obj["log_level"],
        log_file=log_file,
        log_file_level=os.environ.get("MACSETUP_LOG_FILE_LEVEL"),
    )


def build_provisioner(ctx: click.Context, *, dry_run: bool, skip_checks: bool) -> Provisioner:
    """Wire settings, runner and registry into a Provisioner.

    ``--dry-run`` swaps the shell runner for an announcing MockRunner
    and suppresses every file write.
    """
    settings = get_settings(ctx)
    if dry_run:
        runner = MockRunner(announce=True)
    else:
        runner = CommandRunner(settings.retry.policy(), env=homebrew_env())
    pctx = ProvisionContext(settings=settings, runner=runner, dry_run=dry_run)
    return Provisioner(build_default_registry(), pctx, check_preconditions=not skip_checks)


def print_summary(summary: RunSummary, *, dry_run: bool = False) -> None:
    """Human-readable run summary with a re-run hint per failure."""
    icon, color = _STATUS_STYLE.get(summary.status, ("•", "white"))

    if summary.cancelled:
        click.secho(f"{icon} Cancelled, nothing was changed", fg=color)
        return

    title = summary.action.capitalize()
    if dry_run:
        title += " (dry run)"
    click.echo()
    click.secho(f"📋 {title} summary", fg="cyan", bold=True)
    click.echo(f"   Total:     {summary.total}")
    click.secho(f"   Succeeded: {len(summary.succeeded)}", fg="green")
    if summary.failed:
        click.secho(f"   Failed:    {len(summary.failed)}", fg="red")
        click.echo()
        for attempt in summary.attempts:
            if attempt.ok:
                continue
            click.secho(f"   ✗ {attempt.component}", fg="red", nl=False)
            click.echo(f" — {attempt.error}" if attempt.error else "")
            click.echo(f"     retry with: {summary.rerun_command(attempt.component)}")

    click.echo()
    click.secho(f"{icon} {title} {summary.status}", fg=color, bold=True)

    log_file = current_log_file()
    if log_file is not None and log_file.exists():
        click.echo(f"   Log: {log_file}")
    click.echo()
