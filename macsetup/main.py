"""
macsetup — CLI entrypoint.

Usage:
    macsetup --help
    macsetup install --list
    macsetup install go python
    macsetup uninstall --yes
    macsetup verify
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from macsetup import __version__
from macsetup.core.config.loader import ConfigError, load_settings
from macsetup.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="macsetup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to macsetup.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """macsetup — provision a macOS development workstation."""
    ctx.ensure_object(dict)

    # ── Logging setup (once, at process start) ──────────────────
    if debug or verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = os.environ.get("MACSETUP_LOG_LEVEL", "INFO")
    ctx.obj["log_level"] = level
    setup_logging(level=level)

    try:
        ctx.obj["settings"] = load_settings(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


# ── Register sub-commands from macsetup/ui/cli/ ─────────────────

from macsetup.ui.cli.install import install  # noqa: E402
from macsetup.ui.cli.uninstall import uninstall  # noqa: E402
from macsetup.ui.cli.verify import verify  # noqa: E402

cli.add_command(install)
cli.add_command(uninstall)
cli.add_command(verify)


if __name__ == "__main__":
    cli()
