"""
Homebrew service — the package manager every component shells out to.

Read-only probes (``info``, ``list``, ``tap``) run once; installs and
removals go through the runner's retry policy.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from macsetup.adapters.base import Runner
from macsetup.core.models.result import EXIT_NOT_FOUND, CommandResult
from macsetup.core.services.versioning import UNKNOWN, extract_version

logger = logging.getLogger(__name__)

BREW = "brew"


class Homebrew:
    """Thin wrapper over the ``brew`` CLI."""

    def __init__(self, runner: Runner):
        self._runner = runner

    def available(self) -> bool:
        return self._runner.which(BREW) is not None

    def require(self, label: str) -> CommandResult | None:
        """Failure result when brew is absent (never retried), else None."""
        if self.available():
            return None
        logger.error("Homebrew is required for %s but is not installed", label)
        return CommandResult.failure(
            label=label,
            error="Homebrew is required but not installed. Run 'macsetup install homebrew' first.",
            exit_code=EXIT_NOT_FOUND,
            attempts=0,
            metadata={"precondition": "brew"},
        )

    # ── Probes ──────────────────────────────────────────────────

    def info(self, name: str, *, cask: bool = False) -> dict[str, Any] | None:
        """Parsed ``brew info --json=v2`` entry, or None."""
        args = ["info", "--json=v2"]
        if cask:
            args.append("--cask")
        args.append(name)

        raw = self._runner.capture(BREW, *args)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Unparsable brew info output for %s", name)
            return None

        entries = data.get("casks" if cask else "formulae", [])
        return entries[0] if entries else None

    def latest_version(self, name: str, *, cask: bool = False) -> str:
        """Stable version Homebrew would install, or ``"unknown"``."""
        entry = self.info(name, cask=cask)
        if entry is None:
            return UNKNOWN
        if cask:
            version = entry.get("version")
        else:
            version = (entry.get("versions") or {}).get("stable")
        return str(version) if version else UNKNOWN

    def installed_version(self, name: str, *, cask: bool = False) -> str:
        """Version from ``brew list --versions``, or ``"unknown"``."""
        args = ["list", "--versions"]
        if cask:
            args.append("--cask")
        output = self._runner.capture(BREW, *args, name)
        return extract_version(output)

    def is_installed(self, name: str, *, cask: bool = False) -> bool:
        args = ["list"]
        if cask:
            args.append("--cask")
        return self._runner.run_once(BREW, *args, name).ok

    def has_tap(self, tap: str) -> bool:
        output = self._runner.capture(BREW, "tap") or ""
        return tap in output.split()

    def prefix(self) -> str | None:
        return self._runner.capture(BREW, "--prefix")

    def repository(self) -> str | None:
        return self._runner.capture(BREW, "--repo")

    # ── Mutations ───────────────────────────────────────────────

    def tap(self, tap: str) -> CommandResult:
        if self.has_tap(tap):
            return CommandResult.skip(label=f"tap {tap}", reason="already tapped")
        return self._runner.run(f"Tap {tap}", BREW, "tap", tap)

    def install(self, name: str, *, cask: bool = False, label: str | None = None) -> CommandResult:
        args = ["install"]
        if cask:
            args.append("--cask")
        return self._runner.run(label or f"{name} installation", BREW, *args, name)

    def upgrade(self, name: str, *, cask: bool = False, label: str | None = None) -> CommandResult:
        args = ["upgrade"]
        if cask:
            args.append("--cask")
        return self._runner.run(label or f"{name} update", BREW, *args, name)

    def uninstall(self, name: str, *, cask: bool = False) -> CommandResult:
        args = ["uninstall"]
        if cask:
            args.append("--cask")
        return self._runner.run(f"{name} removal", BREW, *args, name)

    def update(self) -> CommandResult:
        return self._runner.run("Homebrew update", BREW, "update")

    def cleanup(self) -> list[CommandResult]:
        """Remove unused dependencies and clear the download cache."""
        return [
            self._runner.run("Homebrew autoremove", BREW, "autoremove"),
            self._runner.run("Homebrew cleanup", BREW, "cleanup"),
        ]
