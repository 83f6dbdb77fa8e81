"""
Provisioning driver — the central orchestration loop.

Flow:
    selection → resolve components → preflight → run each in registry
    order → record InstallAttempt → finish RunSummary

A failing component never stops the queue: its outcome is recorded and
the next component runs. Only run-level problems (unknown names, wrong
platform, root, missing Homebrew or Command Line Tools) raise, and they
raise before any component has started.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum

from macsetup.core.engine.context import ProvisionContext
from macsetup.core.engine.errors import InvalidSelectionError, PreconditionError
from macsetup.core.engine.registry import DEFAULT_UNINSTALL, ComponentRegistry
from macsetup.core.models.component import Component
from macsetup.core.models.result import CommandResult
from macsetup.core.models.summary import InstallAttempt, RunSummary
from macsetup.core.observability.health import (
    HEALTHY,
    UNHEALTHY,
    ComponentHealth,
    SystemHealth,
)

logger = logging.getLogger(__name__)

INSTALL = "install"
UNINSTALL = "uninstall"

XCODE_TOOLS = "xcode-tools"

_PROGRESS = {INSTALL: ("Installing", "installed"), UNINSTALL: ("Removing", "removed")}

# Shows the checklist; returns chosen names, or None when cancelled
Chooser = Callable[[list[Component]], list[str] | None]


class SelectionKind(StrEnum):
    ALL = "all"
    NAMED = "named"
    INTERACTIVE = "interactive"


@dataclass(frozen=True)
class Selection:
    """Which components a run covers."""

    kind: SelectionKind
    names: tuple[str, ...] = ()

    @classmethod
    def all(cls) -> Selection:
        return cls(SelectionKind.ALL)

    @classmethod
    def named(cls, names: Iterable[str]) -> Selection:
        return cls(SelectionKind.NAMED, tuple(names))

    @classmethod
    def interactive(cls) -> Selection:
        return cls(SelectionKind.INTERACTIVE)


class Provisioner:
    """Run install, uninstall and verify over a component registry.

    Args:
        registry: The ordered component catalogue.
        ctx: Shared provisioning context (settings, runner, mutators).
        check_preconditions: Run the platform/root/Homebrew preflight.
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        ctx: ProvisionContext,
        *,
        check_preconditions: bool = True,
    ):
        self.registry = registry
        self.ctx = ctx
        self.check_preconditions = check_preconditions

    # ── Public API ──────────────────────────────────────────────

    def install(self, selection: Selection, chooser: Chooser | None = None) -> RunSummary:
        return self.run(selection, chooser=chooser, action=INSTALL)

    def uninstall(self, selection: Selection, chooser: Chooser | None = None) -> RunSummary:
        return self.run(selection, chooser=chooser, action=UNINSTALL)

    def run(
        self,
        selection: Selection,
        chooser: Chooser | None = None,
        action: str = INSTALL,
    ) -> RunSummary:
        """Resolve ``selection`` and run ``action`` on each component.

        Raises:
            InvalidSelectionError: Unknown (or non-removable) names.
            PreconditionError: The preflight failed.
        """
        components = self.resolve(selection, action=action, chooser=chooser)
        if components is None:
            logger.info("Selection cancelled, nothing to do")
            return RunSummary(action=action, cancelled=True).finish()

        if self.check_preconditions:
            self.preflight(components, action=action)

        summary = self._run_queue(components, action)
        if action == UNINSTALL and components:
            self._brew_cleanup()
        return summary

    def verify(self, selection: Selection) -> SystemHealth:
        """Smoke-test each selected component."""
        components = self.resolve(selection, action="verify")
        system = SystemHealth()
        if selection.kind == SelectionKind.ALL:
            system.add(self._xcode_health())
        for component in components or []:
            if component.verify is None:
                continue
            try:
                health = component.verify(self.ctx)
            except Exception as e:
                logger.exception("Verification of %s raised", component.name)
                health = ComponentHealth(name=component.name, status=UNHEALTHY, message=str(e))
            system.add(health)
        return system

    # ── Selection ───────────────────────────────────────────────

    def resolve(
        self,
        selection: Selection,
        *,
        action: str = INSTALL,
        chooser: Chooser | None = None,
    ) -> list[Component] | None:
        """Components for a selection, ordered for ``action``.

        Returns None when an interactive selection was cancelled.
        """
        reverse = action == UNINSTALL

        if selection.kind == SelectionKind.ALL:
            names = DEFAULT_UNINSTALL if action == UNINSTALL else self.registry.names
            return self.registry.select(names, reverse=reverse)

        if selection.kind == SelectionKind.NAMED:
            components = self.registry.select(selection.names, reverse=reverse)
        else:
            if chooser is None:
                raise ValueError("Interactive selection needs a chooser")
            candidates = self.registry.select(self.registry.names, reverse=reverse)
            if action == UNINSTALL:
                candidates = [c for c in candidates if c.removable]
            chosen = chooser(candidates)
            if chosen is None:
                return None
            components = self.registry.select(chosen, reverse=reverse)

        if action == UNINSTALL:
            fixed = [c.name for c in components if not c.removable]
            if fixed:
                removable = [c.name for c in self.registry if c.removable]
                raise InvalidSelectionError(fixed, removable, reason="Cannot uninstall")
        return components

    # ── Preflight ───────────────────────────────────────────────

    def preflight(self, components: list[Component], *, action: str = INSTALL) -> None:
        """Raise PreconditionError unless this machine can be provisioned."""
        settings = self.ctx.settings
        if settings.platform != "darwin":
            raise PreconditionError(
                f"This tool is designed for macOS only (platform: {settings.platform})"
            )
        if settings.is_root:
            raise PreconditionError("This tool should not be run as root")

        names = {c.name for c in components}
        installs_brew = action == INSTALL and "homebrew" in names
        if components and not installs_brew and not self.ctx.brew.available():
            raise PreconditionError(
                "Homebrew is required but not installed. Run 'macsetup install homebrew' first."
            )
        if action == INSTALL and components and not self._xcode_tools().ok:
            raise PreconditionError(
                "Xcode Command Line Tools are required. "
                "Run 'xcode-select --install', then run macsetup again."
            )
        logger.debug("Preflight passed for %s", ", ".join(sorted(names)) or "nothing")

    def _xcode_tools(self) -> CommandResult:
        """Probe the active Command Line Tools directory."""
        return self.ctx.runner.run_once("xcode-select", "-p", label="Xcode Command Line Tools")

    def _xcode_health(self) -> ComponentHealth:
        result = self._xcode_tools()
        if result.ok:
            return ComponentHealth(
                name=XCODE_TOOLS,
                status=HEALTHY,
                message="Command Line Tools installed",
                details={"path": result.output},
            )
        return ComponentHealth(
            name=XCODE_TOOLS,
            status=UNHEALTHY,
            message="Command Line Tools missing, run 'xcode-select --install'",
        )

    # ── Execution ───────────────────────────────────────────────

    def _run_queue(self, components: list[Component], action: str) -> RunSummary:
        summary = RunSummary(action=action, requested=[c.name for c in components])
        runner = self.ctx.runner
        total = len(components)

        for index, component in enumerate(components, start=1):
            operation = component.install if action == INSTALL else component.uninstall
            assert operation is not None  # resolve() rejects non-removable names
            doing, done = _PROGRESS[action]
            logger.info("[%d/%d] %s %s", index, total, doing, component.name)

            before = runner.attempts_made
            start = time.monotonic()
            error: str | None = None
            try:
                result = operation(self.ctx)
            except Exception as e:
                logger.exception("%s %s raised", action, component.name)
                error = f"{type(e).__name__}: {e}"
            else:
                if result.failed:
                    error = result.error or f"exit code {result.exit_code}"

            attempt = InstallAttempt(
                component=component.name,
                attempts=runner.attempts_made - before,
                outcome="failed" if error else "succeeded",
                elapsed=round(time.monotonic() - start, 3),
                error=error,
            )
            summary.record(attempt)
            if error:
                logger.error(
                    "✗ Failed to %s %s. Continuing with next component.", action, component.name
                )
            else:
                logger.info("✓ %s %s", component.name, done)

        return summary.finish()

    def _brew_cleanup(self) -> None:
        if not self.ctx.brew.available():
            return
        for result in self.ctx.brew.cleanup():
            if result.failed:
                logger.warning("⚠ %s failed: %s", result.label, result.error)
