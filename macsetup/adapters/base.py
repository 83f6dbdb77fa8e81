"""
Runner base — the protocol contract between the provisioner and the OS.

Recipes and the driver only talk to external tools through a Runner,
never through ``subprocess`` directly. That keeps every install path
testable with the MockRunner and lets ``--dry-run`` swap the real
runner out wholesale.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from macsetup.core.models.result import CommandResult


class Runner(ABC):
    """Abstract base class for command runners.

    Runners return CommandResults. They NEVER raise for a failing
    command; the failure is captured in the result.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Runner identifier (``"shell"``, ``"mock"``)."""

    @property
    @abstractmethod
    def attempts_made(self) -> int:
        """Attempts made by ``run`` so far; ``run_once`` probes are not counted."""

    @abstractmethod
    def run(
        self,
        label: str,
        command: str,
        *args: str,
        interactive: bool = False,
    ) -> CommandResult:
        """Run a command with the retry policy applied."""

    @abstractmethod
    def run_once(
        self,
        command: str,
        *args: str,
        label: str | None = None,
        interactive: bool = False,
    ) -> CommandResult:
        """Run a command exactly once (probes, best-effort config)."""

    @abstractmethod
    def which(self, name: str) -> str | None:
        """Resolve an executable on PATH, or None when absent."""

    def capture(self, command: str, *args: str) -> str | None:
        """Run once and return stripped stdout, or None on failure."""
        result = self.run_once(command, *args)
        if not result.ok:
            return None
        return result.output

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
