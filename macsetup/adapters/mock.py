"""
Mock runner — universal test double for command execution.

Used by ``--dry-run`` to walk every install path without touching
the system, and by the test suite to script outputs and failures.
By default every command succeeds with empty output and every
executable is "present".
"""

from __future__ import annotations

import logging

from macsetup.adapters.base import Runner
from macsetup.core.models.result import CommandResult

logger = logging.getLogger(__name__)


class MockRunner(Runner):
    """Record commands and return scripted results.

    Args:
        available: Executables reported by ``which``. ``None`` means all.
        default_output: stdout returned by successful commands.
        announce: Log each command as ``[dry-run] would run: ...``.
    """

    def __init__(
        self,
        available: set[str] | None = None,
        default_output: str = "",
        announce: bool = False,
    ):
        self._available = available
        self._default_output = default_output
        self._announce = announce
        self._outputs: dict[str, str] = {}
        self._failures: dict[str, int] = {}
        self._call_log: list[list[str]] = []
        self._attempts_made = 0

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[list[str]]:
        """Every command this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def attempts_made(self) -> int:
        return self._attempts_made

    def commands(self) -> list[str]:
        """The call log joined into command lines."""
        return [" ".join(cmd) for cmd in self._call_log]

    def set_output(self, command_line: str, output: str) -> None:
        """Return ``output`` for commands starting with ``command_line``."""
        self._outputs[command_line] = output

    def set_failure(self, command_line: str, times: int = -1) -> None:
        """Fail commands starting with ``command_line``.

        ``times`` bounds the number of failures (``-1`` = always).
        """
        self._failures[command_line] = times

    def set_available(self, *names: str) -> None:
        if self._available is None:
            self._available = set()
        self._available.update(names)

    def which(self, name: str) -> str | None:
        if self._available is None or name in self._available:
            return f"/usr/local/bin/{name}"
        return None

    def run(
        self,
        label: str,
        command: str,
        *args: str,
        interactive: bool = False,
    ) -> CommandResult:
        result = self.run_once(command, *args, label=label, interactive=interactive)
        # Replay the retry bound against scripted failures
        attempts = 1
        while result.failed and attempts < 3 and self._match(self._failures, result.command):
            attempts += 1
            result = self.run_once(command, *args, label=label, interactive=interactive)
        result.attempts = attempts
        self._attempts_made += attempts
        return result

    def run_once(
        self,
        command: str,
        *args: str,
        label: str | None = None,
        interactive: bool = False,
    ) -> CommandResult:
        cmd = [command, *args]
        line = " ".join(cmd)
        self._call_log.append(cmd)
        if self._announce:
            logger.info("[dry-run] would run: %s", line)

        key = self._match(self._failures, cmd)
        if key is not None:
            remaining = self._failures[key]
            if remaining != 0:
                if remaining > 0:
                    self._failures[key] = remaining - 1
                return CommandResult.failure(
                    label=label or line,
                    command=cmd,
                    error="Mock failure",
                    metadata={"mock": True},
                )

        out_key = self._match(self._outputs, cmd)
        output = self._outputs[out_key] if out_key is not None else self._default_output
        return CommandResult.success(
            label=label or line,
            command=cmd,
            output=output,
            metadata={"mock": True},
        )

    @staticmethod
    def _match(table: dict[str, int] | dict[str, str], cmd: list[str]) -> str | None:
        """Longest scripted prefix matching ``cmd``."""
        line = " ".join(cmd)
        matches = [key for key in table if line == key or line.startswith(key + " ")]
        return max(matches, key=len) if matches else None
