"""
Shell command runner — execute external commands with bounded retry.

This is the SINGLE PLACE where ``subprocess.run`` is called for
provisioning. Every attempt is logged (attempt number, label,
outcome) so it reaches both the console and the run log.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from collections.abc import Callable, Mapping

from macsetup.adapters.base import Runner
from macsetup.core.data.recipes import HOMEBREW_MIRRORS
from macsetup.core.models.result import EXIT_NOT_FOUND, CommandResult
from macsetup.core.reliability.retry import RetryPolicy

logger = logging.getLogger(__name__)

# Keep this much of stdout/stderr on the result
_OUTPUT_TAIL = 2000

Executor = Callable[..., subprocess.CompletedProcess]


def _execute(
    cmd: list[str],
    *,
    interactive: bool = False,
    env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess:
    """Run ``cmd`` to completion. Interactive commands inherit the terminal."""
    return subprocess.run(
        cmd,
        capture_output=not interactive,
        text=True,
        env=dict(env) if env is not None else None,
        check=False,
    )


def _tail(text: str | None) -> str:
    return text[-_OUTPUT_TAIL:].strip() if text else ""


class CommandRunner(Runner):
    """Run commands through ``subprocess`` with a retry policy.

    Args:
        policy: Attempt bound and backoff schedule.
        env: Environment for child processes (default: inherit).
        executor: Replaces ``subprocess.run`` (tests).
        sleep: Replaces ``time.sleep`` (tests).
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        env: Mapping[str, str] | None = None,
        executor: Executor | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._policy = policy or RetryPolicy()
        self._env = dict(env) if env is not None else None
        self._executor = executor or _execute
        self._sleep = sleep
        self._attempts_made = 0

    @property
    def name(self) -> str:
        return "shell"

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    @property
    def attempts_made(self) -> int:
        return self._attempts_made

    def which(self, name: str) -> str | None:
        path = self._env.get("PATH") if self._env else None
        return shutil.which(name, path=path)

    def run(
        self,
        label: str,
        command: str,
        *args: str,
        interactive: bool = False,
    ) -> CommandResult:
        cmd = [command, *args]
        max_attempts = self._policy.max_attempts
        delays: list[float] = []
        start = time.monotonic()
        last: CommandResult | None = None

        for attempt in range(1, max_attempts + 1):
            self._attempts_made += 1
            last = self._attempt(label, cmd, interactive=interactive)
            last.attempts = attempt
            last.delays = list(delays)

            if last.ok:
                logger.info("✓ %s (attempt %d/%d) → ok", label, attempt, max_attempts)
                break

            if last.exit_code == EXIT_NOT_FOUND and last.metadata.get("not_found"):
                # Retrying cannot make a missing executable appear
                logger.error("✗ %s (attempt %d/%d) → %s", label, attempt, max_attempts, last.error)
                break

            if not self._policy.should_retry(attempt):
                logger.error(
                    "✗ %s (attempt %d/%d) → failed (exit %d), giving up",
                    label, attempt, max_attempts, last.exit_code,
                )
                break

            delay = self._policy.delay_after(attempt)
            logger.warning(
                "⚠ %s (attempt %d/%d) → failed (exit %d), retrying in %gs",
                label, attempt, max_attempts, last.exit_code, delay,
            )
            self._sleep(delay)
            delays.append(delay)

        assert last is not None  # max_attempts >= 1
        last.duration_ms = int((time.monotonic() - start) * 1000)
        return last

    def run_once(
        self,
        command: str,
        *args: str,
        label: str | None = None,
        interactive: bool = False,
    ) -> CommandResult:
        cmd = [command, *args]
        return self._attempt(label or " ".join(cmd), cmd, interactive=interactive)

    def _attempt(self, label: str, cmd: list[str], *, interactive: bool) -> CommandResult:
        """Execute ``cmd`` once and convert the outcome into a result."""
        logger.debug("Executing: %s", " ".join(cmd))
        start = time.monotonic()

        try:
            proc = self._executor(cmd, interactive=interactive, env=self._env)
        except (FileNotFoundError, PermissionError) as e:
            return CommandResult.failure(
                label=label,
                command=cmd,
                error=f"Cannot execute {cmd[0]}: {e}",
                exit_code=EXIT_NOT_FOUND,
                metadata={"not_found": True},
            )
        except OSError as e:
            return CommandResult.failure(
                label=label,
                command=cmd,
                error=f"Command execution error: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = _tail(proc.stdout)
        stderr = _tail(proc.stderr)

        if proc.returncode == 0:
            return CommandResult.success(
                label=label,
                command=cmd,
                output=stdout,
                duration_ms=elapsed_ms,
                metadata={"stderr": stderr} if stderr else {},
            )

        if stderr:
            logger.debug("%s stderr: %s", label, stderr)
        return CommandResult.failure(
            label=label,
            command=cmd,
            error=stderr or f"Command exited with code {proc.returncode}",
            exit_code=proc.returncode,
            output=stdout,
            duration_ms=elapsed_ms,
        )


def homebrew_env(base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Environment with the Homebrew bin directories first on PATH.

    The TUNA mirror variables are added unless ``base`` already sets
    them, so brew uses the mirrors within the same run.
    """
    env = dict(os.environ if base is None else base)
    env.setdefault("HOMEBREW_BOTTLE_DOMAIN", HOMEBREW_MIRRORS["bottles"])
    env.setdefault("HOMEBREW_BREW_GIT_REMOTE", HOMEBREW_MIRRORS["brew"])
    env.setdefault("HOMEBREW_CORE_GIT_REMOTE", HOMEBREW_MIRRORS["core"])
    prefix = "/opt/homebrew/bin:/usr/local/bin"
    current = env.get("PATH", "")
    env["PATH"] = f"{prefix}:{current}" if current else prefix
    return env
