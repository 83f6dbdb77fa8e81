"""
CommandResult model — the runner's execution contract.

Every external command the provisioner launches comes back as a
CommandResult. Runners NEVER raise for a failed command; exit codes,
attempt counts and captured output are carried here instead.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

# Exit code reported when the executable itself cannot be launched
EXIT_NOT_FOUND = 127


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class CommandResult(BaseModel):
    """Outcome of running one labelled command (possibly several attempts)."""

    label: str
    command: list[str] = Field(default_factory=list)
    status: Literal["ok", "skipped", "failed"] = "ok"

    exit_code: int = 0
    attempts: int = 1
    delays: list[float] = Field(default_factory=list)

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the command (eventually) succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether every attempt failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        label: str,
        output: str = "",
        **kwargs: Any,
    ) -> CommandResult:
        """Create a success result."""
        return cls(label=label, status="ok", output=output, **kwargs)

    @classmethod
    def failure(
        cls,
        label: str,
        error: str,
        exit_code: int = 1,
        **kwargs: Any,
    ) -> CommandResult:
        """Create a failure result."""
        return cls(
            label=label,
            status="failed",
            error=error,
            exit_code=exit_code,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        label: str,
        reason: str = "",
        **kwargs: Any,
    ) -> CommandResult:
        """Create a skip result (nothing needed doing)."""
        return cls(label=label, status="skipped", output=reason, attempts=0, **kwargs)
