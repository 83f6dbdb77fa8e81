"""
Run summary models — per-component attempts folded into one report.

The driver owns the RunSummary: it records one InstallAttempt per
component as the queue is processed, then calls ``finish()``. After
that the summary is read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel

Outcome = Literal["succeeded", "failed"]

# Command shown to the user for re-running a single component
RERUN_TEMPLATE = "macsetup {action} {name}"


class InstallAttempt(BaseModel):
    """Transient record of one component invocation."""

    component: str
    attempts: int = 0
    outcome: Outcome = "succeeded"
    elapsed: float = 0.0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == "succeeded"


class SummaryFinishedError(RuntimeError):
    """Raised when recording into a summary that has already finished."""


@dataclass
class RunSummary:
    """Result of a provisioning run."""

    action: str = "install"
    requested: list[str] = field(default_factory=list)
    attempts: list[InstallAttempt] = field(default_factory=list)
    cancelled: bool = False
    finished: bool = False

    def record(self, attempt: InstallAttempt) -> None:
        """Fold one component attempt into the summary."""
        if self.finished:
            raise SummaryFinishedError("Run summary is already finished")
        self.attempts.append(attempt)

    def finish(self) -> RunSummary:
        """Freeze the summary. Returns self for chaining."""
        self.finished = True
        return self

    @property
    def total(self) -> int:
        return len(self.requested)

    @property
    def succeeded(self) -> list[str]:
        return [a.component for a in self.attempts if a.ok]

    @property
    def failed(self) -> list[str]:
        return [a.component for a in self.attempts if not a.ok]

    @property
    def all_ok(self) -> bool:
        return not self.failed

    @property
    def status(self) -> str:
        if self.cancelled:
            return "cancelled"
        if not self.failed:
            return "ok"
        if self.succeeded:
            return "partial"
        return "failed"

    def rerun_command(self, name: str) -> str:
        """The single-component command that retries ``name``."""
        return RERUN_TEMPLATE.format(action=self.action, name=name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "rerun": {name: self.rerun_command(name) for name in self.failed},
            "attempts": [a.model_dump(mode="json") for a in self.attempts],
        }
