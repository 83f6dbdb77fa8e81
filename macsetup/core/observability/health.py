"""
Health checker — aggregate verification results per component.

Backs the ``verify`` command: each component probe returns a
ComponentHealth, and SystemHealth folds them into one status.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

HEALTHY = "healthy"
DEGRADED = "degraded"
UNHEALTHY = "unhealthy"
UNKNOWN = "unknown"


@dataclass
class ComponentHealth:
    """Health of a single component."""

    name: str
    status: str = UNKNOWN  # healthy, degraded, unhealthy, unknown
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        """Record a non-fatal problem; a healthy component becomes degraded."""
        self.warnings.append(message)
        if self.status == HEALTHY:
            self.status = DEGRADED

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "message": self.message,
            "details": self.details,
            "warnings": self.warnings,
        }


@dataclass
class SystemHealth:
    """Aggregate health of the whole workstation."""

    status: str = HEALTHY
    timestamp: str = ""
    components: list[ComponentHealth] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = datetime.now(UTC).isoformat()

    def add(self, component: ComponentHealth) -> None:
        self.components.append(component)
        self._recalculate()

    @property
    def passed(self) -> int:
        return sum(1 for c in self.components if c.status in (HEALTHY, DEGRADED))

    @property
    def failed(self) -> int:
        return sum(1 for c in self.components if c.status == UNHEALTHY)

    def _recalculate(self) -> None:
        """Recalculate overall status from components."""
        statuses = [c.status for c in self.components]
        if any(s == UNHEALTHY for s in statuses):
            self.status = UNHEALTHY
        elif any(s == DEGRADED for s in statuses):
            self.status = DEGRADED
        elif all(s == HEALTHY for s in statuses):
            self.status = HEALTHY
        else:
            self.status = UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "timestamp": self.timestamp,
            "passed": self.passed,
            "failed": self.failed,
            "components": [c.to_dict() for c in self.components],
        }
