"""
Component model — one provisionable unit (a tool plus its configuration).

Components are registered statically at process start and never
mutated. The operations receive a ``ProvisionContext`` and return a
``CommandResult``; they should not raise, but the driver treats any
exception as a failed component.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from macsetup.core.models.result import CommandResult

if TYPE_CHECKING:
    from macsetup.core.engine.context import ProvisionContext
    from macsetup.core.observability.health import ComponentHealth

Operation = Callable[["ProvisionContext"], CommandResult]
Probe = Callable[["ProvisionContext"], "ComponentHealth"]


@dataclass(frozen=True)
class Component:
    """A named install operation with optional uninstall and verify."""

    name: str
    description: str
    install: Operation
    uninstall: Operation | None = None
    verify: Probe | None = None

    @property
    def removable(self) -> bool:
        """Whether ``macsetup uninstall`` can remove this component."""
        return self.uninstall is not None
