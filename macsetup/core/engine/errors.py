"""Provisioning errors. Everything the driver raises derives from ProvisionError."""

from __future__ import annotations


class ProvisionError(Exception):
    """Base class for run-level provisioning errors."""


class InvalidSelectionError(ProvisionError):
    """Requested component names are unknown (or unusable for the action)."""

    def __init__(
        self,
        unknown: list[str],
        known: list[str],
        reason: str = "Unknown component(s)",
    ):
        self.unknown = unknown
        self.known = known
        super().__init__(
            f"{reason}: {', '.join(unknown)}. "
            f"Available: {', '.join(known)}"
        )


class PreconditionError(ProvisionError):
    """The machine cannot be provisioned (wrong OS, root, no Homebrew)."""
