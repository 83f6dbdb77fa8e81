"""
Domain models for the provisioner.

All models are re-exported here for convenient access:

    from macsetup.core.models import CommandResult, Component, RunSummary
"""

from macsetup.core.models.component import Component
from macsetup.core.models.result import EXIT_NOT_FOUND, CommandResult
from macsetup.core.models.summary import InstallAttempt, RunSummary, SummaryFinishedError

__all__ = [
    "EXIT_NOT_FOUND",
    # result.py
    "CommandResult",
    # component.py
    "Component",
    # summary.py
    "InstallAttempt",
    "RunSummary",
    "SummaryFinishedError",
]
