"""Adapters — bindings to the external command line.

Public re-exports for convenient access.
"""

from macsetup.adapters.base import Runner
from macsetup.adapters.mock import MockRunner
from macsetup.adapters.shell.command import CommandRunner, homebrew_env

__all__ = [
    "CommandRunner",
    "MockRunner",
    "Runner",
    "homebrew_env",
]
