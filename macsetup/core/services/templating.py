"""
Template rendering for recipe payloads.

Recipe strings carry ``{home}``, ``{user}`` and ``{brew_prefix}``
tokens. Only known keys are replaced, so literal braces in JSON or
TOML payloads survive untouched.
"""

from __future__ import annotations

import platform
from collections.abc import Mapping

# Homebrew's default prefix per CPU architecture
_BREW_PREFIX_BY_ARCH = {
    "arm64": "/opt/homebrew",
    "x86_64": "/usr/local",
}


def default_brew_prefix(machine: str | None = None) -> str:
    """Homebrew prefix for the current (or given) machine architecture."""
    machine = (machine or platform.machine()).lower()
    return _BREW_PREFIX_BY_ARCH.get(machine, "/usr/local")


def render_template(template: str, values: Mapping[str, object]) -> str:
    """Substitute ``{key}`` placeholders with values.

    Simple string replacement — no Jinja, no escaping.

    Args:
        template: Template string with ``{key}`` tokens.
        values: Mapping of token names to their resolved values.

    Returns:
        Rendered string.
    """
    result = template
    for key, value in values.items():
        result = result.replace(f"{{{key}}}", str(value))
    return result
