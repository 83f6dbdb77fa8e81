"""
Component registry — the fixed, ordered catalogue of components.

Registry order is install order. Selections are resolved against it:
whatever order names arrive in, they run in registry order.
Uninstall walks the removable components in reverse.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from macsetup.core.data.recipes import COMPONENT_RECIPES
from macsetup.core.engine.errors import InvalidSelectionError
from macsetup.core.models.component import Component
from macsetup.core.services import hooks
from macsetup.core.services.installers import (
    install_operation,
    uninstall_operation,
    verify_operation,
)

logger = logging.getLogger(__name__)

COMPONENT_ORDER = [
    "homebrew",
    "git",
    "iterm2",
    "go",
    "python",
    "java",
    "rust",
    "nodejs",
    "singbox",
    "vscode",
]

# Removed by a bare ``macsetup uninstall``; python config only when named
DEFAULT_UNINSTALL = ["vscode", "singbox", "nodejs", "rust", "java"]


class ComponentRegistry:
    """Ordered name → Component mapping."""

    def __init__(self, components: Iterable[Component] = ()):
        self._components: dict[str, Component] = {}
        for component in components:
            self.register(component)

    def register(self, component: Component) -> None:
        if component.name in self._components:
            logger.warning("Overwriting existing component: %s", component.name)
        self._components[component.name] = component
        logger.debug("Registered component: %s", component.name)

    def get(self, name: str) -> Component | None:
        return self._components.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._components)

    def __iter__(self):
        return iter(self._components.values())

    def __len__(self) -> int:
        return len(self._components)

    def __contains__(self, name: object) -> bool:
        return name in self._components

    def validate(self, names: Iterable[str]) -> None:
        """Raise InvalidSelectionError naming every unknown entry."""
        unknown = []
        for name in names:
            if name not in self._components and name not in unknown:
                unknown.append(name)
        if unknown:
            raise InvalidSelectionError(unknown, self.names)

    def select(self, names: Iterable[str], *, reverse: bool = False) -> list[Component]:
        """Components for ``names`` in registry order (duplicates collapse).

        ``reverse`` yields reverse registry order, used for removal.
        """
        names = list(names)
        self.validate(names)
        wanted = set(names)
        ordered = reversed(self._components.values()) if reverse else self._components.values()
        return [c for c in ordered if c.name in wanted]


# Install hooks per component; homebrew has its own install operation
_HOOKS = {
    "git": hooks.configure_git,
    "iterm2": hooks.setup_oh_my_zsh,
    "python": hooks.upgrade_pip,
    "nodejs": hooks.configure_npm,
}


def build_default_registry() -> ComponentRegistry:
    """The workstation registry in install order."""
    registry = ComponentRegistry()
    for name in COMPONENT_ORDER:
        recipe = COMPONENT_RECIPES[name]
        if name == "homebrew":
            install = hooks.install_homebrew
        else:
            install = install_operation(name, _HOOKS.get(name))
        registry.register(
            Component(
                name=name,
                description=recipe["description"],
                install=install,
                uninstall=uninstall_operation(name) if "uninstall" in recipe else None,
                verify=verify_operation(name),
            )
        )
    return registry
