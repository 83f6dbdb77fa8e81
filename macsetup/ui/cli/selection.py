"""
Interactive component checklist for ``install --selective``.

Keys:
    <number>   toggle that item (several may be given: ``1 3 5``)
    a          select all
    n          select none
    Enter / c  confirm
    q          cancel
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import click

from macsetup.core.models.component import Component

HELP_LINE = "Toggle by number, [a]ll, [n]one, Enter/[c] to confirm, [q] to cancel"


@dataclass
class Checklist:
    """Checkable list of (name, description) pairs, all unchecked."""

    items: list[tuple[str, str]]
    checked: list[bool] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.checked:
            self.checked = [False] * len(self.items)

    @classmethod
    def from_components(cls, components: list[Component]) -> Checklist:
        return cls(items=[(c.name, c.description) for c in components])

    def toggle(self, number: int) -> bool:
        """Flip item ``number`` (1-based). False when out of range."""
        if not 1 <= number <= len(self.items):
            return False
        self.checked[number - 1] = not self.checked[number - 1]
        return True

    def select_all(self) -> None:
        self.checked = [True] * len(self.items)

    def select_none(self) -> None:
        self.checked = [False] * len(self.items)

    def selected(self) -> list[str]:
        return [name for (name, _), on in zip(self.items, self.checked) if on]

    def render(self) -> list[str]:
        width = len(str(len(self.items)))
        lines = []
        for number, ((name, description), on) in enumerate(zip(self.items, self.checked), start=1):
            mark = "x" if on else " "
            lines.append(f"  [{mark}] {number:>{width}}. {name:<10} {description}")
        return lines


def _read_choice() -> str:
    return click.prompt("Selection", default="", show_default=False)


def prompt_checklist(
    components: list[Component],
    *,
    read: Callable[[], str] = _read_choice,
    echo: Callable[[str], None] = click.echo,
) -> list[str] | None:
    """Run the checklist until confirmed or cancelled.

    Returns:
        Selected names on confirm, None on cancel.
    """
    checklist = Checklist.from_components(components)

    while True:
        echo("")
        for line in checklist.render():
            echo(line)
        echo(HELP_LINE)

        answer = read().strip().lower()
        if answer in ("", "c"):
            return checklist.selected()
        if answer == "q":
            return None
        if answer == "a":
            checklist.select_all()
            continue
        if answer == "n":
            checklist.select_none()
            continue

        for token in answer.replace(",", " ").split():
            if not token.isdigit() or not checklist.toggle(int(token)):
                echo(f"Ignoring invalid choice: {token}")
