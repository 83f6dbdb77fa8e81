"""
Shell profile mutation — idempotent blocks, backed-up removals.

The profile is treated as plain lines, not parsed:

    ensure_block  appends ``# <description>`` + content unless a line
                  already contains the description.
    remove_block  snapshots the file, then drops every line containing
                  the pattern. Other lines keep their order.

A content line that happens to contain a removal pattern is dropped
too; that is the accepted cost of line filtering.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from macsetup.core.services.config_files import Clock, backup_file

logger = logging.getLogger(__name__)

# Shell basename → profile file relative to $HOME
_PROFILE_MAP: dict[str, str] = {
    "zsh": ".zshrc",
    "bash": ".bash_profile",
}
_FALLBACK_PROFILE = ".profile"


def resolve_profile_path(shell: str | None, home: Path) -> Path:
    """Map a ``$SHELL`` value to the profile file it reads.

    Pure function: no environment access, no filesystem access.
    """
    name = Path(shell).name if shell else ""
    return home / _PROFILE_MAP.get(name, _FALLBACK_PROFILE)


class ProfileMutator:
    """Apply and remove marked blocks in one shell profile file.

    Args:
        path: The resolved profile path.
        clock: Timestamp source for backups.
    """

    def __init__(self, path: Path, *, clock: Clock = datetime.now):
        self.path = path
        self._clock = clock

    def _lines(self) -> list[str]:
        if not self.path.is_file():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()

    def has_block(self, description: str) -> bool:
        """Whether any line contains ``description``."""
        return any(description in line for line in self._lines())

    def ensure_block(self, description: str, content: str) -> bool:
        """Append ``# description`` + ``content`` unless already present.

        Returns:
            True when the block was appended.
        """
        if self.has_block(description):
            logger.info("Configuration for %s already exists in %s", description, self.path)
            return False

        self.path.parent.mkdir(parents=True, exist_ok=True)
        existing = self.path.read_text(encoding="utf-8") if self.path.is_file() else ""
        lead = "" if not existing or existing.endswith("\n") else "\n"
        block = f"{lead}\n# {description}\n{content.rstrip(chr(10))}\n"

        with self.path.open("a", encoding="utf-8") as f:
            f.write(block)
        logger.info("%s configuration added to %s", description, self.path)
        return True

    def remove_block(self, pattern: str) -> Path | None:
        """Back up the profile, then drop every line containing ``pattern``.

        Returns:
            The backup path, or None when the profile does not exist.
        """
        if not self.path.is_file():
            logger.debug("No profile at %s, nothing to remove", self.path)
            return None

        backup = backup_file(self.path, clock=self._clock)
        original = self.path.read_text(encoding="utf-8")
        kept = [line for line in original.splitlines() if pattern not in line]
        removed = len(original.splitlines()) - len(kept)

        text = "\n".join(kept)
        if kept and original.endswith("\n"):
            text += "\n"
        self.path.write_text(text, encoding="utf-8")

        logger.info("Removed %d line(s) matching %r from %s", removed, pattern, self.path)
        return backup

    def set_line(self, prefix: str, line: str) -> bool:
        """Replace every line starting with ``prefix`` by ``line``.

        Appends ``line`` when no line starts with ``prefix``. An existing
        file is backed up before it is rewritten.

        Returns:
            True when the file changed.
        """
        lines = self._lines()
        if line in lines:
            return False

        if not any(existing.startswith(prefix) for existing in lines):
            self.path.parent.mkdir(parents=True, exist_ok=True)
            existing = self.path.read_text(encoding="utf-8") if self.path.is_file() else ""
            lead = "" if not existing or existing.endswith("\n") else "\n"
            with self.path.open("a", encoding="utf-8") as f:
                f.write(f"{lead}{line}\n")
            logger.info("Added %r to %s", line, self.path)
            return True

        backup_file(self.path, clock=self._clock)
        updated = [line if existing.startswith(prefix) else existing for existing in lines]
        self.path.write_text("\n".join(updated) + "\n", encoding="utf-8")
        logger.info("Set %r in %s", line, self.path)
        return True

    def backups(self) -> list[Path]:
        """Existing backups of this profile, oldest first."""
        pattern = f"{self.path.name}.backup.*"
        return sorted(self.path.parent.glob(pattern))
