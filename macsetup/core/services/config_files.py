"""
Config file helpers — write-if-absent payloads and timestamped backups.

Downstream tool configs (pip.conf, cargo config, sing-box config.json)
are opaque payloads: written once, never merged or overwritten.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP = "%Y%m%d_%H%M%S"

Clock = Callable[[], datetime]


def write_if_absent(path: Path, content: str) -> bool:
    """Create ``path`` with ``content`` unless it already exists.

    Returns:
        True when the file was written.
    """
    if path.exists():
        logger.debug("Config already present, leaving untouched: %s", path)
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info("Created %s", path)
    return True


def backup_file(
    path: Path,
    *,
    suffix: str = "backup",
    clock: Clock = datetime.now,
) -> Path:
    """Copy ``path`` to ``<path>.<suffix>.YYYYmmdd_HHMMSS``.

    Two backups in the same second get ``-1``, ``-2`` … appended, so
    every call yields a new file.

    Returns:
        Path of the created backup.
    """
    stamp = clock().strftime(BACKUP_TIMESTAMP)
    dest = path.with_name(f"{path.name}.{suffix}.{stamp}")
    counter = 1
    while dest.exists():
        dest = path.with_name(f"{path.name}.{suffix}.{stamp}-{counter}")
        counter += 1
    shutil.copy2(path, dest)
    logger.info("Backed up %s → %s", path, dest)
    return dest


def remove_file(path: Path) -> bool:
    """Delete a config file if present. Returns True when removed."""
    if not path.is_file():
        return False
    path.unlink()
    logger.info("Removed %s", path)
    return True


def remove_tree(path: Path) -> bool:
    """Delete a config directory if present. Returns True when removed."""
    if not path.is_dir():
        return False
    shutil.rmtree(path)
    logger.info("Removed %s", path)
    return True
