"""
Version comparison (pure).

Decides whether an installed tool is current. ``"unknown"`` on either
side means "upgrade": the comparator never blocks an install because
a probe failed.

No I/O, no subprocess.
"""

from __future__ import annotations

import re

UNKNOWN = "unknown"

# Default pattern for pulling a dotted version out of ``--version`` output
VERSION_PATTERN = r"(\d+(?:\.\d+)+)"

_LEADING_DIGITS = re.compile(r"\d+")


def parse_version(version: str) -> tuple[int, ...]:
    """Split a dotted version into integer segments.

    Tolerates the prefixes and suffixes tools print: ``v1.2.3``,
    ``go1.22.1``, ``1.21.0_1`` (Homebrew revision), ``3.12.0rc1``.
    Each segment contributes its leading run of digits; parsing stops
    at the first segment without any.

    Raises:
        ValueError: If the string contains no numeric segment at all.
    """
    text = version.strip()
    first = _LEADING_DIGITS.search(text)
    if first is None:
        raise ValueError(f"Not a version: {version!r}")
    text = text[first.start():]

    parts: list[int] = []
    for segment in text.split("."):
        match = _LEADING_DIGITS.match(segment)
        if match is None:
            break
        parts.append(int(match.group()))
    return tuple(parts)


def is_unknown(version: str | None) -> bool:
    return not version or version.strip().lower() == UNKNOWN


def is_current(current: str | None, latest: str | None) -> bool:
    """Whether ``current >= latest``.

    Either side unknown (missing, empty, ``"unknown"`` or unparsable)
    returns False so the caller takes the install/upgrade path.
    Missing trailing segments count as zero: ``"3.11" == "3.11.0"``.
    """
    if is_unknown(current) or is_unknown(latest):
        return False
    try:
        cur = parse_version(current)  # type: ignore[arg-type]
        lat = parse_version(latest)  # type: ignore[arg-type]
    except ValueError:
        return False

    width = max(len(cur), len(lat))
    cur += (0,) * (width - len(cur))
    lat += (0,) * (width - len(lat))
    return cur >= lat


def extract_version(text: str | None, pattern: str = VERSION_PATTERN) -> str:
    """First capture group of ``pattern`` in ``text``, or ``"unknown"``."""
    if not text:
        return UNKNOWN
    match = re.search(pattern, text)
    if match is None:
        return UNKNOWN
    return match.group(1) if match.groups() else match.group(0)
