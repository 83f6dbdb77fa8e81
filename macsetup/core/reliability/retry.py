"""
Retry policy — bounded attempts with exponential backoff.

The delay before attempt ``n + 1`` is ``base_delay * 2 ** (n - 1)``:
2s, 4s, 8s … for the default base. No jitter and no cap; the
attempt bound keeps the total wait small.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 2.0


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to run a command and how long to wait in between.

    Args:
        max_attempts: Total attempts, including the first one.
        base_delay: Seconds to wait after the first failure.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay cannot be negative")

    def delay_after(self, attempt: int) -> float:
        """Seconds to wait after failed ``attempt`` (1-based)."""
        return self.base_delay * (2 ** (attempt - 1))

    def should_retry(self, attempt: int) -> bool:
        """Whether another attempt follows failed ``attempt``."""
        return attempt < self.max_attempts

    def schedule(self) -> list[float]:
        """All delays a command that always fails would wait through."""
        return [self.delay_after(n) for n in range(1, self.max_attempts)]

    def to_dict(self) -> dict[str, float | int]:
        return {"max_attempts": self.max_attempts, "base_delay": self.base_delay}
