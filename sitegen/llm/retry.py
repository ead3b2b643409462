from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0

    def get_delay(self, attempt: int) -> float:
        """Linear backoff: 1x, 2x, ... the base delay."""
        return self.base_delay * max(1, int(attempt))


__all__ = ["RetryPolicy"]
