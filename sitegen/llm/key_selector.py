from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .key_pool import KeyPool

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 300.0


@dataclass
class CredentialHealth:
    failed_at: float
    consecutive_errors: int = 0


@dataclass
class SelectorState:
    sticky_index: int = 0
    cursor: int = 0


class KeySelector:
    """Sticky, round-robin credential selection with a failure cooldown.

    The sticky credential is reused for as long as it stays healthy, so a
    whole pipeline run normally talks to the provider with one key. A failed
    key is skipped until its cooldown expires. When every key is unhealthy
    the health map is wiped and selection restarts from the first key.

    One instance is shared per process and is not safe for concurrent runs.
    """

    def __init__(
        self,
        pool: KeyPool,
        *,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.pool = pool
        self.cooldown_seconds = float(cooldown_seconds)
        self._clock = clock
        self._health: dict[int, CredentialHealth] = {}
        self._state = SelectorState()

    @property
    def state(self) -> SelectorState:
        return SelectorState(sticky_index=self._state.sticky_index, cursor=self._state.cursor)

    def health_snapshot(self) -> dict[int, CredentialHealth]:
        return {
            index: CredentialHealth(failed_at=record.failed_at, consecutive_errors=record.consecutive_errors)
            for index, record in self._health.items()
        }

    def is_healthy(self, index: int) -> bool:
        return index not in self._health

    def select(self) -> Optional[int]:
        size = self.pool.count()
        if size == 0:
            return None

        self._sweep_expired()

        sticky = self._state.sticky_index
        if sticky < size and self.is_healthy(sticky):
            return sticky

        for offset in range(size):
            index = (self._state.cursor + offset) % size
            if self.is_healthy(index):
                self._state.sticky_index = index
                self._state.cursor = (index + 1) % size
                logger.info("Rotated to API key #%s", index + 1)
                return index

        logger.warning("All %s API key(s) marked unhealthy; resetting key health", size)
        self.reset()
        return 0

    def record_failure(self, index: int) -> None:
        size = self.pool.count()
        if size == 0:
            return
        record = self._health.get(index)
        if record is None:
            record = CredentialHealth(failed_at=self._clock())
            self._health[index] = record
        record.consecutive_errors += 1
        record.failed_at = self._clock()
        self._state.cursor = (index + 1) % size
        logger.warning(
            "API key #%s failed (%s consecutive error(s))",
            index + 1,
            record.consecutive_errors,
        )

    def reset(self) -> None:
        self._health.clear()
        self._state = SelectorState()

    def _sweep_expired(self) -> None:
        now = self._clock()
        expired = [
            index
            for index, record in self._health.items()
            if now - record.failed_at > self.cooldown_seconds
        ]
        for index in expired:
            self._health.pop(index, None)
            logger.info("API key #%s cooldown expired; back in rotation", index + 1)


__all__ = ["CredentialHealth", "DEFAULT_COOLDOWN_SECONDS", "KeySelector", "SelectorState"]
