from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from ..config import Settings, get_settings
from ..generation.context import GenerationContext
from ..generation.events import ProgressCallback
from ..generation.pipeline import GenerationPipeline
from ..llm.invoker import ApiInvoker, Transport
from ..llm.key_pool import KeyPool
from ..llm.key_selector import KeySelector
from ..schemas.generation import WebsiteArtifact

logger = logging.getLogger(__name__)


class GenerationService:
    """Process-wide owner of the key pool, selector and invoker.

    Runs are serialized with an ``asyncio.Lock`` because the selector is
    shared and not safe for concurrent use.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        transport: Optional[Transport] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.pool = KeyPool.from_settings(self.settings)
        self.selector = KeySelector(
            self.pool,
            cooldown_seconds=self.settings.key_cooldown_seconds,
            clock=clock or time.monotonic,
        )
        invoker_kwargs: dict[str, Any] = {"transport": transport, "settings": self.settings}
        if sleep is not None:
            invoker_kwargs["sleep"] = sleep
        self.invoker = ApiInvoker(self.pool, self.selector, **invoker_kwargs)
        self._lock = asyncio.Lock()

    async def generate(
        self,
        context: GenerationContext,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WebsiteArtifact:
        async with self._lock:
            logger.info(
                "Generating %s site (%s, pages=%s, admin=%s)",
                context.site_type.value,
                context.language.value,
                ",".join(context.selected_pages),
                context.include_admin_page,
            )
            pipeline = GenerationPipeline(self.invoker, settings=self.settings, on_progress=on_progress)
            return await pipeline.run(context)

    def credential_status(self) -> dict[str, Any]:
        health = self.selector.health_snapshot()
        state = self.selector.state
        credentials = []
        for index in range(self.pool.count()):
            record = health.get(index)
            credentials.append(
                {
                    "slot": index + 1,
                    "masked": self.pool.credential_at(index).masked,
                    "healthy": record is None,
                    "consecutive_errors": record.consecutive_errors if record else 0,
                }
            )
        return {
            "configured": self.pool.count(),
            "healthy": sum(1 for item in credentials if item["healthy"]),
            "active_slot": state.sticky_index + 1 if credentials else None,
            "credentials": credentials,
        }


_generation_service: GenerationService | None = None


def get_generation_service() -> GenerationService:
    global _generation_service
    if _generation_service is None:
        _generation_service = GenerationService()
    return _generation_service


def reset_generation_service() -> None:
    global _generation_service
    _generation_service = None


__all__ = ["GenerationService", "get_generation_service", "reset_generation_service"]
