from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

from ..config import Settings, get_settings
from ..exceptions import NoCredentialsConfigured, ProviderExhausted, ProviderTransientError
from ..log import ProviderCallLogger
from .key_pool import KeyPool
from .key_selector import KeySelector
from .provider import CallOutcome, ProviderClient, ProviderRequest
from .retry import RetryPolicy

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def complete(
        self,
        api_key: str,
        request: ProviderRequest,
        *,
        expect_structured: bool = False,
    ) -> CallOutcome: ...


class ApiInvoker:
    """Run one provider request with key rotation and linear backoff."""

    def __init__(
        self,
        pool: KeyPool,
        selector: KeySelector,
        *,
        transport: Optional[Transport] = None,
        policy: Optional[RetryPolicy] = None,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings or get_settings()
        self.pool = pool
        self.selector = selector
        self.transport = transport or ProviderClient(settings=self.settings)
        self.policy = policy or RetryPolicy(
            max_attempts=self.settings.max_attempts,
            base_delay=self.settings.backoff_seconds,
        )
        self._sleep = sleep

    async def invoke(self, request: ProviderRequest, *, expect_structured: bool = False) -> str:
        attempts = max(1, int(self.policy.max_attempts))
        model = request.model or self.settings.model
        last_error: Optional[ProviderTransientError] = None

        for attempt in range(1, attempts + 1):
            index = self.selector.select()
            if index is None:
                raise NoCredentialsConfigured()
            credential = self.pool.credential_at(index)

            with ProviderCallLogger(model, credential.ordinal + 1, attempt) as call_log:
                outcome = await self.transport.complete(
                    credential.secret,
                    request,
                    expect_structured=expect_structured,
                )
                if outcome.ok:
                    call_log.success(len(outcome.text))
                    return outcome.text
                call_log.error(outcome.status.value, outcome.error or "")

            self.selector.record_failure(index)
            last_error = ProviderTransientError(
                outcome.error or f"Provider call failed: {outcome.status.value}",
                status=outcome.status,
                credential_index=index,
            )
            if attempt >= attempts:
                break
            delay = self.policy.get_delay(attempt)
            logger.warning(
                "Attempt %s/%s failed with key %s (%s). Retrying in %.2fs...",
                attempt,
                attempts,
                credential.masked,
                outcome.status.value,
                delay,
            )
            await self._sleep(delay)

        logger.error("All %s attempts failed: %s", attempts, last_error)
        raise ProviderExhausted(
            f"Provider failed after {attempts} attempt(s)",
            attempts=attempts,
            last_error=last_error,
        ) from last_error


__all__ = ["ApiInvoker", "Transport"]
