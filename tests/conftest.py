from __future__ import annotations

from typing import Callable, List, Optional

import pytest

from sitegen.config import Settings
from sitegen.llm.provider import CallOutcome, CallStatus, ProviderRequest

TEST_KEYS = ["test-key-alpha-0001", "test-key-bravo-0002", "test-key-charlie-0003"]


class FakeTransport:
    """Scripted stand-in for the provider client.

    ``outcomes`` are returned in order; once exhausted ``responder`` (if any)
    decides, otherwise ``default`` is returned.
    """

    def __init__(
        self,
        outcomes: Optional[List[CallOutcome]] = None,
        *,
        responder: Optional[Callable[[ProviderRequest, bool], CallOutcome]] = None,
        default: Optional[CallOutcome] = None,
    ) -> None:
        self.outcomes = list(outcomes or [])
        self.responder = responder
        self.default = default or CallOutcome(status=CallStatus.TRANSIENT, error="service unavailable")
        self.calls: list[tuple[str, ProviderRequest, bool]] = []

    async def complete(self, api_key, request, *, expect_structured=False):
        self.calls.append((api_key, request, expect_structured))
        if self.outcomes:
            return self.outcomes.pop(0)
        if self.responder is not None:
            return self.responder(request, expect_structured)
        return self.default

    @property
    def keys_used(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def user_text(request: ProviderRequest, position: int = 1) -> str:
    content = request.messages[position]["content"]
    if isinstance(content, str):
        return content
    return "".join(part.get("text", "") for part in content if part.get("type") == "text")


def ok(text: str) -> CallOutcome:
    return CallOutcome(status=CallStatus.SUCCESS, text=text)


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def factory(**overrides) -> Settings:
        values = dict(
            api_keys=list(TEST_KEYS),
            base_url="http://localhost/v1/",
            model="test-model",
            temperature=0.7,
            max_output_tokens=1024,
            timeout_seconds=5.0,
            max_attempts=3,
            backoff_seconds=1.0,
            key_cooldown_seconds=300.0,
            min_html_chars=0,
            min_page_chars=0,
            min_css_chars=0,
            min_js_chars=0,
            log_level="INFO",
            log_dir=None,
        )
        values.update(overrides)
        return Settings(**values)

    return factory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()
