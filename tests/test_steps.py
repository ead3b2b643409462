import asyncio

import pytest

from conftest import FakeTransport, ok
from sitegen.exceptions import NoCredentialsConfigured
from sitegen.generation.pipeline import coerce_seo
from sitegen.generation.steps import StepSpec, run_resilient_step
from sitegen.llm.invoker import ApiInvoker
from sitegen.llm.key_pool import KeyPool
from sitegen.llm.key_selector import KeySelector
from sitegen.llm.provider import CallOutcome, CallStatus
from sitegen.schemas.generation import FileKind
from sitegen.utils.response import ResponseFormat

FALLBACK_HTML = "<html><body>fallback</body></html>"


def _step(**overrides):
    values = dict(
        name="index",
        path="index.html",
        kind=FileKind.HTML,
        response_format=ResponseFormat.HTML,
        build_messages=lambda: [{"role": "user", "content": "make a page"}],
        fallback=lambda: FALLBACK_HTML,
        min_size=50,
        description="HTML document",
    )
    values.update(overrides)
    return StepSpec(**values)


def _invoker(transport, settings, clock, sleep):
    pool = KeyPool(settings.api_keys)
    return ApiInvoker(pool, KeySelector(pool, clock=clock), transport=transport, settings=settings, sleep=sleep)


def _html(size):
    body = "x" * size
    return f"<html><body>{body}</body></html>"


def test_step_returns_valid_answer(make_settings, clock, sleep):
    settings = make_settings()
    transport = FakeTransport([ok(f"```html\n{_html(100)}\n```")])

    result = asyncio.run(run_resilient_step(_step(), _invoker(transport, settings, clock, sleep), settings))

    assert result.value == _html(100)
    assert not result.fallback
    assert not result.corrective
    assert len(transport.calls) == 1


def test_undersized_answer_gets_one_corrective_prompt(make_settings, clock, sleep):
    settings = make_settings()
    transport = FakeTransport([ok(_html(5)), ok(_html(200))])

    result = asyncio.run(run_resilient_step(_step(), _invoker(transport, settings, clock, sleep), settings))

    assert len(transport.calls) == 2
    corrective_request = transport.calls[1][1]
    assert len(corrective_request.messages) == 2
    assert "at least 50 characters" in corrective_request.messages[-1]["content"]
    assert result.corrective
    assert result.value == _html(200)


def test_still_undersized_after_corrective_keeps_larger_answer(make_settings, clock, sleep):
    settings = make_settings()
    transport = FakeTransport([ok(_html(10)), ok(_html(2))])

    result = asyncio.run(run_resilient_step(_step(), _invoker(transport, settings, clock, sleep), settings))

    assert len(transport.calls) == 2
    assert result.value == _html(10)
    assert not result.fallback


def test_failed_corrective_prompt_keeps_first_answer(make_settings, clock, sleep):
    settings = make_settings(max_attempts=1)
    transport = FakeTransport([ok(_html(5)), CallOutcome(status=CallStatus.TRANSIENT, error="down")])

    result = asyncio.run(run_resilient_step(_step(), _invoker(transport, settings, clock, sleep), settings))

    assert result.value == _html(5)
    assert result.corrective
    assert not result.fallback
    assert result.error


def test_malformed_answer_uses_fallback(make_settings, clock, sleep):
    settings = make_settings()
    transport = FakeTransport([ok("<div>no document</div>")])

    result = asyncio.run(run_resilient_step(_step(), _invoker(transport, settings, clock, sleep), settings))

    assert result.fallback
    assert result.value == FALLBACK_HTML
    assert len(transport.calls) == 1


def test_exhausted_provider_uses_fallback(make_settings, clock, sleep):
    settings = make_settings(max_attempts=2)
    transport = FakeTransport(default=CallOutcome(status=CallStatus.RATE_LIMITED, error="quota"))

    result = asyncio.run(run_resilient_step(_step(), _invoker(transport, settings, clock, sleep), settings))

    assert result.fallback
    assert result.value == FALLBACK_HTML
    assert len(transport.calls) == 2
    assert sleep.delays == [1.0]


def test_postprocess_error_uses_fallback(make_settings, clock, sleep):
    settings = make_settings()
    transport = FakeTransport([ok('{"description": "no title"}')])
    step = _step(
        name="seo",
        path=None,
        kind=FileKind.JSON,
        response_format=ResponseFormat.JSON,
        fallback=lambda: {"title": "t", "description": "d", "keywords": "k"},
        min_size=0,
        expect_structured=True,
        postprocess=coerce_seo,
    )

    result = asyncio.run(run_resilient_step(step, _invoker(transport, settings, clock, sleep), settings))

    assert result.fallback
    assert result.value["title"] == "t"
    assert transport.calls[0][2] is True


def test_no_credentials_propagates(make_settings, clock, sleep):
    settings = make_settings(api_keys=[])
    transport = FakeTransport()

    with pytest.raises(NoCredentialsConfigured):
        asyncio.run(run_resilient_step(_step(), _invoker(transport, settings, clock, sleep), settings))
    assert transport.calls == []
