from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..config import Settings
from ..exceptions import MalformedResponse, ProviderExhausted
from ..llm.invoker import ApiInvoker
from ..llm.provider import ProviderRequest
from ..log import log_step
from ..schemas.generation import FileKind
from ..utils.response import ResponseFormat, content_size, is_undersized, parse_response
from .prompts import corrective_instruction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepSpec:
    """One pipeline step: how to ask, how to parse, what to use instead."""

    name: str
    kind: FileKind
    response_format: ResponseFormat
    build_messages: Callable[[], List[Dict[str, Any]]]
    fallback: Callable[[], Any]
    path: Optional[str] = None
    min_size: int = 0
    expect_structured: bool = False
    postprocess: Optional[Callable[[Any], Any]] = None
    description: str = "file"


@dataclass(frozen=True)
class StepResult:
    name: str
    value: Any
    fallback: bool
    corrective: bool = False
    error: Optional[str] = None


def fallback_result(step: StepSpec, *, error: Optional[str] = None) -> StepResult:
    value = step.fallback()
    log_step(step.name, fallback=True, size=content_size(value))
    return StepResult(name=step.name, value=value, fallback=True, error=error)


async def _request_value(invoker: ApiInvoker, step: StepSpec, request: ProviderRequest) -> Any:
    raw = await invoker.invoke(request, expect_structured=step.expect_structured)
    value = parse_response(raw, step.response_format)
    if step.postprocess is not None:
        value = step.postprocess(value)
    return value


async def run_resilient_step(step: StepSpec, invoker: ApiInvoker, settings: Settings) -> StepResult:
    """Run ``step`` through the invoker, degrading to its static fallback.

    ``ProviderExhausted`` and ``MalformedResponse`` end in the fallback.
    An undersized but valid answer gets exactly one corrective re-prompt
    through the same invoker. ``NoCredentialsConfigured`` propagates.
    """
    request = ProviderRequest(
        messages=step.build_messages(),
        temperature=settings.temperature,
        max_output_tokens=settings.max_output_tokens,
        model=settings.model,
    )
    try:
        value = await _request_value(invoker, step, request)
    except (ProviderExhausted, MalformedResponse) as exc:
        logger.warning("Step %s failed, using static fallback: %s", step.name, exc.with_trace())
        return fallback_result(step, error=str(exc))

    if not is_undersized(value, step.min_size):
        log_step(step.name, fallback=False, size=content_size(value))
        return StepResult(name=step.name, value=value, fallback=False)

    actual = content_size(value)
    logger.warning(
        "Step %s returned %s chars (minimum %s); issuing corrective re-prompt",
        step.name,
        actual,
        step.min_size,
    )
    corrective_request = request.with_instruction(
        corrective_instruction(step.description, minimum=step.min_size, actual=actual)
    )
    try:
        corrected = await _request_value(invoker, step, corrective_request)
    except (ProviderExhausted, MalformedResponse) as exc:
        logger.warning("Corrective re-prompt for %s failed, keeping first answer: %s", step.name, exc)
        log_step(step.name, fallback=False, size=actual, corrective=True)
        return StepResult(name=step.name, value=value, fallback=False, corrective=True, error=str(exc))

    if content_size(corrected) >= actual:
        value = corrected
    if is_undersized(value, step.min_size):
        logger.warning("Step %s is still undersized after corrective re-prompt", step.name)
    log_step(step.name, fallback=False, size=content_size(value), corrective=True)
    return StepResult(name=step.name, value=value, fallback=False, corrective=True)


__all__ = ["StepResult", "StepSpec", "fallback_result", "run_resilient_step"]
