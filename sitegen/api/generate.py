from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from ..exceptions import TrackedError
from ..generation.context import GenerationContext
from ..generation.events import ProgressEvent
from ..schemas.generation import GenerationRequest, WebsiteArtifact
from ..services.generation import GenerationService, get_generation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generate"])

_STREAM_DONE = object()
_stream_tasks: "set[asyncio.Task[object]]" = set()


def _build_context(payload: GenerationRequest) -> GenerationContext:
    try:
        return GenerationContext.from_request(payload)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _ndjson(item: dict[str, Any]) -> str:
    return json.dumps(item, ensure_ascii=False) + "\n"


def _error_payload(exc: BaseException) -> dict[str, Any]:
    if isinstance(exc, TrackedError):
        return {
            "type": "error",
            "error_type": exc.error_type,
            "message": str(exc),
            "trace_id": exc.trace_id,
        }
    return {"type": "error", "error_type": "internal", "message": "Generation failed"}


def _log_stream_task_result(task: "asyncio.Task[object]") -> None:
    _stream_tasks.discard(task)
    if task.cancelled():
        return
    try:
        task.result()
    except Exception:
        logger.exception("Generation stream task failed")


async def _stream_events(service: GenerationService, context: GenerationContext) -> AsyncGenerator[str, None]:
    """Yield NDJSON lines for one run.

    A started run always finishes; when the client goes away the remaining
    events are left in the queue and the result is discarded.
    """
    queue: asyncio.Queue[object] = asyncio.Queue()

    def on_progress(event: ProgressEvent) -> None:
        queue.put_nowait(event)

    async def run() -> None:
        try:
            artifact = await service.generate(context, on_progress=on_progress)
            queue.put_nowait(artifact)
        except Exception as exc:
            queue.put_nowait(exc)
            raise
        finally:
            queue.put_nowait(_STREAM_DONE)

    task = asyncio.create_task(run())
    _stream_tasks.add(task)
    task.add_done_callback(_log_stream_task_result)
    while True:
        item = await queue.get()
        if item is _STREAM_DONE:
            break
        if isinstance(item, ProgressEvent):
            yield _ndjson({"type": "progress", **item.to_dict()})
        elif isinstance(item, WebsiteArtifact):
            yield _ndjson({"type": "result", "artifact": item.model_dump(mode="json")})
        elif isinstance(item, BaseException):
            yield _ndjson(_error_payload(item))


@router.post("/generate", response_model=WebsiteArtifact)
async def generate(
    payload: GenerationRequest,
    service: GenerationService = Depends(get_generation_service),
) -> WebsiteArtifact:
    context = _build_context(payload)
    try:
        return await service.generate(context)
    except TrackedError as exc:
        logger.error("Generation failed: %s", exc.with_trace())
        raise HTTPException(status_code=502, detail=_error_payload(exc)) from exc


@router.post("/generate/stream")
async def generate_stream(
    payload: GenerationRequest,
    service: GenerationService = Depends(get_generation_service),
) -> StreamingResponse:
    context = _build_context(payload)
    return StreamingResponse(_stream_events(service, context), media_type="application/x-ndjson")


@router.get("/credentials")
async def credentials(
    service: GenerationService = Depends(get_generation_service),
) -> dict[str, Any]:
    return service.credential_status()


__all__ = ["router"]
