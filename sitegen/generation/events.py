from __future__ import annotations

import inspect
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union


class ProgressStage(str, Enum):
    ANALYZING = "analyzing"
    REFERENCE_URL = "reference_url"
    REFERENCE_IMAGE = "reference_image"
    DETECTING = "detecting"
    CONTENT = "content"
    DESIGN = "design"
    PAGES = "pages"
    SEO = "seo"
    EXPORTING = "exporting"
    DONE = "done"


STAGE_PROGRESS = {
    ProgressStage.ANALYZING: 5,
    ProgressStage.REFERENCE_URL: 8,
    ProgressStage.REFERENCE_IMAGE: 10,
    ProgressStage.DETECTING: 15,
    ProgressStage.CONTENT: 20,
    ProgressStage.DESIGN: 45,
    ProgressStage.PAGES: 65,
    ProgressStage.SEO: 85,
    ProgressStage.EXPORTING: 95,
    ProgressStage.DONE: 100,
}


@dataclass(frozen=True)
class ProgressEvent:
    stage: ProgressStage
    message: str
    progress: int

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["stage"] = self.stage.value
        return data


ProgressCallback = Callable[[ProgressEvent], Union[None, Awaitable[None]]]


async def dispatch_progress(callback: Optional[ProgressCallback], event: ProgressEvent) -> None:
    if callback is None:
        return
    result = callback(event)
    if inspect.isawaitable(result):
        await result


__all__ = [
    "ProgressCallback",
    "ProgressEvent",
    "ProgressStage",
    "STAGE_PROGRESS",
    "dispatch_progress",
]
