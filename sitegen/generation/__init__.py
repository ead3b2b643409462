from .context import GenerationContext
from .events import ProgressCallback, ProgressEvent, ProgressStage
from .pipeline import GenerationPipeline
from .steps import StepResult, StepSpec, run_resilient_step

__all__ = [
    "GenerationContext",
    "GenerationPipeline",
    "ProgressCallback",
    "ProgressEvent",
    "ProgressStage",
    "StepResult",
    "StepSpec",
    "run_resilient_step",
]
