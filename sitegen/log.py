"""JSON-lines logging for sitegen.

Everything under the ``sitegen`` logger is written as one JSON object per
line. Provider attempts and pipeline steps carry their fields under
``data`` so a run can be reconstructed from the log file alone. Secrets
never reach a record: credentials are identified by their 1-based slot.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Optional

from .exceptions import TrackedError

ROOT_LOGGER = "sitegen"
LOG_FILENAME = "sitegen.jsonl"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        data = getattr(record, "data", None)
        if data is not None:
            entry["data"] = data
        if record.exc_info and record.exc_info[1] is not None:
            entry.update(_describe_error(record.exc_info[1]))
        return json.dumps(entry, ensure_ascii=False, default=str)


def _describe_error(exc: BaseException) -> dict[str, Any]:
    if isinstance(exc, TrackedError):
        return {"error": str(exc), "error_type": exc.error_type, "trace_id": exc.trace_id}
    return {"error": str(exc) or type(exc).__name__, "error_type": type(exc).__name__}


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(log_dir: Path | None = None, level: int | str = logging.INFO) -> logging.Logger:
    """Attach JSON handlers to the ``sitegen`` logger.

    ``log_dir`` adds a ``sitegen.jsonl`` file receiving records at ``level``;
    stderr only ever gets warnings. Calling again only updates the level.
    """
    level = _resolve_level(level)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = JSONFormatter()
    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    stderr_handler = logging.StreamHandler()
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.WARNING)
    logger.addHandler(stderr_handler)
    return logger


class ProviderCallLogger:
    """Times one provider attempt and logs exactly one record for it.

    If the block raises before ``success`` or ``error`` was reported, the
    attempt is logged as ``status="exception"`` and the exception propagates.
    """

    def __init__(self, model: str, credential: int, attempt: int = 0):
        self.model = model
        self.credential = credential
        self.attempt = attempt
        self.start_time = 0.0
        self._reported = False
        self._logger = logging.getLogger(f"{ROOT_LOGGER}.llm")

    def __enter__(self) -> ProviderCallLogger:
        self.start_time = time.monotonic()
        return self

    def __exit__(self, exc_type: Any, exc: Optional[BaseException], tb: Any) -> None:
        if exc is not None and not self._reported and isinstance(exc, Exception):
            self.error("exception", str(exc) or type(exc).__name__)

    def _fields(self, **extra: Any) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "model": self.model,
            "credential": self.credential,
            "attempt": self.attempt,
            "elapsed_s": round(time.monotonic() - self.start_time, 3),
        }
        fields.update(extra)
        return fields

    def success(self, text_len: int) -> None:
        self._reported = True
        self._logger.info("provider_call", extra={"data": self._fields(text_len=text_len)})

    def error(self, status: str, error: str) -> None:
        self._reported = True
        self._logger.warning("provider_call_error", extra={"data": self._fields(status=status, error=error)})


def log_step(step: str, *, fallback: bool, size: int, corrective: bool = False) -> None:
    logging.getLogger(f"{ROOT_LOGGER}.generation").info(
        "pipeline_step",
        extra={"data": {"step": step, "fallback": fallback, "size": size, "corrective": corrective}},
    )


__all__ = ["JSONFormatter", "ProviderCallLogger", "log_step", "setup_logging"]
