from __future__ import annotations

from typing import TYPE_CHECKING, Optional
from uuid import uuid4

if TYPE_CHECKING:
    from .llm.provider import CallStatus


def new_trace_id() -> str:
    return uuid4().hex


class TrackedError(Exception):
    def __init__(self, message: str, *, error_type: str, trace_id: str | None = None) -> None:
        self.error_type = error_type
        self.trace_id = trace_id or new_trace_id()
        super().__init__(message)

    def with_trace(self) -> str:
        return f"{self.args[0]} (trace_id={self.trace_id})"


class NoCredentialsConfigured(TrackedError):
    """No provider credential is configured; retrying cannot help."""

    def __init__(self, message: str = "No API key is configured", *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="no_credentials", trace_id=trace_id)


class ProviderTransientError(TrackedError):
    """A single provider attempt failed in a way that may succeed on retry."""

    def __init__(
        self,
        message: str,
        *,
        status: "CallStatus",
        credential_index: Optional[int] = None,
        trace_id: str | None = None,
    ) -> None:
        self.status = status
        self.credential_index = credential_index
        super().__init__(message, error_type="provider_transient", trace_id=trace_id)


class ProviderExhausted(TrackedError):
    """Every allowed attempt failed; carries the last transient error."""

    def __init__(
        self,
        message: str,
        *,
        attempts: int,
        last_error: Optional[ProviderTransientError] = None,
        trace_id: str | None = None,
    ) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(message, error_type="provider_exhausted", trace_id=trace_id)


class MalformedResponse(TrackedError):
    def __init__(self, message: str, *, raw: str = "", trace_id: str | None = None) -> None:
        self.raw = raw
        super().__init__(message, error_type="malformed_response", trace_id=trace_id)


__all__ = [
    "new_trace_id",
    "TrackedError",
    "NoCredentialsConfigured",
    "ProviderTransientError",
    "ProviderExhausted",
    "MalformedResponse",
]
