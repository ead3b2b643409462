from __future__ import annotations

import base64
import binascii
import hashlib
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


class CallStatus(str, Enum):
    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    TRANSIENT = "transient"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class CallOutcome:
    status: CallStatus
    text: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is CallStatus.SUCCESS


@dataclass(frozen=True)
class InlineImage:
    mime_type: str
    data: str

    def to_content_part(self) -> Dict[str, Any]:
        return {
            "type": "image_url",
            "image_url": {"url": f"data:{self.mime_type};base64,{self.data}"},
        }


def parse_data_uri(value: str) -> InlineImage:
    """Split ``data:<mime>;base64,<payload>`` into its MIME type and payload."""
    text = (value or "").strip()
    if not text.startswith("data:") or "," not in text:
        raise ValueError("Reference image must be a data URI")
    header, payload = text.split(",", 1)
    meta = header[len("data:"):]
    parts = meta.split(";")
    mime_type = parts[0].strip().lower()
    if not mime_type.startswith("image/"):
        raise ValueError(f"Unsupported reference image type: {mime_type or 'unknown'}")
    if "base64" not in [part.strip().lower() for part in parts[1:]]:
        raise ValueError("Reference image must be base64 encoded")
    payload = payload.strip()
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Reference image payload is not valid base64") from exc
    return InlineImage(mime_type=mime_type, data=payload)


def build_user_message(text: str, reference_image: Optional[str] = None) -> Dict[str, Any]:
    if not reference_image:
        return {"role": "user", "content": text}
    image = parse_data_uri(reference_image)
    return {
        "role": "user",
        "content": [
            image.to_content_part(),
            {"type": "text", "text": text},
        ],
    }


@dataclass(frozen=True)
class ProviderRequest:
    messages: List[Dict[str, Any]]
    temperature: float = 0.7
    max_output_tokens: int = 8192
    model: Optional[str] = None

    def with_instruction(self, text: str) -> "ProviderRequest":
        """Return a copy with one more user turn appended."""
        messages = [dict(message) for message in self.messages]
        messages.append({"role": "user", "content": text})
        return replace(self, messages=messages)


@dataclass
class ProviderClient:
    """Network boundary to the generative-AI provider.

    Every call returns a tagged :class:`CallOutcome`; SDK exceptions are
    classified here and never inspected by message text elsewhere.
    """

    settings: Settings = field(default_factory=get_settings)
    _cache: Dict[str, AsyncOpenAI] = field(default_factory=dict, init=False, repr=False)

    async def complete(
        self,
        api_key: str,
        request: ProviderRequest,
        *,
        expect_structured: bool = False,
    ) -> CallOutcome:
        payload: Dict[str, Any] = {
            "model": request.model or self.settings.model,
            "messages": request.messages,
            "temperature": request.temperature,
            "max_tokens": request.max_output_tokens,
        }
        if expect_structured:
            payload["response_format"] = {"type": "json_object"}

        client = self._client_for(api_key)
        try:
            response = await client.chat.completions.create(**payload)
        except (openai.OpenAIError, httpx.HTTPError) as exc:
            status = self._classify_error(exc)
            return CallOutcome(status=status, error=self._error_message(exc))
        except Exception as exc:
            logger.warning("Unexpected provider error: %s", type(exc).__name__)
            return CallOutcome(status=CallStatus.TRANSIENT, error=str(exc) or type(exc).__name__)

        text = self._extract_text(response)
        if text is None:
            return CallOutcome(status=CallStatus.MALFORMED, error="Provider response had no text content")
        return CallOutcome(status=CallStatus.SUCCESS, text=text)

    def _client_for(self, api_key: str) -> AsyncOpenAI:
        cache_key = self._hash_key(api_key)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached
        logger.debug("Creating provider client: base_url=%s", self.settings.base_url)
        client = AsyncOpenAI(
            api_key=api_key,
            base_url=self.settings.base_url,
            timeout=self.settings.timeout_seconds,
            max_retries=0,
        )
        self._cache[cache_key] = client
        return client

    def _extract_text(self, response: Any) -> Optional[str]:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            return None
        return content

    def _classify_error(self, exc: Exception) -> CallStatus:
        if isinstance(exc, openai.RateLimitError):
            return CallStatus.RATE_LIMITED
        if isinstance(exc, openai.APIStatusError) and exc.status_code == 429:
            return CallStatus.RATE_LIMITED
        if isinstance(exc, openai.APIResponseValidationError):
            return CallStatus.MALFORMED
        return CallStatus.TRANSIENT

    def _error_message(self, exc: Exception) -> str:
        message = str(exc)
        body = getattr(exc, "body", None)
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                message = error.get("message") or message
        elif isinstance(body, str) and body:
            message = body
        return message

    def _hash_key(self, value: str) -> str:
        digest = hashlib.sha256(value.encode("utf-8")).hexdigest()
        return digest[:16]


__all__ = [
    "CallOutcome",
    "CallStatus",
    "InlineImage",
    "ProviderClient",
    "ProviderRequest",
    "build_user_message",
    "parse_data_uri",
]
