from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any

from ..exceptions import MalformedResponse


_OPEN_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_CLOSE_FENCE_RE = re.compile(r"\n?```\s*$")
_HTML_TAG_RE = re.compile(r"<(?:html|body)\b", re.IGNORECASE)


class ResponseFormat(str, Enum):
    JSON = "json"
    HTML = "html"
    CSS = "css"
    JS = "js"


def strip_code_fence(text: str) -> str:
    """Remove an optional leading ```lang marker and trailing ``` marker."""
    if not text:
        return ""
    candidate = text.strip()
    if candidate.startswith("```"):
        candidate = _OPEN_FENCE_RE.sub("", candidate, count=1)
    if candidate.endswith("```"):
        candidate = _CLOSE_FENCE_RE.sub("", candidate, count=1)
    return candidate.strip()


def parse_response(text: str, fmt: ResponseFormat) -> Any:
    """Strip fences and parse provider text as ``fmt``.

    JSON must decode to an object. Markup must contain an ``<html>`` or
    ``<body>`` tag. Stylesheets and scripts only need to be non-empty.
    """
    cleaned = strip_code_fence(text)
    if not cleaned:
        raise MalformedResponse(f"Empty {fmt.value} response", raw=text or "")

    if fmt is ResponseFormat.JSON:
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise MalformedResponse(f"Invalid JSON response: {exc.msg}", raw=text) from exc
        if not isinstance(data, dict):
            raise MalformedResponse("JSON response is not an object", raw=text)
        return data

    if fmt is ResponseFormat.HTML and not _HTML_TAG_RE.search(cleaned):
        raise MalformedResponse("Markup response has no <html> or <body> tag", raw=text)
    return cleaned


def content_size(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, str):
        return len(value)
    return len(json.dumps(value, ensure_ascii=False))


def is_undersized(value: Any, minimum: int) -> bool:
    if minimum <= 0:
        return False
    return content_size(value) < minimum


__all__ = [
    "ResponseFormat",
    "content_size",
    "is_undersized",
    "parse_response",
    "strip_code_fence",
]
