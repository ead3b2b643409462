from .response import (
    ResponseFormat,
    content_size,
    is_undersized,
    parse_response,
    strip_code_fence,
)

__all__ = [
    "ResponseFormat",
    "content_size",
    "is_undersized",
    "parse_response",
    "strip_code_fence",
]
