"""Lazy exports for provider utilities to avoid import cycles."""

from __future__ import annotations

from importlib import import_module
from typing import Any


_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    # key_pool
    "Credential": ("sitegen.llm.key_pool", "Credential"),
    "KeyPool": ("sitegen.llm.key_pool", "KeyPool"),
    # key_selector
    "CredentialHealth": ("sitegen.llm.key_selector", "CredentialHealth"),
    "KeySelector": ("sitegen.llm.key_selector", "KeySelector"),
    "SelectorState": ("sitegen.llm.key_selector", "SelectorState"),
    # retry
    "RetryPolicy": ("sitegen.llm.retry", "RetryPolicy"),
    # provider
    "CallOutcome": ("sitegen.llm.provider", "CallOutcome"),
    "CallStatus": ("sitegen.llm.provider", "CallStatus"),
    "InlineImage": ("sitegen.llm.provider", "InlineImage"),
    "ProviderClient": ("sitegen.llm.provider", "ProviderClient"),
    "ProviderRequest": ("sitegen.llm.provider", "ProviderRequest"),
    "build_user_message": ("sitegen.llm.provider", "build_user_message"),
    "parse_data_uri": ("sitegen.llm.provider", "parse_data_uri"),
    # invoker
    "ApiInvoker": ("sitegen.llm.invoker", "ApiInvoker"),
    "Transport": ("sitegen.llm.invoker", "Transport"),
}


__all__ = sorted(_LAZY_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    target = _LAZY_EXPORTS.get(name)
    if not target:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr = target
    module = import_module(module_name)
    value = getattr(module, attr)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_LAZY_EXPORTS.keys()))
