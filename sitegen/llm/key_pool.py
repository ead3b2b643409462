from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..config import Settings, get_settings
from ..exceptions import NoCredentialsConfigured

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    ordinal: int
    secret: str = field(repr=False)

    @property
    def masked(self) -> str:
        if len(self.secret) <= 8:
            return "*" * len(self.secret)
        return f"{self.secret[:4]}...{self.secret[-4:]}"


class KeyPool:
    """Prioritized, immutable list of provider credentials.

    Credentials keep their load order; the selector refers to them by index
    only and never mutates them.
    """

    def __init__(self, secrets: Iterable[str]) -> None:
        credentials: list[Credential] = []
        seen: set[str] = set()
        for value in secrets:
            secret = str(value or "").strip()
            if not secret or secret in seen:
                continue
            seen.add(secret)
            credentials.append(Credential(ordinal=len(credentials), secret=secret))
        self._credentials: tuple[Credential, ...] = tuple(credentials)
        if not self._credentials:
            logger.warning("No API keys configured; generation will use static fallbacks")
        else:
            logger.info("Loaded %s API key(s)", len(self._credentials))

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "KeyPool":
        resolved = settings or get_settings()
        return cls(resolved.api_keys)

    @property
    def is_empty(self) -> bool:
        return not self._credentials

    def count(self) -> int:
        return len(self._credentials)

    def credential_at(self, index: int) -> Credential:
        if not self._credentials:
            raise NoCredentialsConfigured()
        if index < 0 or index >= len(self._credentials):
            raise IndexError(f"Credential index out of range: {index}")
        return self._credentials[index]

    def __len__(self) -> int:
        return len(self._credentials)

    def __repr__(self) -> str:
        masked = ", ".join(credential.masked for credential in self._credentials)
        return f"KeyPool([{masked}])"


__all__ = ["Credential", "KeyPool"]
