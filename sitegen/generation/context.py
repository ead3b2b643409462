from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..catalog import PRIMARY_PAGE_IDS, page_filename
from ..llm.provider import parse_data_uri
from ..schemas.generation import GenerationRequest, Language, SiteType

RESERVED_FILENAMES = ("index.html", "admin.html")

LANGUAGE_NAMES = {
    Language.VI: "Tiếng Việt",
    Language.EN: "English",
}


def _normalize_ids(values: Iterable[str]) -> Tuple[str, ...]:
    result: list[str] = []
    for value in values:
        normalized = str(value).strip().lower()
        if normalized and normalized not in result:
            result.append(normalized)
    return tuple(result)


@dataclass(frozen=True)
class GenerationContext:
    """Immutable description of one generation run.

    Threaded unchanged through every pipeline step.
    """

    prompt: str
    language: Language = Language.VI
    site_type: SiteType = SiteType.LANDING
    selected_pages: Tuple[str, ...] = ("home",)
    selected_options: Tuple[str, ...] = ()
    include_admin_page: bool = False
    reference_url: Optional[str] = None
    reference_image: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.prompt or not self.prompt.strip():
            raise ValueError("prompt must not be blank")
        object.__setattr__(self, "language", Language(self.language))
        object.__setattr__(self, "site_type", SiteType(self.site_type))
        object.__setattr__(self, "selected_pages", _normalize_ids(self.selected_pages))
        object.__setattr__(self, "selected_options", _normalize_ids(self.selected_options))
        if self.reference_image:
            parse_data_uri(self.reference_image)

    @classmethod
    def from_request(cls, request: GenerationRequest) -> "GenerationContext":
        return cls(
            prompt=request.prompt,
            language=request.language,
            site_type=request.site_type,
            selected_pages=tuple(request.selected_pages),
            selected_options=tuple(request.selected_options),
            include_admin_page=request.include_admin_page,
            reference_url=request.reference_url,
            reference_image=request.reference_image,
        )

    @property
    def language_name(self) -> str:
        return LANGUAGE_NAMES[self.language]

    @property
    def is_multi_page(self) -> bool:
        return self.site_type is SiteType.WEBSITE

    @property
    def extra_pages(self) -> Tuple[str, ...]:
        """Pages that get their own file, in request order.

        Identifiers that slug to an already claimed filename are dropped, so
        ``"about us"`` after ``"about-us"`` yields one ``about-us.html``.
        """
        if not self.is_multi_page:
            return ()
        claimed = set(RESERVED_FILENAMES)
        pages: list[str] = []
        for page in self.selected_pages:
            if page in PRIMARY_PAGE_IDS or page == "admin":
                continue
            filename = page_filename(page)
            if filename in claimed:
                continue
            claimed.add(filename)
            pages.append(page)
        return tuple(pages)

    @property
    def sections(self) -> Tuple[str, ...]:
        """Sections rendered inside the primary page of a landing site."""
        if self.is_multi_page:
            return ()
        return tuple(page for page in self.selected_pages if page not in PRIMARY_PAGE_IDS)


__all__ = ["GenerationContext", "LANGUAGE_NAMES"]
