from __future__ import annotations

import base64
import binascii
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_REFERENCE_IMAGE_BYTES = 5 * 1024 * 1024


class Language(str, Enum):
    VI = "vi"
    EN = "en"


class SiteType(str, Enum):
    LANDING = "landing"
    WEBSITE = "website"

    @classmethod
    def _missing_(cls, value: object) -> Optional["SiteType"]:
        aliases = {
            "single-page": cls.LANDING,
            "single_page": cls.LANDING,
            "multi-page": cls.WEBSITE,
            "multi_page": cls.WEBSITE,
        }
        if isinstance(value, str):
            return aliases.get(value.strip().lower())
        return None


class FileKind(str, Enum):
    HTML = "html"
    CSS = "css"
    JS = "js"
    JSON = "json"
    MARKDOWN = "md"


class GenerationRequest(BaseModel):
    prompt: str = Field(min_length=1)
    language: Language = Language.VI
    site_type: SiteType = Field(default=SiteType.LANDING, alias="siteType")
    selected_pages: List[str] = Field(default_factory=lambda: ["home"], alias="selectedPages")
    selected_options: List[str] = Field(default_factory=list, alias="selectedOptions")
    include_admin_page: bool = Field(default=False, alias="includeAdminPage")
    reference_url: Optional[str] = Field(default=None, alias="referenceUrl")
    reference_image: Optional[str] = Field(default=None, alias="referenceImage")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "prompt": "A cozy coffee shop in Hanoi with seasonal drinks",
                "language": "en",
                "siteType": "website",
                "selectedPages": ["home", "about", "contact"],
                "selectedOptions": ["newsletter", "map"],
                "includeAdminPage": False,
            }
        },
    )

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("prompt must not be blank")
        return stripped

    @field_validator("site_type", mode="before")
    @classmethod
    def coerce_site_type(cls, value: object) -> object:
        if isinstance(value, str):
            return SiteType(value)
        return value

    @field_validator("selected_pages", "selected_options")
    @classmethod
    def dedupe_identifiers(cls, value: List[str]) -> List[str]:
        seen: list[str] = []
        for item in value:
            normalized = str(item).strip().lower()
            if normalized and normalized not in seen:
                seen.append(normalized)
        return seen

    @field_validator("reference_url")
    @classmethod
    def validate_reference_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    @field_validator("reference_image")
    @classmethod
    def validate_reference_image(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        stripped = value.strip()
        if not stripped.startswith("data:image") or "," not in stripped:
            raise ValueError("referenceImage must be an image data URI")
        payload = stripped.split(",", 1)[1]
        try:
            decoded = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("referenceImage payload is not valid base64") from exc
        if len(decoded) > MAX_REFERENCE_IMAGE_BYTES:
            raise ValueError("referenceImage must be at most 5MB")
        return stripped


class GeneratedFile(BaseModel):
    path: str
    content: str
    kind: FileKind
    fallback: bool = False

    model_config = ConfigDict(frozen=True)


class SeoMetadata(BaseModel):
    title: str
    description: str
    keywords: str

    model_config = ConfigDict(frozen=True)


class WebsiteArtifact(BaseModel):
    files: List[GeneratedFile]
    seo: SeoMetadata
    warnings: List[str] = Field(default_factory=list)
    fallback_steps: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def fully_fallback(self) -> bool:
        return bool(self.files) and all(item.fallback for item in self.files)


__all__ = [
    "FileKind",
    "GeneratedFile",
    "GenerationRequest",
    "Language",
    "MAX_REFERENCE_IMAGE_BYTES",
    "SeoMetadata",
    "SiteType",
    "WebsiteArtifact",
]
