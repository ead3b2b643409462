from .generation import (
    FileKind,
    GeneratedFile,
    GenerationRequest,
    Language,
    SeoMetadata,
    SiteType,
    WebsiteArtifact,
)

__all__ = [
    "FileKind",
    "GeneratedFile",
    "GenerationRequest",
    "Language",
    "SeoMetadata",
    "SiteType",
    "WebsiteArtifact",
]
