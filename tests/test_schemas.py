import base64

import pytest
from pydantic import ValidationError

from sitegen.schemas.generation import (
    MAX_REFERENCE_IMAGE_BYTES,
    FileKind,
    GeneratedFile,
    GenerationRequest,
    Language,
    SeoMetadata,
    SiteType,
    WebsiteArtifact,
)


def _image_uri(size: int) -> str:
    return "data:image/png;base64," + base64.b64encode(b"\0" * size).decode("ascii")


def test_request_accepts_camel_case_aliases():
    request = GenerationRequest.model_validate(
        {
            "prompt": "  Spa in Da Nang  ",
            "language": "en",
            "siteType": "multi-page",
            "selectedPages": ["Home", "About", "about", " "],
            "selectedOptions": ["Map"],
            "includeAdminPage": True,
            "referenceUrl": " https://example.com ",
        }
    )
    assert request.prompt == "Spa in Da Nang"
    assert request.language is Language.EN
    assert request.site_type is SiteType.WEBSITE
    assert request.selected_pages == ["home", "about"]
    assert request.selected_options == ["map"]
    assert request.include_admin_page is True
    assert request.reference_url == "https://example.com"


def test_request_defaults():
    request = GenerationRequest(prompt="Bakery")
    assert request.language is Language.VI
    assert request.site_type is SiteType.LANDING
    assert request.selected_pages == ["home"]
    assert request.selected_options == []
    assert request.reference_image is None


@pytest.mark.parametrize("prompt", ["", "    "])
def test_request_rejects_blank_prompt(prompt):
    with pytest.raises(ValidationError):
        GenerationRequest(prompt=prompt)


def test_request_accepts_small_reference_image():
    uri = _image_uri(16)
    assert GenerationRequest(prompt="x", reference_image=uri).reference_image == uri


def test_request_rejects_oversized_reference_image():
    with pytest.raises(ValidationError):
        GenerationRequest(prompt="x", reference_image=_image_uri(MAX_REFERENCE_IMAGE_BYTES + 1))


@pytest.mark.parametrize("value", ["https://example.com/logo.png", "data:image/png;base64,***"])
def test_request_rejects_invalid_reference_image(value):
    with pytest.raises(ValidationError):
        GenerationRequest(prompt="x", reference_image=value)


def test_site_type_aliases():
    assert SiteType("single-page") is SiteType.LANDING
    assert SiteType("multi_page") is SiteType.WEBSITE
    with pytest.raises(ValueError):
        SiteType("brochure")


def test_artifact_is_frozen():
    artifact = WebsiteArtifact(
        files=[GeneratedFile(path="index.html", content="<html></html>", kind=FileKind.HTML, fallback=True)],
        seo=SeoMetadata(title="t", description="d", keywords="k"),
    )
    assert artifact.fully_fallback
    with pytest.raises(ValidationError):
        artifact.warnings = ["changed"]


def test_artifact_dumps_file_kinds_as_strings():
    artifact = WebsiteArtifact(
        files=[GeneratedFile(path="styles.css", content="body{}", kind=FileKind.CSS)],
        seo=SeoMetadata(title="t", description="d", keywords="k"),
    )
    data = artifact.model_dump(mode="json")
    assert data["files"][0]["kind"] == "css"
    assert data["files"][0]["fallback"] is False
    assert not artifact.fully_fallback
