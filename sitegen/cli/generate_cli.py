from __future__ import annotations

import argparse
import asyncio
import base64
import json
import mimetypes
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from ..config import get_settings
from ..generation.context import GenerationContext
from ..generation.events import ProgressEvent
from ..log import setup_logging
from ..schemas.generation import Language, SiteType
from ..services.generation import GenerationService


def _encode_image(path: Path) -> str:
    if not path.exists() or not path.is_file():
        raise SystemExit(f"File not found: {path}")
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise SystemExit(f"Not an image file: {path}")
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def _print_progress(event: ProgressEvent) -> None:
    print(f"[{event.progress:>3}%] {event.message}", file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a static website from a text prompt.")
    parser.add_argument("prompt", help="Description of the website to build")
    parser.add_argument(
        "--language",
        choices=[item.value for item in Language],
        default=Language.VI.value,
        help="Language of the generated content (default: vi)",
    )
    parser.add_argument(
        "--type",
        dest="site_type",
        default=SiteType.LANDING.value,
        help="landing (single page) or website (multi page)",
    )
    parser.add_argument(
        "--page",
        dest="pages",
        action="append",
        default=None,
        help="Page to include; repeat for several pages (default: home)",
    )
    parser.add_argument(
        "--option",
        dest="options",
        action="append",
        default=[],
        help="Optional component to include; repeatable",
    )
    parser.add_argument("--admin", action="store_true", help="Also generate an admin dashboard page")
    parser.add_argument("--reference-url", default=None, help="Website to take design inspiration from")
    parser.add_argument("--reference-image", default=None, help="Image file to take design inspiration from")
    parser.add_argument("--model", default=None, help="Override the configured model")
    parser.add_argument("--quiet", action="store_true", help="Do not print progress to stderr")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        site_type = SiteType(args.site_type)
    except ValueError:
        raise SystemExit(f"Unknown site type: {args.site_type}")

    reference_image = _encode_image(Path(args.reference_image)) if args.reference_image else None
    try:
        context = GenerationContext(
            prompt=args.prompt,
            language=Language(args.language),
            site_type=site_type,
            selected_pages=tuple(args.pages or ["home"]),
            selected_options=tuple(args.options),
            include_admin_page=args.admin,
            reference_url=args.reference_url,
            reference_image=reference_image,
        )
    except ValueError as exc:
        raise SystemExit(str(exc))

    settings = get_settings()
    if args.model:
        settings = replace(settings, model=args.model)
    setup_logging(Path(settings.log_dir) if settings.log_dir else None, settings.log_level)

    service = GenerationService(settings)
    artifact = asyncio.run(
        service.generate(context, on_progress=None if args.quiet else _print_progress)
    )
    print(json.dumps(artifact.model_dump(mode="json"), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
