"""
Generation Prompts

Instruction builders for every pipeline step.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..catalog import option_label, page_filename, page_label
from ..llm.provider import build_user_message
from .context import GenerationContext

MAX_MARKUP_CONTEXT_CHARS = 6000

# ============ Shared System Prompt ============

SYSTEM_PROMPT = """You are an expert web developer who builds complete, production-ready static websites.

Rules:
- All visible content MUST be written in {language}
- Modern, beautiful, responsive UI using Tailwind CSS utility classes (loaded from the CDN)
- Semantic HTML5 with proper meta tags and schema.org markup where it fits
- Plain HTML, CSS and vanilla JavaScript only; no frameworks, no build step
- Pages link the shared stylesheet as "styles.css" and the shared script as "script.js"
- Return ONLY the requested file content. No explanations, no markdown commentary
"""

# ============ Step Instructions ============

INDEX_INSTRUCTIONS = """Create the primary page "index.html" for a {site_type}.

User request:
{prompt}

Requirements:
- A complete HTML document starting with <!DOCTYPE html>
- Header with navigation, a strong hero section, rich content sections and a footer
- Realistic copy that matches the request; no lorem ipsum
{structure}{options}{reference}
Return ONLY the HTML document."""

STYLESHEET_INSTRUCTIONS = """Write the shared stylesheet "styles.css" for the website below.

User request:
{prompt}

Complement the Tailwind classes already used in the markup: custom colors, typography,
animations, hover states, glassmorphism cards and responsive tweaks. Style every
custom class the markup references.

Markup:
{markup}

Return ONLY the CSS."""

SCRIPT_INSTRUCTIONS = """Write the shared behavior script "script.js" for the website below.

User request:
{prompt}

Add: mobile menu toggle, smooth scrolling for in-page anchors, scroll-reveal
animations, form validation with friendly messages in {language}, and any
interactive components present in the markup.{options}

Markup:
{markup}

Return ONLY the JavaScript."""

PAGE_INSTRUCTIONS = """Create the page "{filename}" ({label}) for the multi-page website below.

User request:
{prompt}

Requirements:
- A complete HTML document starting with <!DOCTYPE html>
- Reuse the header, navigation and footer of the primary page so the site feels consistent
- Content dedicated to the "{label}" page, relevant to the request
- Link "styles.css" and "script.js"

Primary page markup for reference:
{markup}

Return ONLY the HTML document."""

ADMIN_INSTRUCTIONS = """Create a basic admin dashboard page "admin.html" for the website below.

User request:
{prompt}

Requirements:
- A complete HTML document starting with <!DOCTYPE html>
- Sidebar navigation, summary statistic cards, a data table of recent records and a simple edit form
- All labels in {language}
- Link "styles.css" and "script.js"

Return ONLY the HTML document."""

SEO_INSTRUCTIONS = """Write SEO metadata for this website request:
{prompt}

Language: {language}

Respond with a JSON object only, exactly in this shape:
{{"title": "at most 60 characters", "description": "at most 160 characters", "keywords": "comma, separated, keywords"}}"""

CORRECTIVE_INSTRUCTIONS = """Your previous answer was too short ({actual} characters).
Regenerate the complete {what} with at least {minimum} characters of real content.
Do not truncate, do not summarize, and return ONLY the {what}."""


def _system_message(context: GenerationContext) -> Dict[str, Any]:
    return {"role": "system", "content": SYSTEM_PROMPT.format(language=context.language_name)}


def _trim_markup(markup: Optional[str]) -> str:
    text = (markup or "").strip()
    if len(text) > MAX_MARKUP_CONTEXT_CHARS:
        return f"{text[:MAX_MARKUP_CONTEXT_CHARS]}\n<!-- truncated -->"
    return text


def _format_structure(context: GenerationContext) -> str:
    if context.is_multi_page:
        labels = [page_label(page, context.language) for page in context.extra_pages]
        if not labels:
            return ""
        return (
            "- Navigation must link these separate pages: "
            + ", ".join(f"{label} ({page_filename(page)})" for label, page in zip(labels, context.extra_pages))
            + "\n"
        )
    sections = [page_label(page, context.language) for page in context.sections]
    if not sections:
        return ""
    return "- Include these sections on the single page, each with an anchor id: " + ", ".join(sections) + "\n"


def _format_options(context: GenerationContext, *, prefix: str = "- ") -> str:
    if not context.selected_options:
        return ""
    labels = [option_label(option, context.language) for option in context.selected_options]
    return f"{prefix}Include these components: " + ", ".join(labels) + "\n"


def _format_reference(context: GenerationContext) -> str:
    lines: List[str] = []
    if context.reference_url:
        lines.append(f"- Take design inspiration from: {context.reference_url}")
    if context.reference_image:
        lines.append("- Use the attached reference image's colors, layout and typography as inspiration")
    return "".join(f"{line}\n" for line in lines)


def build_index_messages(context: GenerationContext) -> List[Dict[str, Any]]:
    site_type = "multi-page website" if context.is_multi_page else "single-page landing page"
    text = INDEX_INSTRUCTIONS.format(
        site_type=site_type,
        prompt=context.prompt,
        structure=_format_structure(context),
        options=_format_options(context),
        reference=_format_reference(context),
    )
    return [_system_message(context), build_user_message(text, context.reference_image)]


def build_stylesheet_messages(context: GenerationContext, markup: Optional[str]) -> List[Dict[str, Any]]:
    text = STYLESHEET_INSTRUCTIONS.format(prompt=context.prompt, markup=_trim_markup(markup))
    return [_system_message(context), build_user_message(text, context.reference_image)]


def build_script_messages(context: GenerationContext, markup: Optional[str]) -> List[Dict[str, Any]]:
    options = _format_options(context, prefix="\n")
    text = SCRIPT_INSTRUCTIONS.format(
        prompt=context.prompt,
        language=context.language_name,
        options=options.rstrip("\n"),
        markup=_trim_markup(markup),
    )
    return [_system_message(context), build_user_message(text)]


def build_page_messages(
    context: GenerationContext,
    page_id: str,
    filename: str,
    markup: Optional[str],
) -> List[Dict[str, Any]]:
    text = PAGE_INSTRUCTIONS.format(
        filename=filename,
        label=page_label(page_id, context.language),
        prompt=context.prompt,
        markup=_trim_markup(markup),
    )
    return [_system_message(context), build_user_message(text)]


def build_admin_messages(context: GenerationContext) -> List[Dict[str, Any]]:
    text = ADMIN_INSTRUCTIONS.format(prompt=context.prompt, language=context.language_name)
    return [_system_message(context), build_user_message(text)]


def build_seo_messages(context: GenerationContext) -> List[Dict[str, Any]]:
    text = SEO_INSTRUCTIONS.format(prompt=context.prompt, language=context.language_name)
    return [
        {"role": "system", "content": "You are an SEO specialist. Answer with JSON only."},
        build_user_message(text),
    ]


def corrective_instruction(what: str, *, minimum: int, actual: int) -> str:
    return CORRECTIVE_INSTRUCTIONS.format(what=what, minimum=minimum, actual=actual)


__all__ = [
    "MAX_MARKUP_CONTEXT_CHARS",
    "SYSTEM_PROMPT",
    "build_admin_messages",
    "build_index_messages",
    "build_page_messages",
    "build_script_messages",
    "build_seo_messages",
    "build_stylesheet_messages",
    "corrective_instruction",
]
