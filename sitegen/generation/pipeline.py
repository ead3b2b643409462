from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..catalog import page_filename, page_label, progress_message
from ..config import Settings, get_settings
from ..exceptions import MalformedResponse, NoCredentialsConfigured
from ..generators.fallback import (
    fallback_admin_html,
    fallback_css,
    fallback_index_html,
    fallback_js,
    fallback_page_html,
    fallback_seo,
)
from ..llm.invoker import ApiInvoker
from ..schemas.generation import FileKind, GeneratedFile, Language, SeoMetadata, WebsiteArtifact
from ..utils.response import ResponseFormat
from . import prompts
from .context import GenerationContext
from .events import STAGE_PROGRESS, ProgressCallback, ProgressEvent, ProgressStage, dispatch_progress
from .steps import StepResult, StepSpec, fallback_result, run_resilient_step

logger = logging.getLogger(__name__)

INDEX_PATH = "index.html"
STYLESHEET_PATH = "styles.css"
SCRIPT_PATH = "script.js"
ADMIN_PATH = "admin.html"

WARNING_MESSAGES = {
    "no_credentials": {
        "vi": "Chưa cấu hình API key. Website được tạo từ mẫu dựng sẵn.",
        "en": "No API key is configured. The website was built from static templates.",
    },
    "degraded": {
        "vi": "Dịch vụ AI tạm thời không khả dụng; một số tệp được tạo từ mẫu dựng sẵn: {steps}.",
        "en": "The AI service was unavailable for some steps; these were built from static templates: {steps}.",
    },
}


def _warning(key: str, language: Language, **values: str) -> str:
    return WARNING_MESSAGES[key][language.value].format(**values)


def coerce_seo(data: Any) -> Dict[str, str]:
    if not isinstance(data, dict):
        raise MalformedResponse("SEO metadata is not an object")
    title = str(data.get("title") or "").strip()
    if not title:
        raise MalformedResponse("SEO metadata has no title")
    description = str(data.get("description") or "").strip()
    keywords = data.get("keywords") or ""
    if isinstance(keywords, (list, tuple)):
        keywords = ", ".join(str(item).strip() for item in keywords if str(item).strip())
    return {
        "title": title[:60],
        "description": description[:160],
        "keywords": str(keywords).strip(),
    }


@dataclass
class _RunState:
    files: List[GeneratedFile] = field(default_factory=list)
    fallback_steps: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    language: Language = Language.VI
    offline: bool = False


class GenerationPipeline:
    """Produce a complete :class:`WebsiteArtifact` from a context.

    Steps run strictly in sequence so the key selector keeps reusing the same
    credential across the run. Every step has a static fallback, so ``run``
    always returns a full artifact.
    """

    def __init__(
        self,
        invoker: ApiInvoker,
        *,
        settings: Optional[Settings] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.invoker = invoker
        self.settings = settings or get_settings()
        self.on_progress = on_progress

    async def run(self, context: GenerationContext) -> WebsiteArtifact:
        state = _RunState(language=context.language)
        language = context.language

        await self._emit(ProgressStage.ANALYZING, language)
        if context.reference_url:
            await self._emit(ProgressStage.REFERENCE_URL, language, url=context.reference_url)
        if context.reference_image:
            await self._emit(ProgressStage.REFERENCE_IMAGE, language)
        await self._emit(ProgressStage.DETECTING, language)

        await self._emit(ProgressStage.CONTENT, language)
        index = await self._run_file_step(self._index_step(context), state)
        markup = index.value

        await self._emit(ProgressStage.DESIGN, language)
        await self._run_file_step(self._stylesheet_step(context, markup), state)
        await self._run_file_step(self._script_step(context, markup), state)

        for page_id in context.extra_pages:
            await self._emit(ProgressStage.PAGES, language, page=page_label(page_id, language))
            await self._run_file_step(self._page_step(context, page_id, markup), state)

        if context.include_admin_page:
            await self._emit(ProgressStage.PAGES, language, page=page_label("admin", language))
            await self._run_file_step(self._admin_step(context), state)

        await self._emit(ProgressStage.SEO, language)
        seo_result = await self._run_step(self._seo_step(context), state)

        await self._emit(ProgressStage.EXPORTING, language)
        if state.fallback_steps and not state.offline:
            state.warnings.append(_warning("degraded", language, steps=", ".join(state.fallback_steps)))

        artifact = WebsiteArtifact(
            files=state.files,
            seo=SeoMetadata(**seo_result.value),
            warnings=state.warnings,
            fallback_steps=state.fallback_steps,
        )
        logger.info(
            "Pipeline finished: files=%s fallback_steps=%s",
            len(artifact.files),
            len(artifact.fallback_steps),
        )
        await self._emit(ProgressStage.DONE, language, title=artifact.seo.title)
        return artifact

    async def _run_step(self, step: StepSpec, state: _RunState) -> StepResult:
        if state.offline:
            result = fallback_result(step)
        else:
            try:
                result = await run_resilient_step(step, self.invoker, self.settings)
            except NoCredentialsConfigured as exc:
                logger.error("Generation cannot reach the provider: %s", exc.with_trace())
                state.offline = True
                state.warnings.append(_warning("no_credentials", state.language))
                result = fallback_result(step, error=str(exc))
        if result.fallback:
            state.fallback_steps.append(step.name)
        return result

    async def _run_file_step(self, step: StepSpec, state: _RunState) -> StepResult:
        result = await self._run_step(step, state)
        if step.path:
            state.files.append(
                GeneratedFile(
                    path=step.path,
                    content=str(result.value),
                    kind=step.kind,
                    fallback=result.fallback,
                )
            )
        return result

    def _index_step(self, context: GenerationContext) -> StepSpec:
        return StepSpec(
            name="index",
            path=INDEX_PATH,
            kind=FileKind.HTML,
            response_format=ResponseFormat.HTML,
            build_messages=lambda: prompts.build_index_messages(context),
            fallback=lambda: fallback_index_html(context.prompt, context.language, context.extra_pages),
            min_size=self.settings.min_html_chars,
            description="HTML document",
        )

    def _stylesheet_step(self, context: GenerationContext, markup: str) -> StepSpec:
        return StepSpec(
            name="stylesheet",
            path=STYLESHEET_PATH,
            kind=FileKind.CSS,
            response_format=ResponseFormat.CSS,
            build_messages=lambda: prompts.build_stylesheet_messages(context, markup),
            fallback=fallback_css,
            min_size=self.settings.min_css_chars,
            description="CSS stylesheet",
        )

    def _script_step(self, context: GenerationContext, markup: str) -> StepSpec:
        return StepSpec(
            name="script",
            path=SCRIPT_PATH,
            kind=FileKind.JS,
            response_format=ResponseFormat.JS,
            build_messages=lambda: prompts.build_script_messages(context, markup),
            fallback=lambda: fallback_js(context.language),
            min_size=self.settings.min_js_chars,
            description="JavaScript file",
        )

    def _page_step(self, context: GenerationContext, page_id: str, markup: str) -> StepSpec:
        filename = page_filename(page_id)
        return StepSpec(
            name=f"page:{page_id}",
            path=filename,
            kind=FileKind.HTML,
            response_format=ResponseFormat.HTML,
            build_messages=lambda: prompts.build_page_messages(context, page_id, filename, markup),
            fallback=lambda: fallback_page_html(context.prompt, context.language, page_id, context.extra_pages),
            min_size=self.settings.min_page_chars,
            description="HTML document",
        )

    def _admin_step(self, context: GenerationContext) -> StepSpec:
        return StepSpec(
            name="admin",
            path=ADMIN_PATH,
            kind=FileKind.HTML,
            response_format=ResponseFormat.HTML,
            build_messages=lambda: prompts.build_admin_messages(context),
            fallback=lambda: fallback_admin_html(context.prompt, context.language),
            min_size=self.settings.min_page_chars,
            description="HTML document",
        )

    def _seo_step(self, context: GenerationContext) -> StepSpec:
        return StepSpec(
            name="seo",
            kind=FileKind.JSON,
            response_format=ResponseFormat.JSON,
            build_messages=lambda: prompts.build_seo_messages(context),
            fallback=lambda: fallback_seo(context.prompt),
            expect_structured=True,
            postprocess=coerce_seo,
            description="JSON object",
        )

    async def _emit(self, stage: ProgressStage, language: Language, **values: str) -> None:
        event = ProgressEvent(
            stage=stage,
            message=progress_message(stage.value, language, **values),
            progress=STAGE_PROGRESS[stage],
        )
        logger.debug("Progress: %s", event.message)
        await dispatch_progress(self.on_progress, event)


__all__ = ["GenerationPipeline", "coerce_seo"]
