from __future__ import annotations

import logging
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import generate_router
from .config import get_settings
from .log import setup_logging
from .services.generation import GenerationService, get_generation_service

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(Path(settings.log_dir) if settings.log_dir else None, settings.log_level)

    app = FastAPI(title="sitegen API", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(generate_router)
    logger.info("sitegen API %s ready (model=%s)", __version__, settings.model)

    @app.get("/health")
    def health(service: GenerationService = Depends(get_generation_service)) -> dict:
        checks: dict[str, str] = {}
        overall = "ok"

        status = service.credential_status()
        if status["configured"] == 0:
            checks["api_key"] = "missing"
            overall = "degraded"
        elif status["healthy"] == 0:
            checks["api_key"] = "cooling_down"
            overall = "degraded"
        else:
            checks["api_key"] = "ok"
        checks["api_key_count"] = str(status["configured"])

        return {"status": overall, "checks": checks}

    return app


app = create_app()

__all__ = ["create_app", "app"]
