from __future__ import annotations

from fastapi import FastAPI
from loguru import logger

from ..services.composition import RenderOptions
from .routes import router
from .sessions import ArchiveManager
from .settings import get_settings


def create_app() -> FastAPI:
    """Create and configure FastAPI instance."""
    settings = get_settings()
    options = RenderOptions.from_settings(settings)
    app = FastAPI(title="Absolutist Worker", version="0.1.0")
    app.state.settings = settings
    app.state.render_options = options
    app.state.archive = ArchiveManager(options=options, win_threshold=settings.win_threshold)
    app.include_router(router)
    logger.info("Absolutist worker ready (artifacts at {})", settings.artifact_root)
    return app


app = create_app()
