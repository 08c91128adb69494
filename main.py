"""
EasyHomework API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from api.routes import router as api_router
from api.routes import tasks_router
from auth.jwt import TokenService
from auth.routes import router as auth_router
from auth.routes import teacher_router
from config.settings import Settings, get_settings
from database.models import Base
from database.session import build_engine, build_session_factory

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("asyncpg", "sqlalchemy.engine", "httpx", "uvicorn.access"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="EasyHomework API",
        version="1.0.0",
        description="Homework tracking for parents and teachers.",
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService.from_settings(settings)

    register_middleware(app, settings)
    register_exception_handlers(app)

    # Routes
    app.include_router(api_router)
    app.include_router(auth_router, prefix="/auth")
    app.include_router(teacher_router, prefix="/teacher")
    app.include_router(tasks_router)

    @app.on_event("startup")
    async def on_startup():
        if settings.auto_create_tables:
            logger.info("Creating missing tables…")
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("EasyHomework API ready on port %d", settings.port)

    @app.on_event("shutdown")
    async def on_shutdown():
        await engine.dispose()

    return app


configure_logging(get_settings())
app = create_app()

if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        "main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
        log_level="debug" if _settings.debug else "info",
    )
