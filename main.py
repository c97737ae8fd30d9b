"""
User Directory API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.error_handlers import register_exception_handlers
from api.middleware import register_middleware
from api.users import router as users_router
from config.settings import Settings, config
from database.session import init_db
from services.container import ServiceContainer

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "asyncio"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> FastAPI:
    """
    Build the app and wire its collaborators once.

    ``session_factory`` lets tests point the app at their own database.
    """
    settings = settings or config
    configure_logging(settings.debug)
    container = ServiceContainer.from_settings(settings, session_factory)

    app = FastAPI(
        title="User Directory API",
        version="1.0.0",
        description="User registration, JWT login and user CRUD.",
    )
    app.state.container = container

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app, debug=settings.debug)

    # Routes
    app.include_router(users_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    @app.on_event("startup")
    async def on_startup():
        if container.engine is not None and settings.create_tables_on_startup:
            await init_db(container.engine)
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        if container.engine is not None:
            await container.engine.dispose()

    return app


if __name__ == "__main__":
    uvicorn.run(
        "main:create_app",
        factory=True,
        reload=config.debug,
        host=config.host,
        port=config.port,
        log_level="debug" if config.debug else "info",
    )
