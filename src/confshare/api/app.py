"""FastAPI application with lifespan management.

The lifespan is the host's activation: it opens the store once, builds the
router around it and keeps both on ``app.state`` for the life of the process.
"""

from __future__ import annotations

import importlib.metadata
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from confshare.api.middleware.error_handler import register_error_handlers
from confshare.api.routes import config, health
from confshare.core.config import AppSettings, StoreConfig
from confshare.core.logging_config import setup_logging
from confshare.core.startup_checks import validate_settings
from confshare.exceptions import PersistenceError
from confshare.router import ConfigRouter
from confshare.store.config_store import ConfigStore

log = logging.getLogger(__name__)


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("confshare")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


def open_store(config: StoreConfig) -> ConfigStore | None:
    """Open the host store, or ``None`` if its file cannot be used."""
    try:
        return ConfigStore.open(
            config.data_dir,
            config.file_name,
            config.encoding,
            escape_unicode=config.escape_unicode,
            atomic_writes=config.atomic_writes,
            stripes=config.stripes,
        )
    except PersistenceError:
        log.error("Failed to open the configuration store", exc_info=True)
        return None


def create_app(settings: AppSettings | None = None, *, configure_logging: bool = True) -> FastAPI:
    """Build the host application.

    Args:
        settings: Explicit settings; read from the environment when omitted.
        configure_logging: Install the structlog handler on the root logger.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application startup/shutdown lifecycle."""
        app_settings = settings or AppSettings()
        validate_settings(app_settings)
        if configure_logging:
            setup_logging(app_settings.observability)

        store = open_store(app_settings.store)
        app.state.settings = app_settings
        app.state.store = store
        app.state.config_router = ConfigRouter(app_settings.host.authority, store)
        log.info("Serving configuration authority %s", app_settings.host.authority)
        yield

    api_config = (settings or AppSettings()).api
    app = FastAPI(
        title=api_config.title,
        description=api_config.description,
        version=_get_version(),
        lifespan=lifespan,
    )
    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(config.router)
    return app


app = create_app()
