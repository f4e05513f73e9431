"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .config import AppConfig, load_config
from .dependencies import include_routers, shutdown_services
from .logging import configure_logging
from .providers.providers_base import ProgressReporter


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await shutdown_services(app)


def create_app(
    config: AppConfig | None = None,
    *,
    reporter: ProgressReporter | None = None,
) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    cfg = config or load_config()
    configure_logging(cfg.log_level)
    app = FastAPI(title="Lip-Sync Studio", lifespan=_lifespan)
    include_routers(app, cfg, reporter=reporter)
    return app


app = create_app()
