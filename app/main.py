from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """
    Load and validate alias tables on boot.

    A malformed table raises ConfigurationError here and aborts startup, so
    no request is ever served with ambiguous header mappings.
    """
    from app.api.dependencies import get_alias_resolver

    resolver = get_alias_resolver()
    logging.getLogger(__name__).info("Alias tables validated for %d industries", len(resolver.industries()))
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()

    application = FastAPI(
        title="Industry Dashboard API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import dashboard_router

    application.include_router(dashboard_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
