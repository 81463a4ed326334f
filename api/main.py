from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.deps import load_config
from api.errors import ApiError, api_error_handler, ledger_error_handler
from api.routes import get_api_router
from starledger import __version__
from starledger.core.config import Config
from starledger.core.exceptions import StarLedgerError
from starledger.registry import StarRegistry

logger = logging.getLogger(__name__)


def create_app(config: Config | None = None) -> FastAPI:
    start = time.monotonic()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.started_at = start

        # Expose config/registry in app state for dependency injection + tests.
        app.state.config = getattr(app.state, "config", None) or config or load_config()
        if getattr(app.state, "registry", None) is None:
            app.state.registry = StarRegistry(app.state.config)
            logger.info("star registry initialized at height %d", app.state.registry.height)

        yield

    openapi_tags = [
        {"name": "health", "description": "Liveness, version, and chain metrics."},
        {"name": "ownership", "description": "Challenge issuance and owner-gated appends."},
        {"name": "blocks", "description": "Read-only block lookups by height, hash, and owner."},
        {"name": "chain", "description": "Full-chain integrity validation."},
    ]

    app = FastAPI(
        title="starledger API",
        description="Owner-gated, hash-linked star registry",
        version=__version__,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.started_at = start
    if config is not None:
        app.state.config = config

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarLedgerError, ledger_error_handler)

    app.include_router(get_api_router(), prefix="/api/v1")
    return app


# Module-level app for uvicorn (e.g. `uvicorn api.main:app`).
app = create_app()
