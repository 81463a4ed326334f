from __future__ import annotations

from fastapi import APIRouter

from api.routes import blocks, chain, health, ownership


def get_api_router() -> APIRouter:
    router = APIRouter()

    router.include_router(health.router, tags=["health"])
    router.include_router(ownership.router, tags=["ownership"])
    router.include_router(blocks.router, tags=["blocks"])
    router.include_router(chain.router, tags=["chain"])

    return router
