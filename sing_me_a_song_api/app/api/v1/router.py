"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers under a unified prefix.
The ``/e2e`` routes are only included when the service runs in the
``test`` environment.
"""

from fastapi import APIRouter

from sing_me_a_song_api.app.core.config import settings

from .endpoints import e2e, recommendations


def build_router() -> APIRouter:
    router = APIRouter()
    router.include_router(recommendations.router, prefix="/recommendations", tags=["recommendations"])
    if settings.is_test:
        router.include_router(e2e.router, prefix="/e2e", tags=["e2e"])
    return router
