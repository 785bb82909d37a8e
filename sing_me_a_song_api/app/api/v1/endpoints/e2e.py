"""
Test-support endpoints.

Only mounted when ``settings.environment`` is ``test``.  End-to-end
suites call ``POST /e2e/reset`` before each scenario to start from an
empty table.
"""

from fastapi import APIRouter

from sing_me_a_song_api.app.repositories.recommendation_repository import recommendation_repository

router = APIRouter()


@router.post("/reset")
async def reset_database() -> None:
    await recommendation_repository.truncate()
