"""
Recommendation endpoints for API v1.

These routes expose creation, voting and the retrieval variants of the
recommendation service.  Business errors raised by the service are
turned into HTTP responses by the application's ``AppError`` handler,
so the handlers below contain no error translation of their own.
"""

from typing import List

from fastapi import APIRouter, Path, status

from sing_me_a_song_api.app.schemas.recommendation import RecommendationCreate, RecommendationRead
from sing_me_a_song_api.app.services.recommendation_service import recommendation_service

router = APIRouter()


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_recommendation(data: RecommendationCreate) -> None:
    """Create a recommendation.  Returns 409 if the name is taken."""
    await recommendation_service.insert(data)


@router.get("/", response_model=List[RecommendationRead])
async def list_recommendations() -> List[RecommendationRead]:
    """Return every recommendation, newest first."""
    return await recommendation_service.get()


@router.get("/random", response_model=RecommendationRead)
async def get_random_recommendation() -> RecommendationRead:
    """Return a random recommendation, favouring scores of 10 or less.

    Returns 404 when there are no recommendations at all.
    """
    return await recommendation_service.get_random()


@router.get("/top/{amount}", response_model=List[RecommendationRead])
async def get_top_recommendations(amount: int = Path(..., ge=1)) -> List[RecommendationRead]:
    """Return up to ``amount`` recommendations with the highest scores."""
    return await recommendation_service.get_top(amount)


@router.get("/{recommendation_id}", response_model=RecommendationRead)
async def get_recommendation(recommendation_id: int) -> RecommendationRead:
    return await recommendation_service.get_by_id(recommendation_id)


@router.post("/{recommendation_id}/upvote")
async def upvote_recommendation(recommendation_id: int) -> None:
    await recommendation_service.upvote(recommendation_id)


@router.post("/{recommendation_id}/downvote")
async def downvote_recommendation(recommendation_id: int) -> None:
    """Downvote a recommendation.  It is deleted once its score drops below -5."""
    await recommendation_service.downvote(recommendation_id)
