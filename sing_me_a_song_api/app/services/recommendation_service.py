"""
Business logic for song recommendations.

The service enforces unique names on creation, applies votes, removes
recommendations whose score falls below ``REMOVAL_SCORE`` and picks
random recommendations biased towards one score band.  It never
touches the database directly; all persistence goes through the
repository passed to the constructor.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from sing_me_a_song_api.app.core.errors import conflict_error, not_found_error
from sing_me_a_song_api.app.repositories.recommendation_repository import (
    RecommendationRepositoryInterface,
    recommendation_repository,
)
from sing_me_a_song_api.app.schemas.recommendation import (
    RecommendationCreate,
    RecommendationRead,
    ScoreFilter,
)


# Score separating the two bands used by ``get_random``.
SCORE_BAND_LIMIT = 10

# Draws at or above this value prefer the ``lte`` band.
LOW_BAND_PROBABILITY_THRESHOLD = 0.7

# A downvote leaving the score below this value removes the recommendation.
REMOVAL_SCORE = -5


class RecommendationService:
    """Service for creating, voting on and retrieving recommendations."""

    def __init__(
        self,
        repository: RecommendationRepositoryInterface,
        random_source: Optional[Callable[[], float]] = None,
    ) -> None:
        self.repository = repository
        self.random_source = random_source or random.random
        self.logger = logging.getLogger(__name__)

    async def insert(self, data: RecommendationCreate) -> None:
        existing = await self.repository.find_by_name(data.name)
        if existing:
            self.logger.info("Rejected duplicate recommendation %r", data.name)
            raise conflict_error(f"Recommendation '{data.name}' already exists")
        await self.repository.create(data)

    async def upvote(self, recommendation_id: int) -> None:
        await self._get_by_id_or_fail(recommendation_id)
        await self.repository.update_score(recommendation_id, 1)

    async def downvote(self, recommendation_id: int) -> None:
        """Decrease the score by one, removing the recommendation past the threshold."""
        await self._get_by_id_or_fail(recommendation_id)
        updated = await self.repository.update_score(recommendation_id, -1)
        if updated.score < REMOVAL_SCORE:
            self.logger.info(
                "Recommendation %s dropped to score %s and will be removed",
                recommendation_id,
                updated.score,
            )
            await self.repository.remove(recommendation_id)

    async def get_by_id(self, recommendation_id: int) -> RecommendationRead:
        return await self._get_by_id_or_fail(recommendation_id)

    async def get(self) -> List[RecommendationRead]:
        return await self.repository.find_all()

    async def get_top(self, amount: int) -> List[RecommendationRead]:
        return await self.repository.get_amount_by_score(amount)

    async def get_random(self) -> RecommendationRead:
        """Return a random recommendation, usually from the lower score band.

        A draw at or above ``LOW_BAND_PROBABILITY_THRESHOLD`` queries
        recommendations scoring at most ``SCORE_BAND_LIMIT``; any other
        draw queries those scoring above it.  When the chosen band is
        empty the other band is used instead.  Raises ``not_found``
        when both bands are empty.
        """
        preferred = self._get_score_filter()
        recommendations = await self.repository.find_all(
            ScoreFilter(score=SCORE_BAND_LIMIT, score_filter=preferred)
        )
        if not recommendations:
            fallback = "gt" if preferred == "lte" else "lte"
            recommendations = await self.repository.find_all(
                ScoreFilter(score=SCORE_BAND_LIMIT, score_filter=fallback)
            )
        if not recommendations:
            raise not_found_error("No recommendations available")

        index = int(self.random_source() * len(recommendations))
        # Injected sources may return 1.0
        return recommendations[min(index, len(recommendations) - 1)]

    def _get_score_filter(self) -> str:
        if self.random_source() >= LOW_BAND_PROBABILITY_THRESHOLD:
            return "lte"
        return "gt"

    async def _get_by_id_or_fail(self, recommendation_id: int) -> RecommendationRead:
        recommendation = await self.repository.find(recommendation_id)
        if not recommendation:
            self.logger.info("Recommendation %s not found", recommendation_id)
            raise not_found_error(f"Recommendation {recommendation_id} not found")
        return recommendation


recommendation_service = RecommendationService(recommendation_repository)
