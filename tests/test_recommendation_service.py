"""
Tests for the recommendation service.

The repository is replaced by an ``AsyncMock`` and the random source by
a constant, so every branch of the voting and random selection rules
can be exercised without a database.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from sing_me_a_song_api.app.core.errors import AppError
from sing_me_a_song_api.app.repositories.recommendation_repository import (
    RecommendationRepositoryInterface,
)
from sing_me_a_song_api.app.schemas.recommendation import ScoreFilter
from sing_me_a_song_api.app.services.recommendation_service import RecommendationService

from tests.factories import create_random_data, create_recommendation


LTE_FILTER = ScoreFilter(score=10, score_filter="lte")
GT_FILTER = ScoreFilter(score=10, score_filter="gt")


@pytest.fixture
def repository():
    return AsyncMock(spec=RecommendationRepositoryInterface)


def make_service(repository, draw: float = 0.5) -> RecommendationService:
    return RecommendationService(repository, random_source=lambda: draw)


class TestInsert:
    def test_creates_recommendation_with_new_name(self, repository):
        repository.find_by_name.return_value = None
        data = create_random_data()

        result = asyncio.run(make_service(repository).insert(data))

        assert result is None
        repository.find_by_name.assert_awaited_once_with(data.name)
        repository.create.assert_awaited_once_with(data)

    def test_duplicate_name_raises_conflict(self, repository):
        repository.find_by_name.return_value = create_recommendation()

        with pytest.raises(AppError) as exc_info:
            asyncio.run(make_service(repository).insert(create_random_data()))

        assert exc_info.value.type == "conflict"
        repository.create.assert_not_called()


class TestUpvote:
    def test_upvotes_existing_recommendation(self, repository):
        repository.find.return_value = create_recommendation()

        asyncio.run(make_service(repository).upvote(1))

        repository.find.assert_awaited_once_with(1)
        repository.update_score.assert_awaited_once_with(1, 1)

    def test_missing_recommendation_raises_not_found(self, repository):
        repository.find.return_value = None

        with pytest.raises(AppError) as exc_info:
            asyncio.run(make_service(repository).upvote(1))

        assert exc_info.value.type == "not_found"
        repository.find.assert_awaited_once_with(1)
        repository.update_score.assert_not_called()


class TestDownvote:
    def test_downvotes_existing_recommendation(self, repository):
        repository.find.return_value = create_recommendation()
        repository.update_score.return_value = create_recommendation(score=-1)

        asyncio.run(make_service(repository).downvote(1))

        repository.find.assert_awaited_once_with(1)
        repository.update_score.assert_awaited_once_with(1, -1)
        repository.remove.assert_not_called()

    def test_missing_recommendation_raises_not_found(self, repository):
        repository.find.return_value = None

        with pytest.raises(AppError) as exc_info:
            asyncio.run(make_service(repository).downvote(1))

        assert exc_info.value.type == "not_found"
        repository.update_score.assert_not_called()
        repository.remove.assert_not_called()

    def test_removes_recommendation_below_minus_five(self, repository):
        repository.find.return_value = create_recommendation(score=-5)
        repository.update_score.return_value = create_recommendation(score=-6)

        asyncio.run(make_service(repository).downvote(1))

        repository.update_score.assert_awaited_once_with(1, -1)
        repository.remove.assert_awaited_once_with(1)

    def test_keeps_recommendation_at_minus_five(self, repository):
        repository.find.return_value = create_recommendation(score=-4)
        repository.update_score.return_value = create_recommendation(score=-5)

        asyncio.run(make_service(repository).downvote(1))

        repository.remove.assert_not_called()


class TestRetrieval:
    def test_get_by_id_returns_record(self, repository):
        recommendation = create_recommendation()
        repository.find.return_value = recommendation

        result = asyncio.run(make_service(repository).get_by_id(1))

        assert result == recommendation
        repository.find.assert_awaited_once_with(1)

    def test_get_by_id_missing_raises_not_found(self, repository):
        repository.find.return_value = None

        with pytest.raises(AppError) as exc_info:
            asyncio.run(make_service(repository).get_by_id(1))

        assert exc_info.value.type == "not_found"

    def test_get_returns_all_recommendations(self, repository):
        recommendations = [create_recommendation(id=2), create_recommendation(id=1)]
        repository.find_all.return_value = recommendations

        result = asyncio.run(make_service(repository).get())

        assert result == recommendations
        repository.find_all.assert_awaited_once_with()

    def test_get_top_returns_repository_result(self, repository):
        recommendations = [create_recommendation(id=i, score=20 - i) for i in range(10)]
        repository.get_amount_by_score.return_value = recommendations

        result = asyncio.run(make_service(repository).get_top(10))

        assert len(result) == 10
        assert result == recommendations
        repository.get_amount_by_score.assert_awaited_once_with(10)


class TestGetRandom:
    def test_high_draw_queries_low_score_band(self, repository):
        low = create_recommendation(id=1, score=5)
        repository.find_all.return_value = [low]

        result = asyncio.run(make_service(repository, draw=0.8).get_random())

        assert result == low
        repository.find_all.assert_awaited_once_with(LTE_FILTER)

    def test_low_draw_queries_high_score_band(self, repository):
        high = create_recommendation(id=2, score=11)
        repository.find_all.return_value = [high]

        result = asyncio.run(make_service(repository, draw=0.4).get_random())

        assert result == high
        repository.find_all.assert_awaited_once_with(GT_FILTER)

    def test_draw_at_threshold_queries_low_score_band(self, repository):
        repository.find_all.return_value = [create_recommendation()]

        asyncio.run(make_service(repository, draw=0.7).get_random())

        repository.find_all.assert_awaited_once_with(LTE_FILTER)

    def test_falls_back_to_high_band_when_low_band_empty(self, repository):
        high = create_recommendation(id=1, score=15)
        repository.find_all.side_effect = [[], [high]]

        result = asyncio.run(make_service(repository, draw=0.8).get_random())

        assert result == high
        assert repository.find_all.await_count == 2
        assert repository.find_all.await_args_list[0].args == (LTE_FILTER,)
        assert repository.find_all.await_args_list[1].args == (GT_FILTER,)

    def test_falls_back_to_low_band_when_high_band_empty(self, repository):
        low = create_recommendation(id=1, score=1)
        repository.find_all.side_effect = [[], [low]]

        result = asyncio.run(make_service(repository, draw=0.4).get_random())

        assert result == low
        assert repository.find_all.await_args_list[0].args == (GT_FILTER,)
        assert repository.find_all.await_args_list[1].args == (LTE_FILTER,)

    def test_no_recommendations_raises_not_found(self, repository):
        repository.find_all.return_value = []

        with pytest.raises(AppError) as exc_info:
            asyncio.run(make_service(repository).get_random())

        assert exc_info.value.type == "not_found"
        assert repository.find_all.await_count == 2

    def test_picks_element_from_draw(self, repository):
        pool = [create_recommendation(id=i, name=f"song{i}") for i in range(4)]
        repository.find_all.return_value = pool
        draws = iter([0.9, 0.6])
        service = RecommendationService(repository, random_source=lambda: next(draws))

        result = asyncio.run(service.get_random())

        # int(0.6 * 4) == 2
        assert result == pool[2]
