"""
Data access for the ``recommendations`` table.

``RecommendationRepositoryInterface`` names the operations the service
layer relies on; ``RecommendationRepository`` implements them on top
of SQLite.  Every call opens its own connection and closes it before
returning.  All queries use parameterized statements.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from typing import List, Optional

from sing_me_a_song_api.app.core.db import get_connection
from sing_me_a_song_api.app.core.errors import conflict_error
from sing_me_a_song_api.app.schemas.recommendation import (
    RecommendationCreate,
    RecommendationRead,
    ScoreFilter,
)


logger = logging.getLogger(__name__)

_SCORE_OPERATORS = {"lte": "<=", "gt": ">"}


class RecommendationRepositoryInterface(ABC):
    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[RecommendationRead]:
        pass

    @abstractmethod
    async def find(self, recommendation_id: int) -> Optional[RecommendationRead]:
        pass

    @abstractmethod
    async def find_all(self, score_filter: Optional[ScoreFilter] = None) -> List[RecommendationRead]:
        pass

    @abstractmethod
    async def create(self, data: RecommendationCreate) -> None:
        pass

    @abstractmethod
    async def update_score(self, recommendation_id: int, delta: int) -> RecommendationRead:
        pass

    @abstractmethod
    async def remove(self, recommendation_id: int) -> None:
        pass

    @abstractmethod
    async def get_amount_by_score(self, amount: int) -> List[RecommendationRead]:
        pass


class RecommendationRepository(RecommendationRepositoryInterface):
    """SQLite implementation of the recommendation repository."""

    async def find_by_name(self, name: str) -> Optional[RecommendationRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM recommendations WHERE name = ?",
                (name,),
            ).fetchone()
            return self._row_to_read(row) if row else None
        finally:
            conn.close()

    async def find(self, recommendation_id: int) -> Optional[RecommendationRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM recommendations WHERE id = ?",
                (recommendation_id,),
            ).fetchone()
            return self._row_to_read(row) if row else None
        finally:
            conn.close()

    async def find_all(self, score_filter: Optional[ScoreFilter] = None) -> List[RecommendationRead]:
        """Return recommendations newest first, optionally within a score band."""
        conn = get_connection()
        try:
            query = "SELECT * FROM recommendations"
            params: list = []
            if score_filter is not None:
                operator = _SCORE_OPERATORS[score_filter.score_filter]
                query += f" WHERE score {operator} ?"
                params.append(score_filter.score)
            query += " ORDER BY id DESC"
            rows = conn.execute(query, tuple(params)).fetchall()
            return [self._row_to_read(row) for row in rows]
        finally:
            conn.close()

    async def create(self, data: RecommendationCreate) -> None:
        """Insert a recommendation with a score of 0.

        A duplicate name that slipped past the service's lookup is
        rejected by the ``UNIQUE`` constraint and reported as a
        conflict.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO recommendations (name, youtube_link) VALUES (?, ?)",
                    (data.name, data.youtube_link),
                )
            except sqlite3.IntegrityError as e:
                conn.rollback()
                raise conflict_error(f"Recommendation '{data.name}' already exists") from e
            conn.commit()
            logger.info("Created recommendation %s (%s)", cursor.lastrowid, data.name)
        finally:
            conn.close()

    async def update_score(self, recommendation_id: int, delta: int) -> RecommendationRead:
        """Add ``delta`` to the score and return the updated record."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE recommendations SET score = score + ? WHERE id = ?",
                (delta, recommendation_id),
            )
            conn.commit()
            row = cursor.execute(
                "SELECT * FROM recommendations WHERE id = ?",
                (recommendation_id,),
            ).fetchone()
            logger.info("Recommendation %s score changed by %+d", recommendation_id, delta)
            return self._row_to_read(row)
        finally:
            conn.close()

    async def remove(self, recommendation_id: int) -> None:
        conn = get_connection()
        try:
            conn.execute("DELETE FROM recommendations WHERE id = ?", (recommendation_id,))
            conn.commit()
            logger.info("Removed recommendation %s", recommendation_id)
        finally:
            conn.close()

    async def get_amount_by_score(self, amount: int) -> List[RecommendationRead]:
        """Return at most ``amount`` recommendations, highest score first."""
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM recommendations ORDER BY score DESC, id ASC LIMIT ?",
                (amount,),
            ).fetchall()
            return [self._row_to_read(row) for row in rows]
        finally:
            conn.close()

    async def truncate(self) -> None:
        """Delete every recommendation.  Used by the end-to-end reset route."""
        conn = get_connection()
        try:
            conn.execute("DELETE FROM recommendations")
            conn.commit()
            logger.warning("All recommendations deleted")
        finally:
            conn.close()

    @staticmethod
    def _row_to_read(row: sqlite3.Row) -> RecommendationRead:
        return RecommendationRead(
            id=row["id"],
            name=row["name"],
            youtube_link=row["youtube_link"],
            score=row["score"],
        )


recommendation_repository = RecommendationRepository()
