"""
Pydantic schemas for song recommendations.

A recommendation is a named YouTube link with a vote score.  The JSON
representation uses ``youtubeLink`` while Python code and the database
use ``youtube_link``; both names are accepted on input.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


YOUTUBE_LINK_PATTERN = re.compile(r"^(https?://)?(www\.youtube\.com|youtu\.?be)/.+$")


class RecommendationCreate(BaseModel):
    """Schema for creating a new recommendation."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="Song name, unique across recommendations")
    youtube_link: str = Field(..., alias="youtubeLink", description="Link to the song on YouTube")

    @field_validator("youtube_link")
    @classmethod
    def validate_youtube_link(cls, v: str) -> str:
        if not YOUTUBE_LINK_PATTERN.match(v):
            raise ValueError("youtubeLink must be a YouTube URL")
        return v


class RecommendationRead(BaseModel):
    """Schema for reading a recommendation."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    youtube_link: str = Field(..., alias="youtubeLink")
    score: int = 0


class ScoreFilter(BaseModel):
    """Score band used by ``find_all``.

    ``lte`` selects recommendations with ``score <= self.score`` and
    ``gt`` those with ``score > self.score``.
    """

    model_config = ConfigDict(populate_by_name=True)

    score: int
    score_filter: Literal["lte", "gt"] = Field(..., alias="scoreFilter")
