"""Pydantic request/response models for the HTTP API.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.models.board import Difficulty


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class GameHistoryIn(_Schema):
    image_name: str = Field(min_length=1, max_length=200)
    moves: int = Field(ge=0)
    time_elapsed: int = Field(ge=0, description="Seconds")
    difficulty: Difficulty = Difficulty.EASY


class GameHistoryOut(_Schema):
    id: str
    image_name: str
    moves: int
    time_elapsed: int
    difficulty: str
    completed_at: datetime


class CustomImageOut(_Schema):
    id: str
    file_name: str
    original_name: str
    processed_path: str
    uploaded_at: datetime


class PresetImageOut(_Schema):
    id: str
    name: str
    url: str
    thumbnail: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
