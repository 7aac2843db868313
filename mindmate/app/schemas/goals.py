from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class GoalModel(BaseModel):
    id: str
    text: str
    completed: bool
    points_value: int = Field(ge=0)
    category: Literal["base", "ai", "general", "custom", "addiction"]
    created_at: datetime | None = None

    model_config = {
        "from_attributes": True,
    }


class GoalListResponse(BaseModel):
    items: list[GoalModel]
    total_points: int
    completed: int


class CustomGoalCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=255)
    points_value: int = Field(default=5, ge=1, le=50)

    @field_validator("text")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("goal text must not be blank")
        return stripped


class AddictionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    quit_date: date


class AddictionModel(BaseModel):
    id: int
    name: str
    quit_date: date
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }


class AddictionListResponse(BaseModel):
    items: list[AddictionModel]


__all__ = [
    "AddictionCreate",
    "AddictionListResponse",
    "AddictionModel",
    "CustomGoalCreate",
    "GoalListResponse",
    "GoalModel",
]
