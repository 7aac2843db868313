from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TREND_RANGES = {"week": 7, "month": 30, "quarter": 180}
SCORE_MIN = 0
SCORE_MAX = 100


def _clamp(value: int, lower: int, upper: int) -> int:
    return min(max(value, lower), upper)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/mindmate.db",
        alias="DATABASE_URL",
    )
    log_file: Path = Field(default=Path("logs/mindmate.log"))

    # Mood classification
    mood_update_threshold: float = Field(default=0.15, alias="MOOD_UPDATE_THRESHOLD")

    # Wellness score update rules
    wellness_floor: int = Field(default=0, alias="WELLNESS_FLOOR")
    wellness_ceiling: int = Field(default=100, alias="WELLNESS_CEILING")
    wellness_positive_min: int = Field(default=3, alias="WELLNESS_POSITIVE_MIN")
    wellness_positive_max: int = Field(default=14, alias="WELLNESS_POSITIVE_MAX")
    wellness_negative_min: int = Field(default=3, alias="WELLNESS_NEGATIVE_MIN")
    wellness_negative_max: int = Field(default=14, alias="WELLNESS_NEGATIVE_MAX")
    wellness_neutral_jitter: int = Field(default=2, alias="WELLNESS_NEUTRAL_JITTER")
    wellness_initial_score: int = Field(default=75, alias="WELLNESS_INITIAL_SCORE")

    # Trend aggregation and daily reset
    placeholder_wellness_score: int = Field(default=60, alias="PLACEHOLDER_WELLNESS_SCORE")
    reset_wellness_score: int = Field(default=75, alias="RESET_WELLNESS_SCORE")
    trends_default_range: str = Field(default="week", alias="TRENDS_DEFAULT_RANGE")

    # Inbound message rate limit per user
    message_rate_limit: int = Field(default=30, alias="MESSAGE_RATE_LIMIT", ge=1)
    message_rate_window_seconds: float = Field(
        default=60.0, alias="MESSAGE_RATE_WINDOW_SECONDS", gt=0
    )

    version: str = Field(default_factory=lambda: Settings._load_version())

    @staticmethod
    def _load_version() -> str:
        version_env = os.getenv("VERSION")
        if version_env:
            return version_env
        version_file = Path("VERSION")
        if version_file.exists():
            return version_file.read_text(encoding="utf-8").strip()
        return "0.0.0"

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Path | str) -> Path:
        path = Path(value)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("mood_update_threshold", mode="before")
    @classmethod
    def _validate_threshold(cls, value: float | str | None) -> float:
        if value is None:
            return 0.15
        threshold = float(value)
        return min(max(threshold, 0.0), 1.0)

    @field_validator("trends_default_range", mode="before")
    @classmethod
    def _validate_trends_range(cls, value: str | None) -> str:
        if not value:
            return "week"
        normalized = str(value).lower()
        if normalized not in TREND_RANGES:
            return "week"
        return normalized

    @field_validator("database_url", mode="before")
    @classmethod
    def _validate_database_url(cls, value: str | None) -> str:
        if not value:
            value = "sqlite:///./data/mindmate.db"

        normalized = str(value)
        if normalized.startswith("postgres://"):
            normalized = normalized.replace("postgres://", "postgresql://", 1)
        if normalized.startswith("postgresql://") and "+asyncpg" not in normalized:
            normalized = normalized.replace("postgresql://", "postgresql+asyncpg://", 1)
        if normalized.startswith("sqlite://") and "+aiosqlite" not in normalized:
            normalized = normalized.replace("sqlite://", "sqlite+aiosqlite://", 1)

        if normalized.startswith("sqlite+aiosqlite:///"):
            db_path = normalized.split("///", maxsplit=1)[-1]
            if db_path and db_path != ":memory:":
                db_file = Path(db_path)
                db_file.parent.mkdir(parents=True, exist_ok=True)

        return normalized

    @model_validator(mode="after")
    def _validate_wellness_bounds(self) -> Settings:
        self.wellness_floor = _clamp(self.wellness_floor, SCORE_MIN, SCORE_MAX)
        self.wellness_ceiling = _clamp(self.wellness_ceiling, SCORE_MIN, SCORE_MAX)
        if self.wellness_ceiling < self.wellness_floor:
            self.wellness_ceiling = self.wellness_floor
        # every score the app hands out must sit inside the configured band
        for name in (
            "wellness_initial_score",
            "placeholder_wellness_score",
            "reset_wellness_score",
        ):
            setattr(
                self,
                name,
                _clamp(getattr(self, name), self.wellness_floor, self.wellness_ceiling),
            )
        self.wellness_positive_min = max(self.wellness_positive_min, 0)
        self.wellness_negative_min = max(self.wellness_negative_min, 0)
        if self.wellness_positive_max < self.wellness_positive_min:
            self.wellness_positive_max = self.wellness_positive_min
        if self.wellness_negative_max < self.wellness_negative_min:
            self.wellness_negative_max = self.wellness_negative_min
        self.wellness_neutral_jitter = abs(self.wellness_neutral_jitter)
        return self


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()
