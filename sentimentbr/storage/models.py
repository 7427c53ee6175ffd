# sentimentbr/storage/models.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Period(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class SentimentRecord(BaseModel):
    """One stored analysis. Never mutated after the store creates it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    text: str
    sentiment: SentimentLabel
    confidence: int = Field(ge=0, le=100)
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def _assume_local_tz(cls, v: datetime) -> datetime:
        # older files may carry naive timestamps
        return v if v.tzinfo else v.astimezone()


class SentimentStats(BaseModel):
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    total: int = 0


@dataclass(frozen=True)
class SentimentFilter:
    positive: bool = True
    negative: bool = True
    neutral: bool = True
    period: Period = Period.ALL

    def includes(self, label: SentimentLabel) -> bool:
        return {
            SentimentLabel.POSITIVE: self.positive,
            SentimentLabel.NEGATIVE: self.negative,
            SentimentLabel.NEUTRAL: self.neutral,
        }[label]
