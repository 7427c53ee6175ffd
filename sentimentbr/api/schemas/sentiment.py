# sentimentbr/api/schemas/sentiment.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sentimentbr.storage.models import SentimentLabel

MIN_TEXT_LENGTH = 10
MIN_SPRING_TEXT_LENGTH = 3


class AnalyzeRequest(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def _min_length(cls, v: str) -> str:
        if len(v) < MIN_TEXT_LENGTH:
            raise ValueError(f"O texto deve ter pelo menos {MIN_TEXT_LENGTH} caracteres.")
        return v


class SpringSentimentRequest(BaseModel):
    # checked by hand: errors on this route carry status="error"
    text: Any = None


class SpringSentimentResponse(BaseModel):
    """Shape expected by external (Spring Boot) clients."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    text: str
    sentiment: SentimentLabel
    confidence_score: int = Field(alias="confidenceScore")
    timestamp: datetime
    source: str = "local_api"
    status: Literal["success"] = "success"
