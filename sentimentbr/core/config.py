# sentimentbr/core/config.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # provider selection: "gemini" (default) or "openai"
    AI_PROVIDER: str = "gemini"

    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-1.5-pro"
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta"

    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_API_URL: str = "https://api.openai.com/v1/chat/completions"

    # 0 = no timeout on the outbound call
    LLM_TIMEOUT_SECONDS: float = 30

    DATA_DIR: Path = Path("data")
    DATA_FILE: str = "sentiment_data.json"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @property
    def data_path(self) -> Path:
        return self.DATA_DIR / self.DATA_FILE

    @property
    def provider(self) -> str:
        name = (self.AI_PROVIDER or "").strip().lower()
        return "openai" if name == "openai" else "gemini"


@lru_cache
def get_settings() -> Settings:
    return Settings()
