# File: freshlink/core/config.py

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, field_validator


def _env_first(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def _split_csv(value: str) -> List[str]:
    return [i.strip() for i in value.split(",") if i.strip()]


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


class Settings(BaseModel):
    # Basic app info
    PROJECT_NAME: str = "FreshLink Marketplace API"
    VERSION: str = "0.1.0"

    api_v1_prefix: str = "/api/v1"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    backend_cors_origins: List[str] = _split_csv(
        os.getenv("BACKEND_CORS_ORIGINS", "http://localhost:4321,http://127.0.0.1:4321")
    )

    # Flat-file storage
    data_dir: Path = Path(os.getenv("FRESHLINK_DATA_DIR", "data"))

    # LLM (OpenAI-compatible endpoint, Gemini by default)
    ai_api_key: Optional[str] = _env_first("GEMINI_API_KEY", "AI_API_KEY")
    ai_base_url: str = os.getenv(
        "GEMINI_BASE_URL",
        "https://generativelanguage.googleapis.com/v1beta/openai/",
    )
    ai_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    ai_temperature: float = _env_float("GEMINI_TEMPERATURE", 0.35)
    ai_top_p: float = _env_float("GEMINI_TOP_P", 0.8)
    ai_max_tokens: int = _env_int("GEMINI_MAX_TOKENS", 1152)
    ai_timeout_seconds: float = _env_float("AI_TIMEOUT_SECONDS", 30.0)

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return _split_csv(v)
        if isinstance(v, list):
            return v
        return []

    @property
    def ai_enabled(self) -> bool:
        return bool(self.ai_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
