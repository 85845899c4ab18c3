from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Provider settings
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    voyage_ai_api_key: str | None = None
    embedding_provider: Literal["openai", "voyage"] = "openai"
    embedding_model: str | None = None  # Each embedder has its own default model
    classifier_model: str = "claude-3-5-sonnet-20241022"

    # Database settings
    local_db_path: str = "data/cortex.json"
    match_threshold: float = 0.3

    # Connection engine settings
    auto_connect_top_k: int = 5
    candidate_preview_chars: int = 300

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
