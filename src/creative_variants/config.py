from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Loads keys from process env, and also from a local .env file for convenience.
    model_config = SettingsConfigDict(env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8")

    # Keys
    openai_api_key: str | None = None
    gemini_api_key: str | None = None

    # Which backend serves /api/generate-image and session generation.
    image_provider: Literal["openai", "gemini"] = "openai"

    # Models
    openai_image_model: str = "gpt-image-1"
    openai_image_size: str = "1024x1024"
    gemini_image_model: str = "imagen-3.0-generate-002"

    # Access gate; both must be set for the gate to engage.
    basic_auth_user: str | None = None
    basic_auth_pass: str | None = None

    min_prompt_length: int = 8
    log_level: str = "INFO"


settings = Settings()
