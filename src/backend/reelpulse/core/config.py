from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SCORE_AGGREGATION_MODES = ("mean", "sum_normalized")
ANALYSIS_STORES = ("memory", "s3")


def _discover_env_files() -> tuple[str, ...]:
    """Determine which env files should be loaded."""
    files: list[str] = []

    custom_env = os.getenv("ENV_FILE")
    if custom_env and Path(custom_env).is_file():
        files.append(custom_env)

    project_root = Path(__file__).resolve().parents[4]
    dot_env = project_root / ".env"
    if dot_env.is_file():
        files.append(str(dot_env))

    return tuple(dict.fromkeys(files))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_discover_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    env: str = Field(default="development", alias="ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_version: str = Field(default="v1", alias="API_VERSION")
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"], alias="CORS_ORIGINS")

    llm_provider: str = Field(default="anthropic", alias="LLM_PROVIDER")
    anthropic_api_key: str = Field(default="", alias="ANTHROPIC_API_KEY")
    anthropic_model: str = Field(default="claude-sonnet-4-20250514", alias="ANTHROPIC_MODEL")
    anthropic_endpoint: str = Field(default="https://api.anthropic.com/v1/messages", alias="ANTHROPIC_ENDPOINT")
    openai_api_key: str = Field(default="", alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")
    openai_endpoint: str = Field(default="https://api.openai.com/v1/chat/completions", alias="OPENAI_ENDPOINT")

    aws_access_key_id: str = Field(default="", alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str = Field(default="", alias="AWS_SECRET_ACCESS_KEY")
    aws_region: str = Field(default="us-east-1", alias="AWS_REGION")
    comprehend_language_code: str = Field(default="en", alias="COMPREHEND_LANGUAGE_CODE")
    aws_s3_bucket: str = Field(default="", alias="AWS_S3_BUCKET")
    s3_analysis_prefix: str = Field(default="analyses/", alias="S3_ANALYSIS_PREFIX")
    analysis_store: str = Field(default="memory", alias="ANALYSIS_STORE")
    analysis_max_batches: int = Field(default=500, alias="ANALYSIS_MAX_BATCHES")

    scrapecreators_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("SCRAPECREATORS_API_KEY", "SCRAPE_CREATORS_API_KEY", "scrapecreators_api_key"),
    )
    scrapecreators_base_url: str = Field(default="https://api.scrapecreators.com", alias="SCRAPECREATORS_BASE_URL")
    transcript_dev_fallback: bool = Field(default=False, alias="TRANSCRIPT_DEV_FALLBACK")

    provider_timeout_seconds: float = Field(default=30.0, alias="PROVIDER_TIMEOUT_SECONDS")
    provider_max_attempts: int = Field(default=3, alias="PROVIDER_MAX_ATTEMPTS")
    batch_concurrency: int = Field(default=1, alias="BATCH_CONCURRENCY")
    batch_max_urls: int = Field(default=5, alias="BATCH_MAX_URLS")
    batch_score_aggregation: str = Field(default="mean", alias="BATCH_SCORE_AGGREGATION")
    spacy_model_name: str = Field(default="", alias="SPACY_MODEL_NAME")

    statsd_host: str | None = Field(default=None, alias="STATSD_HOST")
    statsd_port: int = Field(default=8125, alias="STATSD_PORT")
    statsd_prefix: str = Field(default="reelpulse", alias="STATSD_PREFIX")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            raw = value.strip()
            try:
                value = json.loads(raw) if raw.startswith("[") else raw.split(",")
            except json.JSONDecodeError:
                value = raw.strip("[]").split(",")
        if not isinstance(value, (list, tuple)):
            return []
        return [str(item).strip().strip("\"'") for item in value if str(item).strip()]

    @field_validator("llm_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip().lower()
        return "anthropic"

    @field_validator("analysis_store", mode="before")
    @classmethod
    def _normalize_store(cls, value: Any) -> str:
        normalized = str(value or "memory").strip().lower()
        if normalized not in ANALYSIS_STORES:
            raise ValueError(f"ANALYSIS_STORE must be one of {', '.join(ANALYSIS_STORES)}")
        return normalized

    @field_validator("batch_score_aggregation", mode="before")
    @classmethod
    def _normalize_aggregation(cls, value: Any) -> str:
        normalized = str(value or "mean").strip().lower().replace("-", "_")
        if normalized not in SCORE_AGGREGATION_MODES:
            raise ValueError(f"BATCH_SCORE_AGGREGATION must be one of {', '.join(SCORE_AGGREGATION_MODES)}")
        return normalized

    @field_validator("batch_concurrency", "batch_max_urls", "provider_max_attempts")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        return max(int(value), 1)

    @property
    def llm_api_key(self) -> str:
        if self.llm_provider == "openai":
            return self.openai_api_key
        return self.anthropic_api_key

    @property
    def aws_configured(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)

    def secret_values(self) -> list[str]:
        return [
            self.anthropic_api_key,
            self.openai_api_key,
            self.aws_secret_access_key,
            self.scrapecreators_api_key,
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]
