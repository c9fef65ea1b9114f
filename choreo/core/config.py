"""Application configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Service configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHOREO_",
        extra="ignore",
    )

    environment: Literal["local", "test", "staging", "production"] = Field(
        default="local",
        validation_alias="env",
    )
    service_name: str = Field(default="choreography-insights")
    database_url: str = Field(default="sqlite:///./data/choreo.db")
    sql_echo: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)
    token_store_backend: Literal["memory", "sql", "dynamodb"] = Field(default="sql")
    token_table_name: str = Field(default="choreography-task-tokens")
    default_entity_id_path: str = Field(default="$$.Execution.Input.detail.id")
    load_sample_catalog: bool = Field(default=True)
    aws_region: str | None = Field(default=None)
    event_bus_name: str | None = Field(default=None)
    event_source: str = Field(default="choreography-insights")
    sqs_queue_url: str | None = Field(default=None)
    sqs_wait_time_seconds: int = Field(default=20)
    sqs_max_messages: int = Field(default=5)
    sqs_visibility_timeout: int | None = Field(default=None)
    temporal_host: str | None = Field(default=None)
    temporal_namespace: str | None = Field(default=None)
    temporal_api_key: str | None = Field(default=None)
    temporal_task_queue: str = Field(default="choreography")
    temporal_tls_enabled: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator(
        "aws_region",
        "event_bus_name",
        "sqs_queue_url",
        "temporal_host",
        "temporal_namespace",
        "temporal_api_key",
        mode="before",
    )
    @classmethod
    def empty_string_to_none(cls, value: str | None) -> str | None:
        if value == "":
            return None
        return value

    @field_validator("sqs_visibility_timeout", mode="before")
    @classmethod
    def empty_visibility_to_none(cls, value: int | str | None) -> int | str | None:
        if value in (None, ""):
            return None
        return value


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings instance."""

    return AppSettings()
