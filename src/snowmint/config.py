"""Configuration management using pydantic-settings."""

import logging

from pydantic import Field, BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeneratorSettings(BaseModel):
    """Producer location for this process.

    Every concurrently running generator must get a distinct pair.
    Range checks happen when the generator is built.
    """
    worker_id: int = 0
    datacenter_id: int = 0


class LoggingSettings(BaseModel):
    """Logging settings for the command line tool."""
    level: str = "WARNING"
    file: str | None = None

    @field_validator("level")
    @classmethod
    def check_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SNOWMINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings() -> Settings:
    """Load settings from environment and .env file."""
    return Settings()
