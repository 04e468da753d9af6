"""
Application-wide settings.

Each settings group subclasses this to share the .env source and the
case-insensitive, ignore-unknown environment parsing.

Dependencies: pydantic_settings
System role: Root of the configuration tree
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Process-level options: environment name, log level, CORS."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="development", description="development, staging or production")
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root log level passed to configure_logging()")
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser",
    )
