"""
Answer generation configuration.

Dependencies: pydantic, pydantic_settings
System role: Chat model and retrieval defaults for query answering
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from lectern.configs.base import BaseSettings


class GenerationSettings(BaseSettings):
    """Chat model configuration for the answer composer."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GENERATION_",
        case_sensitive=False,
        extra="ignore",
    )

    model_id: str = Field(default="gemini-2.0-flash-lite", description="Google chat model ID")
    temperature: float = Field(default=1.0, description="Sampling temperature")
    top_p: float = Field(default=0.95, description="Nucleus sampling probability mass")
    max_output_tokens: int = Field(default=8192, description="Maximum tokens in an answer")
    default_top_k: int = Field(default=5, gt=0, description="Chunks retrieved per query")
