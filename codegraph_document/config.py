"""
Document Binding Configuration

Centralized configuration management using pydantic-settings.
All environment variables use the CODEGRAPH_DOCUMENT_ prefix.

Usage:
    from codegraph_document.config import get_settings

    width = get_settings().unit_width
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentSettings(BaseSettings):
    """
    Settings for the document binding.

    Example: CODEGRAPH_DOCUMENT_UNIT_WIDTH=1 switches hosts to UTF-8 byte offsets.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CODEGRAPH_DOCUMENT_",
        extra="ignore",
    )

    unit_width: int = Field(
        default=2,
        ge=1,
        le=2,
        description="Bytes per external text unit (2 = UTF-16 code units, 1 = UTF-8 bytes)",
    )
    source_chunk_size: int = Field(default=1024, ge=1, description="External units served per SourceText read")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "json"] = Field(default="console", description="Log output format")


@lru_cache(maxsize=1)
def get_settings() -> DocumentSettings:
    """Get the process-wide settings instance"""
    return DocumentSettings()


settings = get_settings()
