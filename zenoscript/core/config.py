"""
Application configuration.

Centralized configuration management with environment variables.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Zenoscript"
    APP_VERSION: str = __version__

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: Literal["json", "text"] = "text"
    LOG_FILE: Optional[str] = None

    # Files
    SOURCE_SUFFIX: str = ".zs"
    OUTPUT_SUFFIX: str = ".ts"
    ENCODING: str = "utf-8"

    model_config = SettingsConfigDict(
        env_prefix="ZENOSCRIPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class TranspileOptions(BaseModel):
    """Per-call switches. Neither flag changes the generated text."""

    model_config = ConfigDict(frozen=True)

    verbose: bool = False
    debug: bool = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
