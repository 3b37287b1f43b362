"""Pydantic settings models for the text extraction service.

Two settings classes load from separate YAML config files with environment
variable override support. Source priority (highest to lowest):

    1. Environment variables (with prefix, e.g., EXTRACTION_TIMEOUT_SECONDS)
    2. .env file
    3. YAML config file (e.g., config/extraction.yaml)
    4. Default values defined here

Config paths are resolved relative to PROJECT_ROOT so the service works
regardless of the current working directory.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# Resolve project root: settings.py -> config/ -> resume_extractor/ -> src/ -> repo root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

_CONFIG_DIR = PROJECT_ROOT / "config"
_ENV_FILE = PROJECT_ROOT / ".env"


class ExtractionSettings(BaseSettings):
    """Extraction behaviour: fallback chain, time budget, size and text limits."""

    enable_fallback: bool = True
    # Budget per decoder attempt; the fallback gets a fresh one.
    timeout_seconds: float = Field(default=20.0, gt=0)
    # Cleaned fallback text shorter than this is treated as a scanned PDF.
    scanned_text_threshold: int = Field(default=30, ge=0)
    max_file_size_bytes: int = Field(default=10_485_760, gt=0)  # 10MB

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "extraction.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="EXTRACTION_",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


class LoggingSettings(BaseSettings):
    """Log file location, rotation and console verbosity."""

    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10MB
    log_backup_count: int = 5
    console_level: str = "INFO"

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "logging.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="LOG_",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )
