"""Configuration management for the fleet operations backend.

Loads and validates YAML configuration with sensible defaults for OCR,
AI providers, the hosted database, field mapping and dashboards. Secrets
default from environment variables and may be overridden in YAML.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def _env(name: str) -> str | None:
    return os.getenv(name) or None


class OCRConfig(BaseModel):
    """Configuration for local Tesseract OCR and scan cleanup."""

    tesseract_cmd: str | None = None
    default_lang: str = "eng"
    psm: int = 3
    pdf_dpi: int = 300
    preprocess_enabled: bool = True
    clahe_clip_limit: float = 2.0
    clahe_tile_size: int = 8


class AIConfig(BaseModel):
    """Configuration for third-party AI providers."""

    openai_api_key: str | None = Field(default_factory=lambda: _env("OPENAI_API_KEY"))
    grok_api_key: str | None = Field(default_factory=lambda: _env("GROK_API_KEY"))
    deepseek_api_key: str | None = Field(
        default_factory=lambda: _env("DEEPSEEK_API_KEY")
    )
    google_vision_api_key: str | None = Field(
        default_factory=lambda: _env("GOOGLE_VISION_API_KEY")
    )
    openai_base_url: str = "https://api.openai.com/v1"
    grok_base_url: str = "https://api.x.ai/v1"
    deepseek_base_url: str = "https://api.deepseek.com/v1"
    vision_base_url: str = "https://vision.googleapis.com/v1"
    openai_model: str = "gpt-4o-mini"
    grok_model: str = "grok-beta"
    deepseek_model: str = "deepseek-chat"
    transcription_model: str = "whisper-1"
    speech_model: str = "tts-1"
    timeout_s: float = 30.0


class DatabaseConfig(BaseModel):
    """Connection settings for the hosted Postgres backend."""

    url: str | None = Field(default_factory=lambda: _env("SUPABASE_URL"))
    service_key: str | None = Field(
        default_factory=lambda: _env("SUPABASE_SERVICE_ROLE_KEY")
    )
    anon_key: str | None = Field(default_factory=lambda: _env("SUPABASE_ANON_KEY"))


class MappingConfig(BaseModel):
    """Configuration for Document AI field mapping and validation."""

    field_mappings_path: str = "configs/field_mappings.yaml"
    rules_path: str = "configs/validation_rules.yaml"
    high_confidence: float = 0.9
    low_confidence: float = 0.7


class DashboardConfig(BaseModel):
    """Thresholds used by the dashboard calculators."""

    warranty_expiring_days: int = 30
    compliance_due_soon_days: int = 30
    maintenance_upcoming_days: int = 14


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Top-level application configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    ai: AIConfig = Field(default_factory=AIConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    mapping: MappingConfig = Field(default_factory=MappingConfig)
    dashboards: DashboardConfig = Field(default_factory=DashboardConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
