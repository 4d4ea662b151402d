"""Configuration management for the SmartDoc OCR system.

Loads and validates YAML configuration with sensible defaults
for preprocessing, OCR, and classification settings.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_CHAR_WHITELIST = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz:/-.,"
)


class PreprocessingConfig(BaseModel):
    """Configuration for the image preprocessing pipeline."""

    contrast_factor: float = Field(default=1.2, gt=0)
    threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    artifact_dir: str | None = None


class OCRConfig(BaseModel):
    """Configuration for the Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    tessdata_dir: str | None = None
    lang: str = "eng"
    psm: int = 3
    char_whitelist: str = DEFAULT_CHAR_WHITELIST
    pdf_dpi: int = 300
    max_concurrent_jobs: int = Field(default=2, ge=1)
    timeout_seconds: float | None = 120.0


class ClassificationConfig(BaseModel):
    """Configuration for keyword classification."""

    rules_path: str = "configs/classification_rules.yaml"
    categories_path: str = "configs/categories.yaml"


class AppConfig(BaseModel):
    """Top-level application configuration."""

    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    max_workers: int = Field(default=4, ge=1)
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
