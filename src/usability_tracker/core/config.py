"""Configuration management with Pydantic and YAML support."""

from __future__ import annotations

import logging
import os
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class TrackingConfig(BaseModel):
    """Navigation tracking configuration."""

    history_size: int = Field(default=6, ge=2, description="Events kept in the history window")
    low_retention_threshold_seconds: float = Field(
        default=6.0, gt=0, description="Dwell time below this counts as low retention"
    )
    sync_writes: bool = Field(default=True, description="fsync the audit log after every line")


class SurveyConfig(BaseModel):
    """Micro-survey configuration."""

    enabled: bool = True
    rating_min: float = 1.0
    rating_max: float = 5.0
    rating_default: float = 3.0
    followup_threshold: float = Field(
        default=3.5, description="Ratings at or above this ask for free text"
    )
    rating_title: str = "Questionnaire"
    rating_message: str = "Just now a required function is hard to find:"
    freetext_title: str = "I'm looking for:"
    freetext_message: str = ""

    @model_validator(mode="after")
    def _check_range(self) -> SurveyConfig:
        if self.rating_min >= self.rating_max:
            raise ValueError("rating_min must be lower than rating_max")
        if not self.rating_min <= self.rating_default <= self.rating_max:
            raise ValueError("rating_default must lie within the rating range")
        return self


class Config(BaseSettings):
    """Main tracker configuration."""

    model_config = SettingsConfigDict(
        env_prefix="USABILITY_TRACKER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/usability-tracker")
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".local/state/usability-tracker")
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config/usability-tracker")

    # Log level
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Stable per-device identifier, generated on first use when unset
    device_id: str | None = Field(default=None)

    # Sub-configurations
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    survey: SurveyConfig = Field(default_factory=SurveyConfig)

    @property
    def config_file(self) -> Path:
        """Path to YAML config file."""
        return self.config_dir / "config.yaml"

    @property
    def device_id_file(self) -> Path:
        """Path to the persisted device identifier."""
        return self.data_dir / "device_id"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Tracker logs are private to the user
        os.chmod(self.data_dir, 0o700)

    def get_device_id(self) -> str:
        """Return the device identifier, creating and persisting one if needed."""
        if self.device_id:
            return self.device_id

        path = self.device_id_file
        try:
            if path.exists():
                stored = path.read_text(encoding="utf-8").strip()
                if stored:
                    self.device_id = stored
                    return stored

            path.parent.mkdir(parents=True, exist_ok=True)
            generated = uuid.uuid4().hex
            path.write_text(generated, encoding="utf-8")
            self.device_id = generated
        except OSError as e:
            # Fall back to a per-process id so the tracker can still name its log
            logger.warning(f"Could not persist device id at {path}: {e}")
            self.device_id = uuid.uuid4().hex

        return self.device_id

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from YAML file, environment variables, and defaults.

        Priority (highest to lowest):
        1. YAML config file
        2. Environment variables
        3. Default values
        """
        config_path = config_path or Path.home() / ".config/usability-tracker/config.yaml"

        yaml_config: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}

        return cls(**yaml_config)

    def save(self, config_path: Path | None = None) -> None:
        """Save current configuration to YAML file."""
        config_path = config_path or self.config_file
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(exclude_none=True)

        # Convert Path objects to strings for YAML
        for key in ["data_dir", "log_dir", "config_dir"]:
            if key in data:
                data[key] = str(data[key])

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        os.chmod(config_path, 0o600)


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.load()
