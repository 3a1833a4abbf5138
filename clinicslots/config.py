"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import LOCAL_TIMEZONE, CloseAnchor, DayStepping


class SchedulingConfig(BaseModel):
    """Settings for slot generation."""
    slot_minutes: int = 30
    day_length_hours: int = 24
    exclude_days: List[int] = Field(default_factory=lambda: [5, 6])  # Saturday, Sunday
    day_stepping: DayStepping = DayStepping.FIXED
    close_anchor: CloseAnchor = CloseAnchor.DAY

    @field_validator("slot_minutes", "day_length_hours")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure widths are positive."""
        if value <= 0:
            raise ValueError("slot_minutes and day_length_hours must be greater than zero")
        return value

    @field_validator("exclude_days")
    @classmethod
    def validate_exclude_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"exclude_days must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @model_validator(mode="after")
    def validate_slot_fits_day(self) -> "SchedulingConfig":
        """A slot must be shorter than a day."""
        if self.slot_minutes >= self.day_length_hours * 60:
            raise ValueError("slot_minutes must be shorter than the day length")
        return self

    def slot_width(self) -> pendulum.Duration:
        return pendulum.duration(minutes=self.slot_minutes)

    def day_length(self) -> pendulum.Duration:
        return pendulum.duration(hours=self.day_length_hours)


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = LOCAL_TIMEZONE
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    data_file: Optional[Path] = None
    api_base_url: Optional[str] = None
    api_timeout_seconds: float = 10.0

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Accept ``local`` or any IANA timezone name."""
        if value == LOCAL_TIMEZONE:
            return value
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: '{value}'") from exc
        return value

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, value: Optional[str]) -> Optional[str]:
        """Strip the trailing slash so paths can be appended."""
        if value is None:
            return value
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"api_base_url must be an http(s) URL, got '{value}'")
        return value.rstrip("/")

    @field_validator("api_timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("api_timeout_seconds must be greater than zero")
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative data files are resolved against the config file's directory
        if config.data_file is not None and not config.data_file.is_absolute():
            config = config.model_copy(
                update={"data_file": config_path.parent / config.data_file}
            )

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
