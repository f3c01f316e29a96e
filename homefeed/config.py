"""Configuration management for homefeed."""

from typing import Any, Dict
from pathlib import Path
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml
import logging

logger = logging.getLogger(__name__)


class SectionConfig(BaseModel):
    """Per-section size limits."""

    limit: int = 20
    artist_section_count: int = 4
    artist_section_song_limit: int = 10
    english_hits_oversample: int = 2  # English hits fetch limit * this before filtering
    personalized_min: int = 8


class TimeoutConfig(BaseModel):
    """Timeouts applied to section fetches."""

    section_timeout_seconds: float = 8.0


class ListenAgainConfig(BaseModel):
    """Listen Again ranking options."""

    max_per_artist: int = 2
    familiar_pool: int = 50  # Listen Again songs offered to Quick Picks as familiar candidates


class QuickPicksConfig(BaseModel):
    """Quick Picks mixing options."""

    familiar_ratio: float = Field(default=0.60, ge=0.0, le=1.0)
    window_size: int = Field(default=5, ge=1)
    max_per_artist: int = 3
    max_per_genre: int = 8
    session_ttl_hours: float = Field(default=6.0, gt=0)
    min_target: int = 5
    deep_cut_artists: int = 3
    seed_songs: int = 2


class ForgottenConfig(BaseModel):
    """Forgotten favorites thresholds."""

    min_plays: int = 5
    dormant_days: int = 30


class LoggingConfig(BaseModel):
    """Logging options."""

    level: str = "WARNING"


class FeedConfig(BaseSettings):
    """Main homefeed configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HOMEFEED_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
    )

    sections: SectionConfig = Field(default_factory=SectionConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    listen_again: ListenAgainConfig = Field(default_factory=ListenAgainConfig)
    quick_picks: QuickPicksConfig = Field(default_factory=QuickPicksConfig)
    forgotten: ForgottenConfig = Field(default_factory=ForgottenConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: str | Path = "homefeed.yaml") -> "FeedConfig":
        """Load configuration from YAML file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f) or {}
        logger.debug(f"Loaded configuration from {config_path}")

        return cls(
            sections=SectionConfig(**config_dict.get("sections", {})),
            timeouts=TimeoutConfig(**config_dict.get("timeouts", {})),
            listen_again=ListenAgainConfig(**config_dict.get("listen_again", {})),
            quick_picks=QuickPicksConfig(**config_dict.get("quick_picks", {})),
            forgotten=ForgottenConfig(**config_dict.get("forgotten", {})),
            logging=LoggingConfig(**config_dict.get("logging", {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {name: getattr(self, name).model_dump() for name in type(self).model_fields}

    def to_yaml(self) -> str:
        """Convert configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False)


def get_config_value(config: FeedConfig, path: str, default: Any = None) -> Any:
    """Get a nested config value using dot notation."""
    keys = path.split(".")
    current = config.model_dump()

    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default

    return current
