"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Gameplay rules are not settings; see bugdefense.game.constants.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DisplaySettings(BaseSettings):
    """Display-related settings."""

    model_config = SettingsConfigDict(env_prefix="BUGDEFENSE_DISPLAY_")

    # Simulator window
    window_width: int = 1280
    window_height: int = 720
    fullscreen: bool = False

    # Play field buffer
    field_width: int = 960
    field_height: int = 480

    # Rendering
    fps: int = Field(default=60, ge=1, le=240)


class LeaderboardSettings(BaseSettings):
    """Global leaderboard service settings."""

    model_config = SettingsConfigDict(env_prefix="BUGDEFENSE_LEADERBOARD_")

    enabled: bool = True
    url: str = "https://roadshowgame-default-rtdb.firebaseio.com"
    timeout: float = Field(default=10.0, gt=0)
    top_limit: int = Field(default=20, ge=1)


class StorageSettings(BaseSettings):
    """Local score history settings."""

    model_config = SettingsConfigDict(env_prefix="BUGDEFENSE_STORAGE_")

    local_scores_path: Path = Field(
        default_factory=lambda: Path.home() / ".bugdefense" / "scores_v1.json"
    )
    local_limit: int = Field(default=50, ge=1)


class AudioSettings(BaseSettings):
    """Audio feedback settings."""

    model_config = SettingsConfigDict(env_prefix="BUGDEFENSE_AUDIO_")

    enabled: bool = True
    volume: float = Field(default=0.8, ge=0.0, le=1.0)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="BUGDEFENSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    env: Literal["simulator", "headless"] = "simulator"
    debug: bool = False

    # Nested settings
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    leaderboard: LeaderboardSettings = Field(default_factory=LeaderboardSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)

    @property
    def is_simulator(self) -> bool:
        """Check if running with a window."""
        return self.env == "simulator"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
