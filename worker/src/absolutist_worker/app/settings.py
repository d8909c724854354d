from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_artifact_root() -> Path:
    return Path.home() / "Pictures" / "Absolutist"


class Settings(BaseSettings):
    """Runtime configuration for the Absolutist worker process."""

    model_config = SettingsConfigDict(
        env_prefix="ABSOLUTIST_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    artifact_root: Path = Field(default_factory=_default_artifact_root)
    palette_min_distance: float = Field(
        default=30.0,
        ge=0.0,
        le=180.0,
        description="Minimum hue separation (degrees) between extracted palette hues.",
    )
    volatility_threshold: float = Field(
        default=18.0,
        ge=0.0,
        le=100.0,
        description="Mean absolute score deviation above which a session reads as volatile.",
    )
    trajectory_gap: float = Field(
        default=40.0,
        ge=0.0,
        le=1000.0,
        description="Half-session score sum difference needed to call a rise or fall.",
    )
    completion_threshold: int = Field(
        default=20,
        ge=1,
        le=20,
        description="Positive scores required before a session renders its poster.",
    )
    win_threshold: int = Field(
        default=80,
        ge=0,
        le=100,
        description="Level score counted as a successful match.",
    )
    fill_saturation: float = Field(default=82.0, ge=0.0, le=100.0)
    fill_lightness: float = Field(default=46.0, gt=0.0, lt=100.0)
    signature: str = Field(
        default="the absolutist.",
        max_length=32,
        description="Signature text set in the lower-left corner of every poster.",
    )

    def ensure_directories(self) -> None:
        self.artifact_root.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = Settings()
    settings.ensure_directories()
    return settings
