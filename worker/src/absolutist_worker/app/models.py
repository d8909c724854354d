from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class HarmonyType(str, Enum):
    COMPLEMENTARY = "complementary"
    ANALOGOUS = "analogous"
    SPLIT_COMPLEMENTARY = "split-complementary"
    TRIADIC = "triadic"
    TETRADIC = "tetradic"
    SQUARE = "square"
    MONOCHROMATIC = "monochromatic"


class Trajectory(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"
    VOLATILE = "volatile"


class HSL(BaseModel):
    model_config = ConfigDict(frozen=True)

    h: float = Field(..., ge=0.0, le=360.0)
    s: float = Field(..., ge=0.0, le=100.0)
    l: float = Field(..., ge=0.0, le=100.0)  # noqa: E741


class HarmonyNode(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=0)
    is_locked: bool = Field(default=False, alias="isLocked")
    target_color: HSL = Field(..., alias="targetColor")
    user_color: HSL = Field(..., alias="userColor")

    @model_validator(mode="after")
    def _anchor_matches_target(self) -> "HarmonyNode":
        if self.is_locked and self.user_color != self.target_color:
            self.user_color = self.target_color
        return self


class LevelData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    level_number: int = Field(..., ge=1, le=20, alias="levelNumber")
    root_color: HSL = Field(..., alias="rootColor")
    harmony_type: str = Field(..., min_length=1, max_length=32, alias="harmonyType")
    nodes: list[HarmonyNode] = Field(default_factory=list)


class SessionData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=1)
    name: str = Field(default="", max_length=64)
    mood: str = Field(default="NEUTRAL", max_length=32)
    levels: list[LevelData] = Field(default_factory=list)
    progress: list[Optional[float]] = Field(default_factory=lambda: [None] * 20)
    is_complete: bool = Field(default=False, alias="isComplete")

    @field_validator("progress")
    @classmethod
    def _scores_in_range(cls, value: list[Optional[float]]) -> list[Optional[float]]:
        for score in value:
            if score is not None and not 0.0 <= score <= 100.0:
                raise ValueError(f"score {score} outside 0-100")
        return value


class SessionIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary_hue: float
    secondary_hue: float
    accent_hue: float
    dominant_harmony: HarmonyType
    resonance: int = Field(..., ge=0, le=100)
    trajectory: Trajectory
    seed: int
    archetype_index: int = Field(..., ge=0, le=9)
    sequence_id: int

    @property
    def palette(self) -> tuple[float, float, float]:
        return (self.primary_hue, self.secondary_hue, self.accent_hue)


class LevelAnalysis(BaseModel):
    score: int = Field(..., ge=0, le=100)
    hue_delta: int = Field(default=0, ge=0)
    saturation_delta: int = Field(default=0, ge=0)
    lightness_delta: int = Field(default=0, ge=0)
    is_win: bool = False


class LevelScoreRequest(BaseModel):
    level_index: int = Field(..., ge=0, le=19)
    user_colors: dict[int, HSL] = Field(default_factory=dict)


class SessionSummary(BaseModel):
    session_id: int
    name: str
    mood: str
    is_complete: bool
    scored_levels: int = 0
    resonance: int = 0
    renderable: bool = False
    archetype_index: Optional[int] = None
    archetype_name: Optional[str] = None
    trajectory: Optional[Trajectory] = None


class ArchiveState(BaseModel):
    archive: list[SessionData] = Field(default_factory=list)
    current_session: Optional[SessionData] = None
    level_index: int = Field(default=0, ge=0, le=19)
    onboarding_complete: bool = False
    analogous_hint_seen: bool = False
