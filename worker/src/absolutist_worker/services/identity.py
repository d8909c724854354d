"""Reduce a played session to the compact identity a poster is drawn from."""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from ..app.models import HSL, HarmonyType, LevelData, SessionIdentity, Trajectory
from .deck import archetype_for_session
from .harmony import cycle_harmony, parse_harmony_type

LEVEL_COUNT = 20
HALF_SESSION = LEVEL_COUNT // 2
PALETTE_SIZE = 3
PALETTE_MIN_DISTANCE = 30.0
VOLATILITY_THRESHOLD = 18.0
TRAJECTORY_GAP = 40.0
SEED_MULTIPLIER = 1337
FALLBACK_HUE_STEP = 137.5
FALLBACK_HUE_STRIDE = 47
PALETTE_PAD_STEP = 120


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _level_fields(level: Any) -> tuple[Optional[float], Optional[str]]:
    """Pull (root hue, harmony label) out of a level model or a loose mapping."""
    if level is None:
        return None, None
    if isinstance(level, LevelData):
        return level.root_color.h, level.harmony_type
    if not isinstance(level, Mapping):
        return None, None
    root = level.get("rootColor", level.get("root_color"))
    hue: Optional[float] = None
    if isinstance(root, HSL):
        hue = root.h
    elif isinstance(root, Mapping) and root.get("h") is not None:
        hue = float(root["h"])
    label = level.get("harmonyType", level.get("harmony_type"))
    return hue, label if isinstance(label, str) else None


def _score_at(progress: Sequence[Any], index: int) -> float:
    if index >= len(progress):
        return 0.0
    value = progress[index]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def fallback_hue(session_id: int, index: int) -> float:
    return ((session_id * FALLBACK_HUE_STEP) + index * FALLBACK_HUE_STRIDE) % 360


def count_positive_scores(progress: Optional[Sequence[Any]]) -> int:
    return sum(1 for index in range(len(progress or ())) if _score_at(progress, index) > 0)


def session_resonance(progress: Optional[Sequence[Any]]) -> int:
    """Rounded mean of the positive scores; 0 when nothing positive was recorded."""
    scores = np.asarray(
        [_score_at(progress or (), index) for index in range(len(progress or ()))],
        dtype=np.float64,
    )
    positive = scores[scores > 0]
    if positive.size == 0:
        return 0
    return _round_half_up(float(positive.sum()) / positive.size)


def classify_trajectory(
    scores: Sequence[float],
    resonance: float,
    *,
    volatility_threshold: float = VOLATILITY_THRESHOLD,
    trajectory_gap: float = TRAJECTORY_GAP,
) -> Trajectory:
    series = np.asarray(scores, dtype=np.float64)
    variance = float(np.abs(series - resonance).sum()) / LEVEL_COUNT
    first_half = float(series[:HALF_SESSION].sum())
    second_half = float(series[HALF_SESSION:LEVEL_COUNT].sum())
    if variance > volatility_threshold:
        return Trajectory.VOLATILE
    if second_half > first_half + trajectory_gap:
        return Trajectory.RISING
    if first_half > second_half + trajectory_gap:
        return Trajectory.FALLING
    return Trajectory.STABLE


def extract_palette(
    hues: Sequence[float],
    scores: Sequence[float],
    *,
    min_distance: float = PALETTE_MIN_DISTANCE,
) -> list[float]:
    """Greedy walk from best-scored level down, keeping mutually distant hues."""
    ranked = sorted(zip(hues, scores), key=lambda pair: -pair[1])
    palette: list[float] = []
    for hue, _score in ranked:
        if all(abs(existing - hue) > min_distance for existing in palette):
            palette.append(hue)
        if len(palette) >= PALETTE_SIZE:
            break
    if not palette:
        palette.append(0.0)
    while len(palette) < PALETTE_SIZE:
        palette.append((palette[0] + PALETTE_PAD_STEP * len(palette)) % 360)
    return palette


def dominant_harmony(harmonies: Sequence[HarmonyType]) -> HarmonyType:
    counts: dict[HarmonyType, int] = {}
    for harmony in harmonies:
        counts[harmony] = counts.get(harmony, 0) + 1
    best: Optional[HarmonyType] = None
    for harmony, count in counts.items():
        if best is None or count > counts[best]:
            best = harmony
    return best if best is not None else HarmonyType.COMPLEMENTARY


def derive_identity(
    levels: Optional[Sequence[Any]],
    progress: Optional[Sequence[Any]],
    session_id: int,
    *,
    palette_min_distance: float = PALETTE_MIN_DISTANCE,
    volatility_threshold: float = VOLATILITY_THRESHOLD,
    trajectory_gap: float = TRAJECTORY_GAP,
) -> SessionIdentity:
    """Derive the poster identity for one session.

    Short or missing ``levels``/``progress`` are padded with synthetic hues and
    zero scores so any input yields a renderable identity.
    """
    levels = levels or ()
    progress = progress or ()

    hues: list[float] = []
    harmonies: list[HarmonyType] = []
    scores: list[float] = []
    for index in range(LEVEL_COUNT):
        level = levels[index] if index < len(levels) else None
        hue, label = _level_fields(level)
        hues.append(hue if hue is not None else fallback_hue(session_id, index))
        harmonies.append(parse_harmony_type(label) or cycle_harmony(index))
        scores.append(_score_at(progress, index))

    resonance = session_resonance(scores)
    trajectory = classify_trajectory(
        scores,
        resonance,
        volatility_threshold=volatility_threshold,
        trajectory_gap=trajectory_gap,
    )
    palette = extract_palette(hues, scores, min_distance=palette_min_distance)

    return SessionIdentity(
        primary_hue=palette[0],
        secondary_hue=palette[1],
        accent_hue=palette[2],
        dominant_harmony=dominant_harmony(harmonies),
        resonance=resonance,
        trajectory=trajectory,
        seed=session_id * SEED_MULTIPLIER + resonance,
        archetype_index=archetype_for_session(session_id),
        sequence_id=session_id,
    )
