"""Colour match scoring for a single level."""

from __future__ import annotations

import math

from ..app.models import HSL, LevelAnalysis, LevelData

HUE_WEIGHT = 0.6
SATURATION_WEIGHT = 0.2
LIGHTNESS_WEIGHT = 0.2
HUE_PENALTY = 2.5  # 40 degrees off scores zero
CHANNEL_PENALTY = 2.0
WIN_THRESHOLD = 80


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def hue_distance(a: float, b: float) -> float:
    diff = abs(a - b)
    return 360 - diff if diff > 180 else diff


def calculate_match_score(target: HSL, current: HSL) -> float:
    """Unrounded 0-100 match score; hue dominates."""
    hue_score = max(0.0, 100 - hue_distance(target.h, current.h) * HUE_PENALTY)
    sat_score = max(0.0, 100 - abs(target.s - current.s) * CHANNEL_PENALTY)
    light_score = max(0.0, 100 - abs(target.l - current.l) * CHANNEL_PENALTY)
    return (
        hue_score * HUE_WEIGHT
        + sat_score * SATURATION_WEIGHT
        + light_score * LIGHTNESS_WEIGHT
    )


def analyse_level(level: LevelData, *, win_threshold: int = WIN_THRESHOLD) -> LevelAnalysis:
    """Average score and mean channel errors over the level's unlocked nodes."""
    satellites = [node for node in level.nodes if not node.is_locked]
    if not satellites:
        return LevelAnalysis(score=100, is_win=True)

    total = 0.0
    hue_total = sat_total = light_total = 0.0
    for node in satellites:
        total += calculate_match_score(node.target_color, node.user_color)
        hue_total += hue_distance(node.target_color.h, node.user_color.h)
        sat_total += abs(node.target_color.s - node.user_color.s)
        light_total += abs(node.target_color.l - node.user_color.l)

    count = len(satellites)
    score = _round_half_up(total / count)
    return LevelAnalysis(
        score=score,
        hue_delta=_round_half_up(hue_total / count),
        saturation_delta=_round_half_up(sat_total / count),
        lightness_delta=_round_half_up(light_total / count),
        is_win=score >= win_threshold,
    )
