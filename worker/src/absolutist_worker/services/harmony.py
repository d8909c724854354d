"""Colour-harmony rules and the level progression built on them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..app.models import HSL, HarmonyType


@dataclass(frozen=True)
class HarmonyRule:
    type: HarmonyType
    label: str
    offsets: tuple[float, ...]
    description: str


HARMONY_RULES: dict[HarmonyType, HarmonyRule] = {
    HarmonyType.COMPLEMENTARY: HarmonyRule(
        HarmonyType.COMPLEMENTARY, "COMPLEMENTARY", (180,), "OPPOSING FORCES"
    ),
    HarmonyType.ANALOGOUS: HarmonyRule(
        HarmonyType.ANALOGOUS, "ANALOGOUS", (-30, 30), "SYMPATHETIC VIBRATION"
    ),
    HarmonyType.TRIADIC: HarmonyRule(
        HarmonyType.TRIADIC, "TRIADIC", (120, 240), "EQUILATERAL BALANCE"
    ),
    HarmonyType.SPLIT_COMPLEMENTARY: HarmonyRule(
        HarmonyType.SPLIT_COMPLEMENTARY, "SPLIT-COMP", (150, 210), "HIGH TENSION"
    ),
    HarmonyType.SQUARE: HarmonyRule(
        HarmonyType.SQUARE, "SQUARE", (90, 180, 270), "GEOMETRIC RIGIDITY"
    ),
    # offsets unused; monochromatic varies saturation and lightness only
    HarmonyType.MONOCHROMATIC: HarmonyRule(
        HarmonyType.MONOCHROMATIC, "MONOCHROME", (0, 0), "SINGULAR FOCUS"
    ),
    HarmonyType.TETRADIC: HarmonyRule(
        HarmonyType.TETRADIC, "TETRADIC", (60, 180, 240), "COMPLEX DUALITY"
    ),
}

# The five kinds used by the 20-level progression, in the order they repeat.
PROGRESSION_CYCLE: tuple[HarmonyType, ...] = (
    HarmonyType.COMPLEMENTARY,
    HarmonyType.ANALOGOUS,
    HarmonyType.SPLIT_COMPLEMENTARY,
    HarmonyType.TRIADIC,
    HarmonyType.SQUARE,
)

# Order matters: "split-comp" must resolve before the bare "comp" match.
_LABEL_MATCHERS: tuple[tuple[str, HarmonyType], ...] = (
    ("split", HarmonyType.SPLIT_COMPLEMENTARY),
    ("comp", HarmonyType.COMPLEMENTARY),
    ("anal", HarmonyType.ANALOGOUS),
    ("tri", HarmonyType.TRIADIC),
    ("sq", HarmonyType.SQUARE),
)


def parse_harmony_type(label: Optional[str]) -> Optional[HarmonyType]:
    """Classify a stored harmony label (display or canonical) by substring."""
    folded = (label or "").casefold()
    for needle, harmony in _LABEL_MATCHERS:
        if needle in folded:
            return harmony
    return None


def cycle_harmony(index: int) -> HarmonyType:
    return PROGRESSION_CYCLE[index % len(PROGRESSION_CYCLE)]


def harmony_for_level(level_number: int) -> HarmonyType:
    """Difficulty tier for a 1-based level: four levels per harmony kind."""
    if level_number <= 4:
        return HarmonyType.COMPLEMENTARY
    if level_number <= 8:
        return HarmonyType.ANALOGOUS
    if level_number <= 12:
        return HarmonyType.TRIADIC
    if level_number <= 16:
        return HarmonyType.SPLIT_COMPLEMENTARY
    return HarmonyType.SQUARE


def harmony_targets(root: HSL, harmony: HarmonyType) -> list[HSL]:
    if harmony == HarmonyType.MONOCHROMATIC:
        return [
            HSL(h=root.h, s=max(10.0, root.s - 30), l=min(90.0, root.l + 40)),
            HSL(h=root.h, s=min(100.0, root.s + 10), l=max(10.0, root.l - 40)),
        ]
    rule = HARMONY_RULES[harmony]
    return [
        HSL(h=(root.h + offset) % 360, s=root.s, l=root.l)
        for offset in rule.offsets
    ]
