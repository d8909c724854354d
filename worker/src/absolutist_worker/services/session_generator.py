"""Builds fresh 20-level sessions.

Root hues come from a shuffled deck of twenty 18-degree buckets so a session
sweeps the whole wheel. Every draw is keyed on the session id (plus an
optional salt), so regenerating a session id reproduces the same puzzles.
"""

from __future__ import annotations

import math
from typing import Optional

from ..app.models import HSL, HarmonyNode, LevelData, SessionData
from .harmony import harmony_for_level, harmony_targets
from .prng import seeded_shuffle, srandom

LEVELS_PER_SESSION = 20
HUE_BUCKETS = 20
GENERATOR_STRIDE = 7919
_DECK_OFFSET = 0
_SHUFFLE_OFFSET = 100
_LEVEL_OFFSET = 200
_LEVEL_STRIDE = 16
_NAME_OFFSET = 600
_SIMULATION_OFFSET = 900

ADJECTIVES = ("Absolute", "Pure", "Resonant", "Vital", "Static", "Linear", "Radial", "Chromatic")
NOUNS = ("Form", "Void", "Grid", "Ratio", "System", "Logic", "Prism", "Cycle")


def _draw_int(seed: int, span: int) -> int:
    return int(math.floor(srandom(seed) * span))


def _base_seed(session_id: int, salt: int) -> int:
    return session_id * GENERATOR_STRIDE + salt


def hue_deck(base_seed: int) -> list[float]:
    step = 360 / HUE_BUCKETS
    deck: list[float] = []
    for index in range(HUE_BUCKETS):
        jitter = _draw_int(base_seed + _DECK_OFFSET + index, 10) - 5
        hue = index * step + jitter
        if hue < 0:
            hue += 360
        deck.append(hue)
    return seeded_shuffle(deck, base_seed + _SHUFFLE_OFFSET)


def random_start_color(seed: int) -> HSL:
    """Visible starting colour for an unlocked node: no greys, no black or white."""
    return HSL(
        h=_draw_int(seed, 360),
        s=50 + _draw_int(seed + 1, 50),
        l=30 + _draw_int(seed + 2, 40),
    )


def generate_level(index: int, root_hue: float, base_seed: int) -> LevelData:
    level_number = index + 1
    harmony = harmony_for_level(level_number)
    seed = base_seed + _LEVEL_OFFSET + index * _LEVEL_STRIDE
    root = HSL(h=root_hue, s=60 + _draw_int(seed, 30), l=45 + _draw_int(seed + 1, 15))

    nodes = [HarmonyNode(id=0, is_locked=True, target_color=root, user_color=root)]
    for offset, target in enumerate(harmony_targets(root, harmony)):
        nodes.append(
            HarmonyNode(
                id=offset + 1,
                is_locked=False,
                target_color=target,
                user_color=random_start_color(seed + 2 + offset * 3),
            )
        )
    return LevelData(
        level_number=level_number,
        root_color=root,
        harmony_type=harmony.value,
        nodes=nodes,
    )


def session_name(base_seed: int) -> str:
    adjective = ADJECTIVES[_draw_int(base_seed + _NAME_OFFSET, len(ADJECTIVES))]
    noun = NOUNS[_draw_int(base_seed + _NAME_OFFSET + 1, len(NOUNS))]
    return f"{adjective} {noun}"


def next_session(session_id: int, *, salt: int = 0) -> SessionData:
    base_seed = _base_seed(session_id, salt)
    deck = hue_deck(base_seed)
    return SessionData(
        id=session_id,
        name=session_name(base_seed),
        mood="NEUTRAL",
        levels=[generate_level(index, deck[index], base_seed) for index in range(LEVELS_PER_SESSION)],
        progress=[None] * LEVELS_PER_SESSION,
        is_complete=False,
    )


def simulated_progress(session_id: int) -> list[Optional[float]]:
    """Synthetic score sheet for demo and fixture sessions.

    One draw picks a player profile (erratic, strong or steady); the rest
    fill the twenty levels. Erratic profiles can score zero.
    """
    seed = session_id * GENERATOR_STRIDE + _SIMULATION_OFFSET
    profile = srandom(seed)
    scores: list[Optional[float]] = []
    for index in range(LEVELS_PER_SESSION):
        draw = srandom(seed + index + 1)
        if profile > 0.8:
            scores.append(float(math.floor(draw * 100)))
        elif profile > 0.5:
            scores.append(float(80 + math.floor(draw * 20)))
        else:
            scores.append(float(60 + math.floor(draw * 40)))
    return scores
