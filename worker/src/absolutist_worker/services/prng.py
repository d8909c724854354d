"""Stateless seeded pseudo-random helpers used by every poster decision."""

from __future__ import annotations

from typing import Sequence, TypeVar

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_SCALE = 4294967296.0

T = TypeVar("T")


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def srandom(seed: int) -> float:
    """Return a float in [0, 1) fully determined by ``seed``.

    Mulberry32 mixing over unsigned 32-bit words, so results are identical on
    every platform for the same integer seed.
    """
    t = (int(seed) + _INCREMENT) & _MASK32
    t = _imul(t ^ (t >> 15), t | 1)
    t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
    return ((t ^ (t >> 14)) & _MASK32) / _SCALE


def rng_range(seed: int, minimum: float, maximum: float) -> float:
    return minimum + srandom(seed) * (maximum - minimum)


def seeded_shuffle(items: Sequence[T], seed: int) -> list[T]:
    """Fisher-Yates shuffle drawing one sub-seed per remaining length."""
    deck = list(items)
    remaining = len(deck)
    while remaining:
        index = int(srandom(seed + remaining) * remaining)
        remaining -= 1
        deck[remaining], deck[index] = deck[index], deck[remaining]
    return deck
