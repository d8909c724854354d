"""Archetype deck allocation across decades of session ids."""

from __future__ import annotations

from functools import lru_cache

from .prng import seeded_shuffle

ARCHETYPE_COUNT = 10
DECADE_LENGTH = 10
DECADE_SEED_STRIDE = 1000


@lru_cache(maxsize=256)
def _cached_deck(decade: int) -> tuple[int, ...]:
    return tuple(seeded_shuffle(range(ARCHETYPE_COUNT), decade * DECADE_SEED_STRIDE))


def deck_for_decade(decade: int) -> list[int]:
    """Permutation of ``0..9`` shared by the ten sessions of ``decade``."""
    return list(_cached_deck(int(decade)))


def decade_for_session(session_id: int) -> int:
    return (int(session_id) - 1) // DECADE_LENGTH


def position_in_decade(session_id: int) -> int:
    return (int(session_id) - 1) % DECADE_LENGTH


def archetype_for_session(session_id: int) -> int:
    deck = _cached_deck(decade_for_session(session_id))
    return deck[position_in_decade(session_id)]
