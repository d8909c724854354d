from absolutist_worker.services.deck import (
    archetype_for_session,
    deck_for_decade,
    decade_for_session,
    position_in_decade,
)


def test_every_decade_deck_is_a_permutation() -> None:
    for decade in range(100):
        assert sorted(deck_for_decade(decade)) == list(range(10))


def test_sessions_in_one_decade_cover_every_archetype() -> None:
    for decade in range(12):
        ids = range(decade * 10 + 1, decade * 10 + 11)
        picks = [archetype_for_session(session_id) for session_id in ids]
        assert sorted(picks) == list(range(10))


def test_decade_and_position_boundaries() -> None:
    assert decade_for_session(1) == 0
    assert decade_for_session(10) == 0
    assert decade_for_session(11) == 1
    assert position_in_decade(1) == 0
    assert position_in_decade(10) == 9
    assert position_in_decade(11) == 0


def test_session_picks_card_from_its_own_decade() -> None:
    assert archetype_for_session(1) == deck_for_decade(0)[0]
    assert archetype_for_session(11) == deck_for_decade(1)[0]
    assert archetype_for_session(27) == deck_for_decade(2)[6]


def test_decades_shuffle_independently() -> None:
    base = deck_for_decade(0)
    assert any(deck_for_decade(decade) != base for decade in range(1, 20))


def test_returned_deck_is_a_copy() -> None:
    original = deck_for_decade(3)
    mutated = deck_for_decade(3)
    mutated.append(99)
    mutated.reverse()
    assert deck_for_decade(3) == original
