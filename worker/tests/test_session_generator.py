from absolutist_worker.app.models import HarmonyType
from absolutist_worker.services.harmony import harmony_targets
from absolutist_worker.services.session_generator import (
    ADJECTIVES,
    NOUNS,
    hue_deck,
    next_session,
    simulated_progress,
)


def _circular_gap(a: float, b: float) -> float:
    diff = abs(a - b) % 360
    return min(diff, 360 - diff)


def test_session_is_reproducible_per_id() -> None:
    assert next_session(12) == next_session(12)
    assert next_session(12) != next_session(13)
    assert next_session(12, salt=1) != next_session(12)


def test_fresh_session_shape() -> None:
    session = next_session(3)
    assert session.id == 3
    assert len(session.levels) == 20
    assert session.progress == [None] * 20
    assert not session.is_complete
    adjective, noun = session.name.split(" ")
    assert adjective in ADJECTIVES and noun in NOUNS
    assert [level.level_number for level in session.levels] == list(range(1, 21))


def test_root_hues_sweep_the_whole_wheel() -> None:
    deck = hue_deck(4242)
    assert len(deck) == 20
    for bucket in range(20):
        assert any(_circular_gap(hue, bucket * 18) <= 5 for hue in deck)


def test_levels_follow_the_difficulty_tiers() -> None:
    session = next_session(8)
    assert session.levels[0].harmony_type == HarmonyType.COMPLEMENTARY.value
    assert session.levels[19].harmony_type == HarmonyType.SQUARE.value
    assert len(session.levels[0].nodes) == 2
    assert len(session.levels[19].nodes) == 4


def test_anchor_node_is_locked_and_targets_follow_rule() -> None:
    for level in next_session(5).levels:
        anchor, *satellites = level.nodes
        assert anchor.is_locked
        assert anchor.user_color == anchor.target_color == level.root_color
        expected = harmony_targets(level.root_color, HarmonyType(level.harmony_type))
        assert [node.target_color for node in satellites] == expected
        assert 60 <= level.root_color.s < 90
        assert 45 <= level.root_color.l < 60
        for node in satellites:
            assert not node.is_locked
            assert 50 <= node.user_color.s < 100
            assert 30 <= node.user_color.l < 70


def test_simulated_progress_is_stable_and_bounded() -> None:
    for session_id in range(1, 40):
        scores = simulated_progress(session_id)
        assert scores == simulated_progress(session_id)
        assert len(scores) == 20
        assert all(score is not None and 0 <= score < 100 for score in scores)
