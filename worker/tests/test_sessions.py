from __future__ import annotations

import json

import pytest

from absolutist_worker.app.models import ArchiveState, LevelScoreRequest
from absolutist_worker.app.sessions import ArchiveManager, UnknownSessionError
from absolutist_worker.services.backup import CURRENT_SESSION_KEY, import_backup
from absolutist_worker.services.exceptions import SessionNotReadyError
from absolutist_worker.services.session_generator import next_session


async def _perfect_request(manager: ArchiveManager) -> LevelScoreRequest:
    session = await manager.current_session()
    index = await manager.level_index()
    level = session.levels[index]
    return LevelScoreRequest(
        level_index=index,
        user_colors={node.id: node.target_color for node in level.nodes if not node.is_locked},
    )


@pytest.mark.asyncio
async def test_manager_starts_on_first_session() -> None:
    manager = ArchiveManager()
    session = await manager.current_session()
    assert session.id == 1
    assert await manager.level_index() == 0
    assert await manager.all_summaries() == []


@pytest.mark.asyncio
async def test_scoring_advances_the_level() -> None:
    manager = ArchiveManager()
    analysis = await manager.score_level(await _perfect_request(manager))
    assert analysis.score == 100
    assert analysis.is_win
    assert await manager.level_index() == 1
    session = await manager.current_session()
    assert session.progress[0] == 100.0
    assert session.progress[1] is None


@pytest.mark.asyncio
async def test_scoring_the_wrong_level_is_rejected() -> None:
    manager = ArchiveManager()
    with pytest.raises(SessionNotReadyError):
        await manager.score_level(LevelScoreRequest(level_index=3))


@pytest.mark.asyncio
async def test_unfinished_session_cannot_be_archived() -> None:
    manager = ArchiveManager()
    with pytest.raises(SessionNotReadyError):
        await manager.archive_current()


@pytest.mark.asyncio
async def test_full_play_through_archives_a_renderable_session() -> None:
    manager = ArchiveManager()
    for _ in range(20):
        await manager.score_level(await _perfect_request(manager))
    finished = await manager.current_session()
    assert finished.is_complete
    with pytest.raises(SessionNotReadyError):
        await manager.score_level(LevelScoreRequest(level_index=19))

    summary = await manager.archive_current()
    assert summary.session_id == 1
    assert summary.renderable
    assert summary.resonance == 100
    assert summary.archetype_name is not None
    next_up = await manager.current_session()
    assert next_up.id == 2
    assert await manager.level_index() == 0


@pytest.mark.asyncio
async def test_simulated_decade_fills_archive_newest_first() -> None:
    manager = ArchiveManager()
    created = await manager.simulate_decade()
    assert [summary.session_id for summary in created] == list(range(1, 11))
    archived = await manager.all_summaries()
    assert [summary.session_id for summary in archived] == list(range(10, 0, -1))
    assert (await manager.current_session()).id == 11


@pytest.mark.asyncio
async def test_lookups_return_copies_and_raise_for_unknown_ids() -> None:
    manager = ArchiveManager()
    await manager.simulate_decade(3)
    session = await manager.get_session(2)
    session.progress[0] = None
    assert (await manager.get_session(2)).progress[0] is not None
    with pytest.raises(UnknownSessionError):
        await manager.get_session(99)
    assert await manager.get_summary(99) is None


@pytest.mark.asyncio
async def test_snapshot_and_restore() -> None:
    manager = ArchiveManager()
    await manager.simulate_decade(2)
    snapshot = await manager.snapshot()

    other = ArchiveManager(state=ArchiveState(onboarding_complete=True))
    await other.restore(snapshot)
    assert [s.session_id for s in await other.all_summaries()] == [2, 1]
    assert (await other.current_session()).id == 3

    await other.clear()
    assert await other.all_summaries() == []
    assert (await other.current_session()).id == 1


@pytest.mark.asyncio
async def test_restored_short_score_sheet_is_padded_when_scoring() -> None:
    current = next_session(1).model_dump(mode="json", by_alias=True)
    current["progress"] = []
    state = import_backup(json.dumps({"version": "1", CURRENT_SESSION_KEY: json.dumps(current)}))
    manager = ArchiveManager()
    await manager.restore(state)

    analysis = await manager.score_level(await _perfect_request(manager))

    assert analysis.score == 100
    session = await manager.current_session()
    assert len(session.progress) == 20
    assert session.progress[0] == 100.0
    assert session.progress[1:] == [None] * 19


@pytest.mark.asyncio
async def test_session_with_missing_levels_rejects_and_finishes_early() -> None:
    session = next_session(1)
    session.levels = session.levels[:2]
    manager = ArchiveManager(ArchiveState(current_session=session, level_index=0))

    await manager.score_level(await _perfect_request(manager))
    await manager.score_level(await _perfect_request(manager))

    finished = await manager.current_session()
    assert finished.is_complete
    assert finished.progress[:2] == [100.0, 100.0]
    with pytest.raises(SessionNotReadyError):
        await manager.score_level(LevelScoreRequest(level_index=2))
