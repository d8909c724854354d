from __future__ import annotations

import json
from datetime import UTC, date, datetime

import pytest

from absolutist_worker.app.models import ArchiveState
from absolutist_worker.services.backup import (
    ARCHIVE_KEY,
    CURRENT_SESSION_KEY,
    LEVEL_INDEX_KEY,
    ONBOARDING_KEY,
    backup_filename,
    export_backup,
    import_backup,
)
from absolutist_worker.services.exceptions import BackupFormatError
from absolutist_worker.services.session_generator import next_session


def _state(scored_session) -> ArchiveState:
    return ArchiveState(
        archive=[scored_session(2, score=64.0), scored_session(1)],
        current_session=next_session(3),
        level_index=4,
        onboarding_complete=True,
    )


def test_export_then_import_restores_state(scored_session) -> None:
    state = _state(scored_session)
    text = export_backup(state, exported_at=datetime(2024, 5, 1, tzinfo=UTC))
    payload = json.loads(text)
    assert payload["version"] == "1"
    assert payload["exportedAt"].startswith("2024-05-01")
    assert isinstance(payload[ARCHIVE_KEY], str)
    assert payload[LEVEL_INDEX_KEY] == "4"
    assert payload[ONBOARDING_KEY] == "true"
    assert import_backup(text) == state


def test_exported_sessions_use_client_field_names(scored_session) -> None:
    payload = json.loads(export_backup(_state(scored_session)))
    current = json.loads(payload[CURRENT_SESSION_KEY])
    assert "isComplete" in current
    assert "levelNumber" in current["levels"][0]


def test_decoded_values_are_accepted(scored_session) -> None:
    session = scored_session(6).model_dump(mode="json", by_alias=True)
    text = json.dumps({"version": 1, ARCHIVE_KEY: [session], LEVEL_INDEX_KEY: 2, ONBOARDING_KEY: True})
    state = import_backup(text)
    assert [entry.id for entry in state.archive] == [6]
    assert state.level_index == 2
    assert state.onboarding_complete


def test_malformed_entries_are_skipped() -> None:
    text = json.dumps({"version": "1", ARCHIVE_KEY: "not json", LEVEL_INDEX_KEY: "5"})
    state = import_backup(text)
    assert state.archive == []
    assert state.level_index == 5


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        "[1, 2]",
        json.dumps({ARCHIVE_KEY: "[]"}),
        json.dumps({"version": "1", "unrelated": "x"}),
        json.dumps({"version": "1", LEVEL_INDEX_KEY: "40"}),
    ],
)
def test_unusable_backups_are_rejected(text: str) -> None:
    with pytest.raises(BackupFormatError):
        import_backup(text)


def test_backup_filename_is_dated() -> None:
    assert backup_filename(date(2025, 1, 9)) == "absolutist-backup-2025-01-09.json"
