"""Versioned JSON backups of player progress.

The payload mirrors the app's storage keys; each value is stored as a JSON
string, the same shape the mobile client writes, and either strings or
already-decoded values are accepted when importing.
"""

from __future__ import annotations

import json
from datetime import UTC, date, datetime
from typing import Any, Callable, Optional

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from ..app.models import ArchiveState, SessionData
from .exceptions import BackupFormatError

BACKUP_VERSION = "1"
ARCHIVE_KEY = "absolutist_archive_v1"
CURRENT_SESSION_KEY = "absolutist_current_session_v2"
LEVEL_INDEX_KEY = "absolutist_level_index_v2"
ANALOGOUS_HINT_KEY = "absolutist_analogous_hint_seen"
ONBOARDING_KEY = "absolutist_onboarding_complete"

RESTORABLE_KEYS = (
    ARCHIVE_KEY,
    CURRENT_SESSION_KEY,
    LEVEL_INDEX_KEY,
    ANALOGOUS_HINT_KEY,
    ONBOARDING_KEY,
)

_ARCHIVE_ADAPTER = TypeAdapter(list[SessionData])


def backup_filename(day: Optional[date] = None) -> str:
    day = day or datetime.now(tz=UTC).date()
    return f"absolutist-backup-{day.isoformat()}.json"


def _dump_session(session: SessionData) -> Any:
    return session.model_dump(mode="json", by_alias=True)


def export_backup(state: ArchiveState, *, exported_at: Optional[datetime] = None) -> str:
    stamp = exported_at or datetime.now(tz=UTC)
    payload: dict[str, str] = {
        "version": BACKUP_VERSION,
        "exportedAt": stamp.isoformat(),
        ARCHIVE_KEY: json.dumps([_dump_session(session) for session in state.archive]),
        LEVEL_INDEX_KEY: str(state.level_index),
    }
    if state.current_session is not None:
        payload[CURRENT_SESSION_KEY] = json.dumps(_dump_session(state.current_session))
    if state.analogous_hint_seen:
        payload[ANALOGOUS_HINT_KEY] = "true"
    if state.onboarding_complete:
        payload[ONBOARDING_KEY] = "true"
    return json.dumps(payload, indent=2)


def _decode(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _as_flag(value: Any) -> bool:
    decoded = _decode(value)
    if isinstance(decoded, str):
        return decoded.strip().lower() == "true"
    return bool(decoded)


_FIELD_PARSERS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    ARCHIVE_KEY: ("archive", lambda raw: _ARCHIVE_ADAPTER.validate_python(_decode(raw))),
    CURRENT_SESSION_KEY: ("current_session", lambda raw: SessionData.model_validate(_decode(raw))),
    LEVEL_INDEX_KEY: ("level_index", lambda raw: int(_decode(raw))),
    ANALOGOUS_HINT_KEY: ("analogous_hint_seen", _as_flag),
    ONBOARDING_KEY: ("onboarding_complete", _as_flag),
}


def import_backup(text: str) -> ArchiveState:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise BackupFormatError("invalid backup file: could not parse JSON") from exc
    if not isinstance(parsed, dict):
        raise BackupFormatError("invalid backup file: expected a JSON object")
    if not parsed.get("version"):
        raise BackupFormatError("invalid backup file: missing version field")

    restored: dict[str, Any] = {}
    for key in RESTORABLE_KEYS:
        if key not in parsed or parsed[key] is None:
            continue
        field_name, parser = _FIELD_PARSERS[key]
        try:
            restored[field_name] = parser(parsed[key])
        except (ValidationError, ValueError, TypeError) as exc:
            logger.warning("Skipping malformed backup entry {}: {}", key, exc)

    if not restored:
        raise BackupFormatError("backup file contains no recognisable data")

    try:
        state = ArchiveState(**restored)
    except ValidationError as exc:
        raise BackupFormatError(f"backup file failed validation: {exc}") from exc
    logger.info(
        "Restored backup v{} ({} archived sessions)", parsed["version"], len(state.archive)
    )
    return state
