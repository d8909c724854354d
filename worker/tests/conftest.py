from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

import pytest

_SANDBOX = Path(tempfile.mkdtemp(prefix="absolutist-tests-"))
os.environ.setdefault("ABSOLUTIST_ARTIFACT_ROOT", str(_SANDBOX / "artifacts"))

from absolutist_worker.app.models import SessionData  # noqa: E402
from absolutist_worker.services.session_generator import next_session  # noqa: E402


@pytest.fixture
def scored_session() -> Callable[..., SessionData]:
    def _build(session_id: int, score: Optional[float] = 80.0) -> SessionData:
        session = next_session(session_id)
        session.progress = [score] * 20
        session.is_complete = score is not None
        return session

    return _build
