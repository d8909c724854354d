from __future__ import annotations

import asyncio
from typing import Optional

from loguru import logger

from ..services.archetypes import archetype_name
from ..services.composition import DEFAULT_OPTIONS, RenderOptions, identity_for, is_renderable
from ..services.exceptions import SessionNotReadyError
from ..services.identity import count_positive_scores, session_resonance
from ..services.scoring import analyse_level
from ..services.session_generator import LEVELS_PER_SESSION, next_session, simulated_progress
from .models import (
    ArchiveState,
    LevelAnalysis,
    LevelScoreRequest,
    SessionData,
    SessionSummary,
)


class UnknownSessionError(Exception):
    """Raised when a session lookup fails."""

    def __init__(self, session_id: int) -> None:
        super().__init__(session_id)
        self.session_id = session_id


class ArchiveManager:
    """Owns the active session and the archive of finished ones."""

    def __init__(
        self,
        state: Optional[ArchiveState] = None,
        options: RenderOptions = DEFAULT_OPTIONS,
        *,
        win_threshold: int = 80,
    ) -> None:
        self._state = state.model_copy(deep=True) if state is not None else ArchiveState()
        self._options = options
        self._win_threshold = win_threshold
        self._lock = asyncio.Lock()

    def _active(self) -> SessionData:
        if self._state.current_session is None:
            self._state.current_session = next_session(1)
            self._state.level_index = 0
        return self._state.current_session

    async def current_session(self) -> SessionData:
        async with self._lock:
            return self._active().model_copy(deep=True)

    async def level_index(self) -> int:
        async with self._lock:
            self._active()
            return self._state.level_index

    async def score_level(self, payload: LevelScoreRequest) -> LevelAnalysis:
        async with self._lock:
            session = self._active()
            if session.is_complete:
                raise SessionNotReadyError(f"session {session.id} is complete; archive it first")
            if payload.level_index != self._state.level_index:
                raise SessionNotReadyError(
                    f"expected level {self._state.level_index}, got {payload.level_index}"
                )
            last_level = min(len(session.levels), LEVELS_PER_SESSION) - 1
            if payload.level_index > last_level:
                raise SessionNotReadyError(
                    f"session {session.id} has no level {payload.level_index}"
                )
            level = session.levels[payload.level_index]
            for node in level.nodes:
                if not node.is_locked and node.id in payload.user_colors:
                    node.user_color = payload.user_colors[node.id]

            analysis = analyse_level(level, win_threshold=self._win_threshold)
            # restored records may carry a short score sheet
            missing = LEVELS_PER_SESSION - len(session.progress)
            if missing > 0:
                session.progress.extend([None] * missing)
            session.progress[payload.level_index] = float(analysis.score)
            if payload.level_index >= last_level:
                session.is_complete = True
            else:
                self._state.level_index = payload.level_index + 1
            logger.debug(
                "Session {} level {} scored {}",
                session.id,
                payload.level_index + 1,
                analysis.score,
            )
            return analysis

    async def archive_current(self) -> SessionSummary:
        async with self._lock:
            session = self._active()
            if not session.is_complete:
                raise SessionNotReadyError(f"session {session.id} is still in progress")
            self._state.archive.insert(0, session)
            self._state.current_session = next_session(session.id + 1)
            self._state.level_index = 0
            logger.info("Archived session {} ({} total)", session.id, len(self._state.archive))
            return self._to_summary(session)

    async def simulate_decade(self, count: int = 10) -> list[SessionSummary]:
        """Fill the archive with ``count`` finished sessions carrying synthetic scores."""
        async with self._lock:
            start_id = self._active().id
            created: list[SessionData] = []
            for offset in range(count):
                session = next_session(start_id + offset)
                session.progress = simulated_progress(session.id)
                session.is_complete = True
                self._state.archive.insert(0, session)
                created.append(session)
            self._state.current_session = next_session(start_id + count)
            self._state.level_index = 0
            logger.info("Simulated sessions {}-{}", start_id, start_id + count - 1)
            return [self._to_summary(session) for session in created]

    async def get_session(self, session_id: int) -> SessionData:
        async with self._lock:
            current = self._active()
            if current.id == session_id:
                return current.model_copy(deep=True)
            for session in self._state.archive:
                if session.id == session_id:
                    return session.model_copy(deep=True)
            raise UnknownSessionError(session_id)

    async def get_summary(self, session_id: int) -> Optional[SessionSummary]:
        try:
            session = await self.get_session(session_id)
        except UnknownSessionError:
            return None
        return self._to_summary(session)

    async def all_summaries(self) -> list[SessionSummary]:
        async with self._lock:
            return [self._to_summary(session) for session in self._state.archive]

    async def snapshot(self) -> ArchiveState:
        async with self._lock:
            self._active()
            return self._state.model_copy(deep=True)

    async def restore(self, state: ArchiveState) -> None:
        async with self._lock:
            self._state = state.model_copy(deep=True)
            logger.info("Archive restored with {} sessions", len(self._state.archive))

    async def clear(self) -> None:
        async with self._lock:
            self._state = ArchiveState(current_session=next_session(1))

    def _to_summary(self, session: SessionData) -> SessionSummary:
        renderable = is_renderable(session.progress, self._options)
        summary = SessionSummary(
            session_id=session.id,
            name=session.name,
            mood=session.mood,
            is_complete=session.is_complete,
            scored_levels=count_positive_scores(session.progress),
            resonance=session_resonance(session.progress),
            renderable=renderable,
        )
        if renderable:
            identity = identity_for(session.levels, session.progress, session.id, self._options)
            summary.archetype_index = identity.archetype_index
            summary.archetype_name = archetype_name(identity.archetype_index)
            summary.trajectory = identity.trajectory
        return summary
