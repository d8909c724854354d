from __future__ import annotations

from typing import cast

from fastapi import APIRouter, HTTPException, Request, Response

from ..services.archetypes import ARCHETYPE_NAMES
from ..services.backup import backup_filename, export_backup, import_backup
from ..services.composition import RenderOptions, compose_session
from ..services.exceptions import BackupFormatError, SessionNotReadyError
from .models import LevelAnalysis, LevelScoreRequest, SessionData, SessionSummary
from .sessions import ArchiveManager, UnknownSessionError
from .settings import Settings

SVG_MEDIA_TYPE = "image/svg+xml"

router = APIRouter()


def get_archive(request: Request) -> ArchiveManager:
    return cast(ArchiveManager, request.app.state.archive)


def get_render_options(request: Request) -> RenderOptions:
    return cast(RenderOptions, request.app.state.render_options)


def _svg(session: SessionData, options: RenderOptions) -> Response:
    scene = compose_session(session, options)
    headers = {"X-Poster-Placeholder": "true" if scene.placeholder else "false"}
    archetype = scene.metadata.get("archetype")
    if archetype is not None:
        headers["X-Poster-Archetype"] = str(archetype)
    return Response(content=scene.to_svg(), media_type=SVG_MEDIA_TYPE, headers=headers)


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    settings = cast(Settings, request.app.state.settings)
    archive = get_archive(request)
    summaries = await archive.all_summaries()
    return {
        "status": "ok",
        "artifact_root": str(settings.artifact_root),
        "archetypes": list(ARCHETYPE_NAMES),
        "archived_sessions": len(summaries),
    }


@router.get("/session", response_model=SessionData)
async def current_session(request: Request) -> SessionData:
    return await get_archive(request).current_session()


@router.post("/session/score", response_model=LevelAnalysis)
async def score_level(payload: LevelScoreRequest, request: Request) -> LevelAnalysis:
    try:
        return await get_archive(request).score_level(payload)
    except SessionNotReadyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.post("/session/archive", response_model=SessionSummary)
async def archive_session(request: Request) -> SessionSummary:
    try:
        return await get_archive(request).archive_current()
    except SessionNotReadyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.get("/archive", response_model=list[SessionSummary])
async def list_archive(request: Request) -> list[SessionSummary]:
    return await get_archive(request).all_summaries()


@router.get("/archive/{session_id}", response_model=SessionSummary)
async def fetch_archived(session_id: int, request: Request) -> SessionSummary:
    summary = await get_archive(request).get_summary(session_id)
    if summary is None:
        raise HTTPException(status_code=404, detail="session not found")
    return summary


@router.get("/poster/{session_id}.svg")
async def session_poster(session_id: int, request: Request) -> Response:
    try:
        session = await get_archive(request).get_session(session_id)
    except UnknownSessionError as exc:
        raise HTTPException(
            status_code=404, detail=f"session {exc.session_id} not found"
        ) from exc
    return _svg(session, get_render_options(request))


@router.post("/poster")
async def render_poster(payload: SessionData, request: Request) -> Response:
    return _svg(payload, get_render_options(request))


@router.get("/backup")
async def download_backup(request: Request) -> Response:
    state = await get_archive(request).snapshot()
    return Response(
        content=export_backup(state),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{backup_filename()}"'},
    )


@router.post("/backup")
async def restore_backup(request: Request) -> dict[str, object]:
    body = (await request.body()).decode("utf-8", errors="replace")
    try:
        state = import_backup(body)
    except BackupFormatError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    await get_archive(request).restore(state)
    return {"status": "restored", "archived_sessions": len(state.archive)}
