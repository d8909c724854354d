"""Composition director: session history in, framed poster scene out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from loguru import logger

from ..app.models import SessionData, SessionIdentity
from ..app.settings import Settings
from .archetypes import ARCHETYPES, Paint, archetype_name
from .identity import (
    PALETTE_MIN_DISTANCE,
    TRAJECTORY_GAP,
    VOLATILITY_THRESHOLD,
    count_positive_scores,
    derive_identity,
)
from .scene import CANVAS_HEIGHT, CANVAS_WIDTH, FAINT, GRID_UNIT, Scene, dot_grid

DEFAULT_SIGNATURE = "the absolutist."
COMPLETION_THRESHOLD = 20


@dataclass(frozen=True)
class RenderOptions:
    palette_min_distance: float = PALETTE_MIN_DISTANCE
    volatility_threshold: float = VOLATILITY_THRESHOLD
    trajectory_gap: float = TRAJECTORY_GAP
    completion_threshold: int = COMPLETION_THRESHOLD
    fill_saturation: float = 82.0
    fill_lightness: float = 46.0
    signature: Optional[str] = DEFAULT_SIGNATURE

    @classmethod
    def from_settings(cls, settings: Settings) -> "RenderOptions":
        return cls(
            palette_min_distance=settings.palette_min_distance,
            volatility_threshold=settings.volatility_threshold,
            trajectory_gap=settings.trajectory_gap,
            completion_threshold=settings.completion_threshold,
            fill_saturation=settings.fill_saturation,
            fill_lightness=settings.fill_lightness,
            signature=settings.signature,
        )


DEFAULT_OPTIONS = RenderOptions()


def is_renderable(
    progress: Optional[Sequence[Any]], options: RenderOptions = DEFAULT_OPTIONS
) -> bool:
    """True once enough positive scores exist, whatever the session's own flag says."""
    return count_positive_scores(progress) >= options.completion_threshold


def identity_for(
    levels: Optional[Sequence[Any]],
    progress: Optional[Sequence[Any]],
    session_id: int,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> SessionIdentity:
    return derive_identity(
        levels,
        progress,
        session_id,
        palette_min_distance=options.palette_min_distance,
        volatility_threshold=options.volatility_threshold,
        trajectory_gap=options.trajectory_gap,
    )


def placeholder_scene(options: RenderOptions = DEFAULT_OPTIONS) -> Scene:
    grid = dot_grid(
        GRID_UNIT,
        GRID_UNIT,
        CANVAS_WIDTH - GRID_UNIT * 2,
        CANVAS_HEIGHT - GRID_UNIT * 2,
        FAINT,
        density=20,
    )
    return Scene(elements=(grid,), signature=options.signature, placeholder=True)


def poster_scene(identity: SessionIdentity, options: RenderOptions = DEFAULT_OPTIONS) -> Scene:
    index = identity.archetype_index % len(ARCHETYPES)
    template = ARCHETYPES[index]
    paint = Paint(options.fill_saturation, options.fill_lightness)
    elements = tuple(template(identity, paint))
    return Scene(
        elements=elements,
        signature=options.signature,
        metadata={
            "archetype": archetype_name(index),
            "archetype_index": index,
            "seed": identity.seed,
            "resonance": identity.resonance,
        },
    )


def compose_scene(
    levels: Optional[Sequence[Any]],
    progress: Optional[Sequence[Any]],
    session_id: int,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> Scene:
    if not is_renderable(progress, options):
        logger.debug("Session {} still in progress; rendering placeholder", session_id)
        return placeholder_scene(options)
    identity = identity_for(levels, progress, session_id, options)
    logger.debug(
        "Session {} -> archetype {} (seed {}, resonance {}, {})",
        session_id,
        archetype_name(identity.archetype_index),
        identity.seed,
        identity.resonance,
        identity.trajectory.value,
    )
    return poster_scene(identity, options)


def compose_session(session: SessionData, options: RenderOptions = DEFAULT_OPTIONS) -> Scene:
    return compose_scene(session.levels, session.progress, session.id, options)


def render_svg(
    levels: Optional[Sequence[Any]],
    progress: Optional[Sequence[Any]],
    session_id: int,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> str:
    return compose_scene(levels, progress, session_id, options).to_svg()
