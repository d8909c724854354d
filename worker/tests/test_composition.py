from __future__ import annotations

import xml.etree.ElementTree as ET

from absolutist_worker.services.archetypes import archetype_name
from absolutist_worker.services.composition import (
    RenderOptions,
    compose_scene,
    compose_session,
    is_renderable,
    render_svg,
)
from absolutist_worker.services.deck import deck_for_decade
from absolutist_worker.services.scene import FAINT, Circle, fmt, hsl_color

SVG_NS = "{http://www.w3.org/2000/svg}"


def test_completion_gate_counts_positive_scores_only() -> None:
    assert not is_renderable([80] * 19 + [None])
    assert not is_renderable([80] * 19 + [0])
    assert is_renderable([80] * 20)
    assert not is_renderable(None)
    assert is_renderable([80] * 10, RenderOptions(completion_threshold=10))


def test_incomplete_session_renders_placeholder_regardless_of_flag(scored_session) -> None:
    session = scored_session(5)
    session.progress[7] = None
    session.is_complete = True
    scene = compose_session(session)
    assert scene.placeholder
    dots = scene.primitives()
    assert dots and all(isinstance(dot, Circle) and dot.fill == FAINT for dot in dots)


def test_unscored_session_renders_placeholder() -> None:
    scene = compose_scene([], [None] * 20, 1)
    assert scene.placeholder
    assert "archetype" not in scene.metadata


def test_first_session_uses_first_card_of_first_decade(scored_session) -> None:
    scene = compose_session(scored_session(1))
    assert not scene.placeholder
    assert scene.metadata["archetype"] == archetype_name(deck_for_decade(0)[0])
    assert scene.metadata["resonance"] == 80


def test_a_decade_of_sessions_shows_every_archetype(scored_session) -> None:
    names = {compose_session(scored_session(session_id)).metadata["archetype"] for session_id in range(21, 31)}
    assert len(names) == 10


def test_render_is_byte_identical_across_calls(scored_session) -> None:
    session = scored_session(14, score=91)
    first = render_svg(session.levels, session.progress, session.id)
    second = render_svg(session.levels, session.progress, session.id)
    assert first == second


def test_svg_document_is_well_formed(scored_session) -> None:
    for session_id in range(1, 11):
        session = scored_session(session_id)
        root = ET.fromstring(render_svg(session.levels, session.progress, session.id))
        assert root.tag == f"{SVG_NS}svg"
        assert root.attrib["viewBox"] == "0 0 240 320"
        texts = root.findall(f"{SVG_NS}text")
        assert texts and texts[0].text == "the absolutist."


def test_signature_can_be_disabled(scored_session) -> None:
    session = scored_session(2)
    svg = compose_session(session, RenderOptions(signature=None)).to_svg()
    assert "<text" not in svg


def test_number_and_colour_formatting() -> None:
    assert fmt(12.0) == "12"
    assert fmt(-0.0001) == "0"
    assert fmt(1.23456) == "1.235"
    assert hsl_color(-30) == "hsl(330, 82%, 46%)"
    assert hsl_color(400.4, 50, 50) == "hsl(40, 50%, 50%)"
