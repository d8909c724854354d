"""
CLI entry point to render a session poster as SVG.

Example:
    uv run --project worker python -m absolutist_worker.render --session-file session.json
    uv run --project worker python -m absolutist_worker.render --demo-id 14 --output poster.svg
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Optional

from .app.models import SessionData
from .app.settings import Settings
from .services.composition import RenderOptions, compose_session, identity_for
from .services.session_generator import next_session, simulated_progress


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render an Absolutist session poster.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--session-file",
        type=Path,
        default=None,
        help="JSON file holding one session record.",
    )
    source.add_argument(
        "--demo-id",
        type=int,
        default=None,
        help="Generate a finished demo session with this id and synthetic scores.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Destination SVG path (defaults to the artifact directory).",
    )
    parser.add_argument(
        "--artifact-dir",
        type=Path,
        default=None,
        help="Override artifact directory (defaults to worker settings).",
    )
    return parser.parse_args()


def _load_session(session_file: Optional[Path], demo_id: Optional[int]) -> SessionData:
    if session_file is not None:
        raw = json.loads(session_file.read_text(encoding="utf-8"))
        return SessionData.model_validate(raw)
    session = next_session(demo_id or 1)
    session.progress = simulated_progress(session.id)
    session.is_complete = True
    return session


def _run(
    *,
    session_file: Optional[Path],
    demo_id: Optional[int],
    output: Optional[Path],
    artifact_dir: Optional[Path],
) -> Path:
    settings_kwargs: dict[str, object] = {}
    if artifact_dir is not None:
        settings_kwargs["artifact_root"] = artifact_dir
    settings = Settings(**settings_kwargs)
    options = RenderOptions.from_settings(settings)

    session = _load_session(session_file, demo_id)
    scene = compose_session(session, options)
    if output is None:
        settings.artifact_root.mkdir(parents=True, exist_ok=True)
        output = settings.artifact_root / f"absolutist-session-{session.id:02d}.svg"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(scene.to_svg(), encoding="utf-8")

    print(f"session_id    : {session.id}")
    print(f"name          : {session.name}")
    print(f"artifact_path : {output}")
    print(f"placeholder   : {scene.placeholder}")
    if not scene.placeholder:
        identity = identity_for(session.levels, session.progress, session.id, options)
        print(f"archetype     : {scene.metadata.get('archetype')}")
        print(f"resonance     : {identity.resonance}")
        print(f"trajectory    : {identity.trajectory.value}")
        print(f"palette       : {', '.join(f'{hue:.0f}' for hue in identity.palette)}")
    return output


def main() -> None:
    args = _parse_args()
    _run(
        session_file=args.session_file,
        demo_id=args.demo_id,
        output=args.output,
        artifact_dir=args.artifact_dir,
    )


if __name__ == "__main__":
    main()
