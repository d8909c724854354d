#!/usr/bin/env python3
"""
Quick smoke test for poster generation across a decade.

Simulates ten finished sessions through the archive manager, renders each
poster to disk, and prints the archetype sequence so contributors can see
that every template shows up exactly once per decade.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "worker" / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a decade of demo posters.")
    parser.add_argument(
        "--start-id",
        type=int,
        default=1,
        help="First session id of the simulated run.",
    )
    parser.add_argument(
        "--artifact-dir",
        type=Path,
        default=Path("~/Pictures/Absolutist/smoke").expanduser(),
        help="Directory where rendered posters should be written.",
    )
    return parser.parse_args()

async def run_smoke(args: argparse.Namespace) -> None:
    from absolutist_worker.app.models import ArchiveState
    from absolutist_worker.app.sessions import ArchiveManager
    from absolutist_worker.app.settings import Settings
    from absolutist_worker.services.composition import RenderOptions, compose_session
    from absolutist_worker.services.deck import decade_for_session
    from absolutist_worker.services.session_generator import next_session

    settings = Settings(artifact_root=args.artifact_dir)
    settings.ensure_directories()
    options = RenderOptions.from_settings(settings)

    manager = ArchiveManager(
        ArchiveState(current_session=next_session(args.start_id)),
        options,
        win_threshold=settings.win_threshold,
    )

    start = time.perf_counter()
    summaries = await manager.simulate_decade()
    rendered: list[dict[str, object]] = []
    for summary in summaries:
        session = await manager.get_session(summary.session_id)
        scene = compose_session(session, options)
        path = settings.artifact_root / f"absolutist-session-{session.id:02d}.svg"
        path.write_text(scene.to_svg(), encoding="utf-8")
        rendered.append(
            {
                "session_id": session.id,
                "archetype": scene.metadata.get("archetype"),
                "placeholder": scene.placeholder,
                "artifact_path": str(path),
            }
        )
    elapsed = time.perf_counter() - start

    print(json.dumps({"posters": rendered, "render_seconds": round(elapsed, 3)}, indent=2))

    seen: set[tuple[int, object]] = set()
    for entry in rendered:
        if entry["placeholder"]:
            continue
        key = (decade_for_session(int(entry["session_id"])), entry["archetype"])
        if key in seen:
            print("Archetype repeated within a decade.", file=sys.stderr)
            sys.exit(3)
        seen.add(key)
    print(f"{len(seen)} posters, no repeats within a decade.", file=sys.stderr)

def main() -> None:
    args = parse_args()
    try:
        asyncio.run(run_smoke(args))
    except KeyboardInterrupt:  # pragma: no cover - operator friendly exit
        print("Cancelled smoke test.", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
