from __future__ import annotations

from pathlib import Path

import pytest

from absolutist_worker.render import _run


def test_render_cli_session_file(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    scored_session,
) -> None:
    session_file = tmp_path / "session.json"
    session_file.write_text(
        scored_session(3).model_dump_json(by_alias=True), encoding="utf-8"
    )
    output = tmp_path / "out" / "poster.svg"

    path = _run(session_file=session_file, demo_id=None, output=output, artifact_dir=None)

    assert path == output
    assert output.read_text(encoding="utf-8").startswith("<svg")
    captured = capsys.readouterr()
    assert "placeholder   : False" in captured.out
    assert "archetype" in captured.out
    assert "palette" in captured.out


def test_render_cli_demo_defaults_to_artifact_dir(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    artifact_dir = tmp_path / "artifacts"

    path = _run(session_file=None, demo_id=14, output=None, artifact_dir=artifact_dir)

    assert path == artifact_dir / "absolutist-session-14.svg"
    assert path.exists()
    captured = capsys.readouterr()
    assert "session_id    : 14" in captured.out
    assert "artifact_path" in captured.out
