from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from absolutist_worker.app.settings import Settings
from absolutist_worker.services.composition import RenderOptions


@pytest.mark.parametrize("lightness", [0.0, 100.0, -5.0])
def test_flat_fill_lightness_is_rejected(lightness: float) -> None:
    with pytest.raises(ValidationError):
        Settings(fill_lightness=lightness)


def test_environment_overrides_reach_render_options(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ABSOLUTIST_FILL_LIGHTNESS", "60")
    monkeypatch.setenv("ABSOLUTIST_SIGNATURE", "bauhaus.")
    options = RenderOptions.from_settings(Settings())
    assert options.fill_lightness == 60.0
    assert options.signature == "bauhaus."


def test_ensure_directories_only_creates_artifact_root(tmp_path: Path) -> None:
    settings = Settings(artifact_root=tmp_path / "posters")
    settings.ensure_directories()
    assert [path.name for path in tmp_path.iterdir()] == ["posters"]
    assert not hasattr(settings, "config_dir")
