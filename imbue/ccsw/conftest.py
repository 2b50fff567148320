import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def isolate_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point HOME at a temporary directory and chdir into it.

    The credential store lives under ~ and the settings file under the current
    directory, so this keeps every test away from real user files.
    """
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    yield
    # CLI commands install sinks pointing into tmp_path; drop them between tests
    logger.remove()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


def write_settings_fixture(project_dir: Path, settings: Any) -> Path:
    """Write raw settings content for a test, creating .claude/ as needed."""
    settings_path = project_dir / ".claude" / "settings.json"
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(settings, str):
        settings_path.write_text(settings)
    else:
        settings_path.write_text(json.dumps(settings, indent=2) + "\n")
    return settings_path


def read_settings_fixture(project_dir: Path) -> Any:
    return json.loads((project_dir / ".claude" / "settings.json").read_text())
