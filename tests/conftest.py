"""Shared pytest fixtures for the libgen test suite.

Provides reusable fixtures for:
- A scripted prompter standing in for the terminal
- Temporary destination, global defaults and gradle properties paths
- Fully answered settings and run contexts
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import pytest

from libgen.config import Config
from libgen.questions import Question
from libgen.settings import RunContext, Settings

TODAY = date(2024, 3, 5)


class ScriptedPrompter:
    """Prompter answering from a script instead of the terminal.

    ``script`` maps setting names to an answer, or to a list of answers for
    successive attempts at the same question.  Unscripted questions accept
    their default, as pressing enter would.
    """

    def __init__(self, script: dict[str, Any] | None = None) -> None:
        self.script = {
            name: list(value) if isinstance(value, list) else [value]
            for name, value in (script or {}).items()
        }
        self.asked: list[str] = []
        self.errors: list[str] = []

    def ask(self, question: Question, default: Any) -> Any:
        self.asked.append(question.name)
        queue = self.script.get(question.name)
        if queue:
            return queue.pop(0) if len(queue) > 1 else queue[0]
        return "" if default is None else default

    def error(self, message: str) -> None:
        self.errors.append(message)


# ---------------------------------------------------------------------------
# Paths & configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty destination folder named like the library."""
    path = tmp_path / "my-lib"
    path.mkdir()
    return path


@pytest.fixture
def config(tmp_path: Path, project_dir: Path) -> Config:
    """Offline configuration with every user-level file inside tmp_path."""
    return Config(
        destination=project_dir,
        offline=True,
        global_config_path=tmp_path / "home" / ".libgen-global.json",
        gradle_properties_path=tmp_path / "home" / ".gradle" / "gradle.properties",
    )


@pytest.fixture
def identity_script() -> dict[str, Any]:
    """Answers for the questions without usable defaults on a first run."""
    return {
        "github_user": "octocat",
        "author_name": "Octo Cat",
        "author_email": "octo@example.com",
        "lib_group": "com.acme",
        "lib_desc": "Acme helpers",
        "lib_tags": "a, b ,c",
        "bintray_user": "octo",
        "bintray_repo": "maven",
    }


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def full_settings() -> Settings:
    """Every setting answered."""
    return Settings(
        github_user="octocat",
        author_name="Octo Cat",
        author_email="octo@example.com",
        lib_name="my-lib",
        lib_group="com.acme",
        lib_package="com.acme.my.lib",
        lib_version="0.1.0",
        lib_desc="Acme helpers",
        target_java="1.6",
        lib_tags="a, b ,c",
        bintray_user="octo",
        bintray_repo="maven",
        bintray_sign_files=True,
        maven_central_sync=True,
        enable_quality_checks=True,
    )


@pytest.fixture
def first_run() -> RunContext:
    return RunContext.from_stored(Settings(), generator_version="0.1.0")


@pytest.fixture
def update_run(full_settings: Settings) -> RunContext:
    return RunContext.from_stored(
        full_settings, generator_version="0.1.0", used_generator_version="0.0.9"
    )
