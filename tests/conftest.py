"""Shared pytest fixtures for the cf-tui test suite."""

import sys
from pathlib import Path
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from cftui.client import CodeforcesClient
from cftui.models import Contest, Problem, ScriptSet, Settings, Template
from cftui.storage import Storage
from cftui.tui import tasks
from cftui.tui.context import Context


class TaskRecorder:
    """Stands in for tasks.spawn: records targets and runs them on demand."""

    def __init__(self) -> None:
        self.pending: list[tuple[Callable[..., Any], tuple]] = []
        self.names: list[str] = []

    def __call__(self, target: Callable[..., Any], *args: Any, name: str = "cftui-task") -> MagicMock:
        self.pending.append((target, args))
        self.names.append(name)
        return MagicMock()

    def run_all(self) -> None:
        while self.pending:
            target, args = self.pending.pop(0)
            target(*args)


@pytest.fixture
def task_recorder(monkeypatch) -> TaskRecorder:
    """Background tasks are recorded instead of started; call run_all() to run them."""
    recorder = TaskRecorder()
    monkeypatch.setattr(tasks, "spawn", recorder)
    return recorder


@pytest.fixture
def sample_contest() -> Contest:
    """Returns a finished contest with id 42."""
    return Contest(
        id=42,
        name="Codeforces Round #42 (Div. 2)",
        type="CF",
        phase="FINISHED",
        frozen=False,
        duration_seconds=7200,
        start_time_seconds=1700000000,
    )


@pytest.fixture
def sample_problems() -> list[Problem]:
    """Returns the problems of contest 42, the last one interactive."""
    return [
        Problem(index="A", name="Two Buttons", contest_id=42, tags=("math",)),
        Problem(index="B", name="Game of Stones", contest_id=42, tags=("greedy", "sortings")),
        Problem(index="C", name="Guess the Number", contest_id=42, tags=("interactive",)),
    ]


@pytest.fixture
def python_scripts() -> ScriptSet:
    """Commands that run a .py source with the current interpreter."""
    return ScriptSet(script=f'"{sys.executable}" "<% full %>"')


@pytest.fixture
def home_dir(tmp_path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def tmp_storage(tmp_path) -> Storage:
    """Returns a Storage instance using a temporary directory."""
    return Storage(base_path=tmp_path / "config")


@pytest.fixture
def settings(home_dir, python_scripts) -> Settings:
    """Returns fully configured settings rooted at a temporary home_dir."""
    return Settings(
        username="tourist",
        home_dir=home_dir,
        templates=[Template(alias="Python", lang="python", path="main.py")],
        commands={"py": python_scripts},
    )


@pytest.fixture
def mock_client() -> MagicMock:
    """Returns a MagicMock for CodeforcesClient."""
    return MagicMock(spec=CodeforcesClient)


@pytest.fixture
def context(settings, tmp_storage, mock_client) -> Context:
    """Returns a Context over temporary settings and a mocked client."""
    return Context(settings=settings, storage=tmp_storage, client=mock_client, timeout=2.0)
