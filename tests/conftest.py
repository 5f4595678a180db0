"""
conftest for python-env tests.
"""

from __future__ import annotations

import os
import shutil
import stat
import sys
from collections.abc import Sequence
from pathlib import Path

import pytest

from python_env.config import Config
from python_env.core import PythonEnv


class FakeRunner:
    """command runner returning canned output instead of spawning processes.

    attributes:
        `outputs: dict[tuple[str, ...], str | None]`
            output per command; commands not listed fail
        `calls: list[tuple[tuple[str, ...], Path | None]]`
            every command run, with its working directory
    """

    def __init__(self, outputs: dict[tuple[str, ...], str | None] | None = None) -> None:
        self.outputs = dict(outputs or {})
        self.calls: list[tuple[tuple[str, ...], Path | None]] = []

    def run(self, command: Sequence[str], cwd: str | Path | None = None) -> str | None:
        key = tuple(command)
        self.calls.append((key, Path(cwd) if cwd is not None else None))
        return self.outputs.get(key)

    def count(self, command: Sequence[str]) -> int:
        return sum(1 for called, _ in self.calls if called == tuple(command))


class FakeWhich:
    """search-path lookup that only knows the given tools, and counts lookups."""

    def __init__(self, *available: str) -> None:
        self.available = set(available)
        self.lookups: list[str] = []

    def __call__(self, name: str) -> str | None:
        self.lookups.append(name)
        if name in self.available:
            return f"/usr/bin/{name}"
        return None


def make_python(venv: Path, executable: bool = True) -> Path:
    """create a fake interpreter inside a virtual environment directory."""
    if sys.platform == "win32":
        python_exe = venv / "Scripts" / "python.exe"
    else:
        python_exe = venv / "bin" / "python"
    python_exe.parent.mkdir(parents=True, exist_ok=True)
    python_exe.write_text("#!/bin/sh\n")
    mode = python_exe.stat().st_mode
    if executable:
        python_exe.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    else:
        python_exe.chmod(mode & ~(stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))
    return python_exe


def has_tool(tool_name: str) -> bool:
    """check if a tool is available on the system path."""
    return shutil.which(tool_name) is not None


# pytest marker for tool availability
requires_uv = pytest.mark.skipif(not has_tool("uv"), reason="uv not available")


@pytest.fixture
def environ() -> dict[str, str]:
    """a process environment isolated from the test runner's."""
    return {"PATH": os.pathsep.join(["/usr/local/bin", "/usr/bin"]), "HOME": "/home/u"}


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def which() -> FakeWhich:
    return FakeWhich("uv", "poetry")


@pytest.fixture
def notes() -> list[str]:
    """collected user notifications."""
    return []


@pytest.fixture
def make_env(runner: FakeRunner, which: FakeWhich, environ: dict[str, str], notes: list[str]):
    """factory for coordinators wired to the fakes."""

    def factory(config: Config | None = None) -> PythonEnv:
        return PythonEnv(
            config,
            runner=runner,
            environ=environ,
            notify=notes.append,
            which=which,
        )

    return factory


@pytest.fixture
def uv_project(tmp_path: Path) -> Path:
    """create a uv project with an in-project .venv."""
    project = tmp_path / "proj"
    project.mkdir()
    (project / "pyproject.toml").write_text("[project]\nname = 'proj'\n")
    (project / "uv.lock").write_text("")
    _ = make_python(project / ".venv")
    return project


@pytest.fixture
def poetry_venv(tmp_path: Path) -> Path:
    """create a poetry-managed environment outside the project."""
    venv = tmp_path / "cache" / "pypoetry" / "virtualenvs" / "proj2-xyz"
    _ = make_python(venv)
    return venv


@pytest.fixture
def poetry_project(tmp_path: Path) -> Path:
    """create a project with only a pyproject.toml."""
    project = tmp_path / "proj2"
    project.mkdir()
    (project / "pyproject.toml").write_text("[tool.poetry]\nname = 'proj2'\n")
    return project
