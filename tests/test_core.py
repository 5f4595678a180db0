"""
tests for the PythonEnv coordinator.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest
from conftest import FakeRunner, FakeWhich

from python_env.config import Config
from python_env.core import PythonEnv
from python_env.detectors.poetry import POETRY_ENV_COMMAND
from python_env.detectors.uv import UV_FIND_COMMAND
from python_env.models import ToolType

ORIGINAL_PATH = os.pathsep.join(["/usr/local/bin", "/usr/bin"])


class TestSetupForCurrentDirectory:
    """end-to-end tests for setup_for_current_directory."""

    def test_uv_project_from_subdirectory(self, make_env, uv_project: Path, environ: dict[str, str]) -> None:
        """test activation of a uv project found from a nested directory."""
        start = uv_project / "sub" / "dir"
        start.mkdir(parents=True)
        env: PythonEnv = make_env()

        assert env.setup_for_current_directory(start) is True

        venv = uv_project / ".venv"
        assert environ["VIRTUAL_ENV"] == str(venv)
        assert environ["PYTHON"] == str(venv / "bin" / "python")
        assert environ["PATH"] == f"{venv / 'bin'}{os.pathsep}{ORIGINAL_PATH}"

        info = env.get_info()
        assert info is not None
        assert info.tool == ToolType.UV

    def test_poetry_project_without_uv(
        self,
        runner: FakeRunner,
        environ: dict[str, str],
        notes: list[str],
        poetry_project: Path,
        poetry_venv: Path,
    ) -> None:
        """test activation through poetry when uv is not installed."""
        runner.outputs[POETRY_ENV_COMMAND] = str(poetry_venv)
        env = PythonEnv(runner=runner, environ=environ, notify=notes.append, which=FakeWhich("poetry"))

        assert env.setup_for_current_directory(poetry_project) is True

        assert environ["VIRTUAL_ENV"] == str(poetry_venv)
        info = env.get_info()
        assert info is not None
        assert info.tool == ToolType.POETRY
        assert runner.calls == [(POETRY_ENV_COMMAND, poetry_project)]

    def test_no_project(self, make_env, tmp_path: Path, environ: dict[str, str]) -> None:
        """test that nothing is activated outside a project."""
        before = dict(environ)
        env: PythonEnv = make_env(Config(project_files=("no-such-marker-file.toml",)))

        assert env.setup_for_current_directory(tmp_path) is False

        assert environ == before
        assert env.get_info() is None
        assert env.activator.state is None

    def test_no_environment_found(
        self, make_env, poetry_project: Path, environ: dict[str, str], caplog: pytest.LogCaptureFixture
    ) -> None:
        """test that a project without an environment is reported, not raised."""
        before = dict(environ)
        env: PythonEnv = make_env()

        with caplog.at_level(logging.ERROR, logger="python_env.core"):
            assert env.setup_for_current_directory(poetry_project) is False

        assert environ == before
        assert "could not determine python environment" in caplog.text
        assert poetry_project not in env.projects

    def test_switching_projects_does_not_stack_paths(
        self, make_env, tmp_path: Path, uv_project: Path, environ: dict[str, str]
    ) -> None:
        """test that the second project's path is built on the pre-session path."""
        from conftest import make_python

        other = tmp_path / "other"
        other.mkdir()
        (other / "uv.lock").write_text("")
        _ = make_python(other / ".venv")
        env: PythonEnv = make_env()

        assert env.setup_for_current_directory(uv_project)
        assert env.setup_for_current_directory(other)

        assert environ["PATH"] == f"{other / '.venv' / 'bin'}{os.pathsep}{ORIGINAL_PATH}"

        env.restore()
        assert environ["PATH"] == ORIGINAL_PATH
        assert "VIRTUAL_ENV" not in environ


class TestProjectCaching:
    """tests for the per-project cache layer."""

    def test_second_setup_served_from_cache(
        self,
        runner: FakeRunner,
        environ: dict[str, str],
        notes: list[str],
        poetry_project: Path,
        poetry_venv: Path,
    ) -> None:
        """test that adapters run once but both setups notify."""
        runner.outputs[POETRY_ENV_COMMAND] = str(poetry_venv)
        env = PythonEnv(runner=runner, environ=environ, notify=notes.append, which=FakeWhich("poetry"))

        assert env.setup_for_current_directory(poetry_project) is True
        assert env.setup_for_current_directory(poetry_project / ".") is True

        assert runner.count(POETRY_ENV_COMMAND) == 1
        activations = [note for note in notes if note.startswith("Environment activated")]
        assert len(activations) == 2

    def test_cache_hit_uses_current_search_path(
        self, make_env, uv_project: Path, environ: dict[str, str]
    ) -> None:
        """test that a cached project is prefixed onto the search path in effect now."""
        env: PythonEnv = make_env()
        assert env.setup_for_current_directory(uv_project) is True
        env.restore()

        changed_path = os.pathsep.join(["/opt/new/bin", "/usr/bin"])
        environ["PATH"] = changed_path
        assert env.setup_for_current_directory(uv_project) is True

        assert environ["PATH"] == f"{uv_project / '.venv' / 'bin'}{os.pathsep}{changed_path}"
        info = env.get_info()
        assert info is not None
        assert info.path == environ["PATH"]

    def test_clear_cache_forces_resolution(
        self,
        runner: FakeRunner,
        environ: dict[str, str],
        notes: list[str],
        poetry_project: Path,
        poetry_venv: Path,
    ) -> None:
        """test that clearing a root makes the next setup resolve again."""
        runner.outputs[POETRY_ENV_COMMAND] = str(poetry_venv)
        env = PythonEnv(runner=runner, environ=environ, notify=notes.append, which=FakeWhich("poetry"))

        _ = env.setup_for_current_directory(poetry_project)
        assert env.clear_cache(poetry_project) is True
        _ = env.setup_for_current_directory(poetry_project)

        assert runner.count(POETRY_ENV_COMMAND) == 2

    def test_clear_cache_only_touches_one_root(self, make_env, tmp_path: Path, uv_project: Path) -> None:
        """test that other roots stay cached and the session stays active."""
        from conftest import make_python

        other = tmp_path / "other"
        other.mkdir()
        (other / "uv.lock").write_text("")
        _ = make_python(other / ".venv")
        env: PythonEnv = make_env()
        _ = env.setup_for_current_directory(uv_project)
        _ = env.setup_for_current_directory(other)

        assert env.clear_cache(uv_project) is True

        assert uv_project not in env.projects
        assert other in env.projects
        assert env.get_info() is not None

    def test_clear_cache_nothing_to_clear(self, make_env, tmp_path: Path, notes: list[str]) -> None:
        """test that clearing an unknown root reports it."""
        env: PythonEnv = make_env()

        assert env.clear_cache(tmp_path) is False
        assert notes == ["No cached environment to clear"]

    def test_clear_cache_defaults_to_current_project(
        self, make_env, uv_project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """test that the project around the cwd is cleared by default."""
        env: PythonEnv = make_env()
        _ = env.setup_for_current_directory(uv_project)
        monkeypatch.chdir(uv_project)

        assert env.clear_cache() is True
        assert len(env.projects) == 0


class TestRestoreAndInfo:
    """tests for restore and get_info."""

    def test_restore_without_activation(self, make_env, environ: dict[str, str]) -> None:
        """test that restore is a harmless no-op."""
        before = dict(environ)
        env: PythonEnv = make_env()

        env.restore()

        assert environ == before

    def test_restore_after_activation(self, make_env, uv_project: Path, environ: dict[str, str]) -> None:
        """test that restore returns to the original environment."""
        before = dict(environ)
        env: PythonEnv = make_env()
        _ = env.setup_for_current_directory(uv_project)

        env.restore()

        assert environ == before
        assert env.get_info() is None


class TestConfiguration:
    """tests for configuration-driven behaviour."""

    def test_notifications_disabled(self, runner: FakeRunner, environ: dict[str, str], uv_project: Path) -> None:
        """test that notify=False silences the sink."""
        notes: list[str] = []
        env = PythonEnv(
            Config(notify=False), runner=runner, environ=environ, notify=notes.append, which=FakeWhich("uv")
        )

        assert env.setup_for_current_directory(uv_project) is True
        env.restore()

        assert notes == []

    def test_auto_setup_enabled(self, make_env, uv_project: Path) -> None:
        """test that directory changes trigger setup."""
        env: PythonEnv = make_env()

        assert env.on_directory_changed(uv_project) is True

    def test_auto_setup_disabled(self, make_env, uv_project: Path, environ: dict[str, str]) -> None:
        """test that directory changes are ignored when auto setup is off."""
        env: PythonEnv = make_env(Config(auto_setup=False))

        assert env.on_directory_changed(uv_project) is False
        assert "VIRTUAL_ENV" not in environ

    def test_tools_order_respected(
        self,
        runner: FakeRunner,
        environ: dict[str, str],
        poetry_project: Path,
        poetry_venv: Path,
    ) -> None:
        """test that without lock files the configured order decides."""
        from conftest import make_python

        _ = make_python(poetry_project / ".venv")
        runner.outputs[POETRY_ENV_COMMAND] = str(poetry_venv)
        env = PythonEnv(
            Config(tools=("poetry", "uv")), runner=runner, environ=environ, which=FakeWhich("uv", "poetry")
        )

        assert env.setup_for_current_directory(poetry_project) is True

        info = env.get_info()
        assert info is not None
        assert info.tool == ToolType.POETRY
        assert runner.count(UV_FIND_COMMAND) == 0

    def test_independent_instances(self, runner: FakeRunner, uv_project: Path) -> None:
        """test that coordinators do not share state."""
        first_environ = {"PATH": "/usr/bin"}
        second_environ = {"PATH": "/usr/bin"}
        first = PythonEnv(runner=runner, environ=first_environ, which=FakeWhich("uv"))
        second = PythonEnv(runner=runner, environ=second_environ, which=FakeWhich("uv"))

        _ = first.setup_for_current_directory(uv_project)

        assert second.get_info() is None
        assert len(second.projects) == 0
        assert "VIRTUAL_ENV" not in second_environ

    def test_debug_does_not_change_logger_levels(self, runner: FakeRunner) -> None:
        """test that debug=True on one coordinator leaves package loggers alone."""
        logger = logging.getLogger("python_env")
        previous = logger.level
        try:
            logger.setLevel(logging.WARNING)
            _ = PythonEnv(Config(debug=True), runner=runner, environ={}, which=FakeWhich())
            _ = PythonEnv(Config(debug=False), runner=runner, environ={}, which=FakeWhich())

            assert logger.level == logging.WARNING
            assert not logging.getLogger("python_env.core").isEnabledFor(logging.DEBUG)
        finally:
            logger.setLevel(previous)

    def test_default_notifications_are_logged(
        self, runner: FakeRunner, uv_project: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """test that the default sink logs prefixed messages at info level."""
        env = PythonEnv(runner=runner, environ={"PATH": "/usr/bin"}, which=FakeWhich("uv"))

        with caplog.at_level(logging.INFO, logger="python_env"):
            assert env.setup_for_current_directory(uv_project) is True

        records = [r for r in caplog.records if r.name == "python_env" and r.levelno == logging.INFO]
        assert any(r.getMessage().startswith("[python-env] Environment activated using uv") for r in records)
