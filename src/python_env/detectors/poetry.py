"""
poetry virtual environment detector.
"""

from __future__ import annotations

from pathlib import Path
from typing import final

from typing_extensions import override

from ..models import ResolvedEnvironment, ToolType
from .base import ToolAdapter
from .utils import build_environment, get_python_executable

POETRY_ENV_COMMAND = ("poetry", "env", "info", "--path")


@final
class PoetryAdapter(ToolAdapter):
    """
    detect poetry virtual environment.

    poetry keeps its environments outside the project by default, so the
    location is always taken from `poetry env info --path`.
    """

    tool = ToolType.POETRY

    @override
    def _resolve(self, project_root: Path, search_path: str) -> ResolvedEnvironment | None:
        output = self.runner.run(POETRY_ENV_COMMAND, cwd=project_root)
        if not output:
            return None

        first_line = next((line.strip() for line in output.splitlines() if line.strip()), None)
        if first_line is None:
            return None

        venv_path = Path(first_line)
        if not venv_path.is_dir():
            return None

        python_exe = get_python_executable(venv_path)
        if python_exe is None:
            return None

        return build_environment(venv_path, python_exe, search_path)
