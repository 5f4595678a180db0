"""
uv virtual environment detector.
"""

from __future__ import annotations

from pathlib import Path
from typing import final

from typing_extensions import override

from ..models import ResolvedEnvironment, ToolType
from .base import ToolAdapter
from .utils import build_environment, get_python_executable, is_executable

UV_FIND_COMMAND = ("uv", "python", "find")


@final
class UvAdapter(ToolAdapter):
    """
    detect uv virtual environment.

    an in-project .venv is used directly; otherwise `uv python find` is
    asked for the interpreter it would use in the project.
    """

    tool = ToolType.UV

    @override
    def _resolve(self, project_root: Path, search_path: str) -> ResolvedEnvironment | None:
        venv_path = project_root.joinpath(".venv")
        if venv_path.is_dir():
            python_exe = get_python_executable(venv_path)
            if python_exe is not None:
                return build_environment(venv_path, python_exe, search_path)

        output = self.runner.run(UV_FIND_COMMAND, cwd=project_root)
        if not output:
            return None

        # relative output is relative to the directory uv ran in
        python_exe = project_root.joinpath(output.splitlines()[0].strip())
        if not is_executable(python_exe):
            return None

        # <venv>/bin/python
        return build_environment(python_exe.parent.parent, python_exe, search_path)
