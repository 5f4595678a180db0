"""
utility functions for detectors.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from ..models import ResolvedEnvironment


def get_bin_dir(venv_path: Path) -> Path:
    """
    get the directory holding a virtual environment's executables.

    handles cross-platform differences between windows and unix.
    """
    if sys.platform == "win32":
        return venv_path.joinpath("Scripts")
    return venv_path.joinpath("bin")


def get_python_executable(venv_path: Path) -> Path | None:
    """
    get the python executable path for a virtual environment.

    arguments:
        `venv_path: Path`
            path to the virtual environment

    returns: `Path | None`
        path to python executable, or none if it is missing or not executable
    """
    name = "python.exe" if sys.platform == "win32" else "python"
    python_exe = get_bin_dir(venv_path).joinpath(name)

    if is_executable(python_exe):
        return python_exe

    return None


def is_executable(path: Path) -> bool:
    """check that a path is a file the current user may execute."""
    return path.is_file() and os.access(path, os.X_OK)


def build_environment(venv_path: Path, python_exe: Path, search_path: str) -> ResolvedEnvironment:
    """
    express a virtual environment as the variables that activate it.

    arguments:
        `venv_path: Path`
            virtual environment directory
        `python_exe: Path`
            interpreter inside the environment
        `search_path: str`
            inherited search path to prefix

    returns: `ResolvedEnvironment`
        environment with the interpreter's directory prepended to the search path
    """
    bin_dir = str(python_exe.parent)
    path = f"{bin_dir}{os.pathsep}{search_path}" if search_path else bin_dir
    return ResolvedEnvironment(virtual_env=venv_path, path=path, python=python_exe)
