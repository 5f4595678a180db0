"""
python-env: project-aware python environment activation.

this package finds the nearest uv or poetry project above a directory,
asks the managing toolchain where its virtual environment lives, and
writes VIRTUAL_ENV, PATH and PYTHON so spawned processes use it.

classes:
    `PythonEnv`
        coordinator exposing setup, restore, info and cache clearing
    `Config`
        configuration settings
"""

from __future__ import annotations

from .config import Config, ConfigError, PythonEnvError
from .core import PythonEnv
from .health import HealthItem, check_health
from .locator import find_project_root
from .models import EnvironmentInfo, ProjectMarkers, ResolvedEnvironment, ToolType
from .runner import CommandRunner, SubprocessRunner

__version__ = "0.1.0"
__all__ = [
    "PythonEnv",
    "Config",
    "ConfigError",
    "PythonEnvError",
    "HealthItem",
    "check_health",
    "find_project_root",
    "EnvironmentInfo",
    "ProjectMarkers",
    "ResolvedEnvironment",
    "ToolType",
    "CommandRunner",
    "SubprocessRunner",
]
