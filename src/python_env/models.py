"""
models for python-env.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import final

ENV_VIRTUAL_ENV = "VIRTUAL_ENV"
ENV_PATH = "PATH"
ENV_PYTHON = "PYTHON"

# variables written on activation and snapshotted for restore
MANAGED_VARIABLES = (ENV_VIRTUAL_ENV, ENV_PATH, ENV_PYTHON)


class ToolType(Enum):
    """
    enumeration of supported python toolchains.

    attributes:
        `UV: str`
            uv package manager
        `POETRY: str`
            poetry package manager
    """

    UV = "uv"
    POETRY = "poetry"

    @classmethod
    def from_name(cls, name: str) -> ToolType | None:
        """return the tool for a configured name, or none if it is not recognised."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


@final
@dataclass(frozen=True)
class ProjectMarkers:
    """
    result of walking upwards for project marker files.

    attributes:
        `root: Path`
            absolute directory holding the markers
        `files: tuple[str, ...]`
            marker filenames present at `root`, in configuration order
    """

    root: Path
    files: tuple[str, ...]


@final
@dataclass(frozen=True)
class ResolvedEnvironment:
    """
    a virtual environment expressed as the variables that activate it.

    attributes:
        `virtual_env: Path`
            virtual environment directory
        `path: str`
            search path with the environment's bin directory prepended
        `python: Path`
            interpreter executable
    """

    virtual_env: Path
    path: str
    python: Path

    def as_environ(self) -> dict[str, str]:
        """return the variables to write into the process environment."""
        return {
            ENV_VIRTUAL_ENV: str(self.virtual_env),
            ENV_PATH: self.path,
            ENV_PYTHON: str(self.python),
        }


@final
@dataclass(frozen=True)
class CachedEnvironment:
    """a resolved environment remembered for a project root."""

    environment: ResolvedEnvironment
    tool: ToolType


@final
@dataclass(frozen=True)
class EnvironmentInfo:
    """
    information about the currently active environment.

    attributes:
        `virtual_env: Path`
            virtual environment directory
        `python: Path`
            interpreter executable
        `path: str`
            search path written on activation
        `tool: ToolType`
            toolchain that produced the environment
    """

    virtual_env: Path
    python: Path
    path: str
    tool: ToolType

    def as_dict(self) -> dict[str, str]:
        return {
            "virtual_env": str(self.virtual_env),
            "python": str(self.python),
            "path": self.path,
            "tool": self.tool.value,
        }
