"""
common interface for toolchain adapters.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from ..cache import ToolAvailabilityCache
from ..models import ResolvedEnvironment, ToolType
from ..runner import CommandRunner

logger = logging.getLogger(__name__)


class ToolAdapter(ABC):
    """
    locates the virtual environment a toolchain manages for a project.

    subclasses set `tool` and implement `_resolve`; availability of the
    toolchain's executable is checked here, before any filesystem or
    process work.

    attributes:
        `tool: ToolType`
            the toolchain this adapter speaks for
        `runner: CommandRunner`
            used for every external command
        `availability: ToolAvailabilityCache`
            shared search-path lookup cache
    """

    tool: ToolType
    runner: CommandRunner
    availability: ToolAvailabilityCache

    def __init__(self, runner: CommandRunner, availability: ToolAvailabilityCache) -> None:
        self.runner = runner
        self.availability = availability

    def is_available(self) -> bool:
        """check whether the toolchain's executable is on the search path."""
        return self.availability.exists(self.tool.value)

    def try_resolve(self, project_root: Path, search_path: str) -> ResolvedEnvironment | None:
        """
        find the toolchain's environment for a project.

        arguments:
            `project_root: Path`
                project root directory
            `search_path: str`
                inherited search path to prefix with the environment's bin directory

        returns: `ResolvedEnvironment | None`
            the environment, or none if the toolchain is unavailable or has
            no usable environment for this project
        """
        if not self.is_available():
            return None

        logger.debug("trying %s for environment setup", self.tool.value)
        return self._resolve(project_root, search_path)

    @abstractmethod
    def _resolve(self, project_root: Path, search_path: str) -> ResolvedEnvironment | None:
        raise NotImplementedError
