"""
toolchain selection for python-env.

a project's lock file names the toolchain that manages it; projects with
no lock file fall back to the configured order of preference.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import final

from .cache import ToolAvailabilityCache
from .detectors import ToolAdapter
from .models import ResolvedEnvironment, ToolType

logger = logging.getLogger(__name__)

# Lock files that identify the managing toolchain. Order breaks ties
# between tools that are not in the configured preference list.
LOCK_FILES: dict[ToolType, tuple[str, ...]] = {
    ToolType.UV: ("uv.lock",),
    ToolType.POETRY: ("poetry.lock",),
}


def parse_tools(names: Iterable[str]) -> list[ToolType]:
    """
    convert configured tool names into tool types.

    unrecognised names are dropped, duplicates keep their first position.
    """
    tools: list[ToolType] = []
    for name in names:
        tool = ToolType.from_name(name)
        if tool is None:
            logger.debug("ignoring unknown tool: %s", name)
            continue
        if tool not in tools:
            tools.append(tool)
    return tools


def preferred_tool(marker_files: Iterable[str], tool_order: Sequence[ToolType] = ()) -> ToolType | None:
    """
    pick the toolchain whose lock file is among a project's markers.

    arguments:
        `marker_files: Iterable[str]`
            marker filenames found at the project root
        `tool_order: Sequence[ToolType]`
            configured preference, used when several lock files are present

    returns: `ToolType | None`
        the preferred tool, or none if no lock file was found
    """
    present = set(marker_files)
    owners = [tool for tool, lock_files in LOCK_FILES.items() if present.intersection(lock_files)]
    if not owners:
        return None

    ranked = [tool for tool in tool_order if tool in owners]
    ranked.extend(tool for tool in owners if tool not in ranked)
    return ranked[0]


@final
class ToolResolver:
    """
    asks adapters for an environment in preference order.

    attributes:
        `adapters: Mapping[ToolType, ToolAdapter]`
            every registered adapter, keyed by tool
        `availability: ToolAvailabilityCache`
            shared search-path lookup cache
        `tool_order: list[ToolType]`
            configured preference order, unknown names already dropped
    """

    adapters: Mapping[ToolType, ToolAdapter]
    availability: ToolAvailabilityCache
    tool_order: list[ToolType]

    def __init__(
        self,
        adapters: Mapping[ToolType, ToolAdapter],
        availability: ToolAvailabilityCache,
        tools: Iterable[str],
    ) -> None:
        self.adapters = adapters
        self.availability = availability
        self.tool_order = parse_tools(tools)

    def resolve(
        self,
        project_root: Path,
        marker_files: Iterable[str],
        search_path: str,
    ) -> tuple[ResolvedEnvironment, ToolType] | None:
        """
        find the environment for a project.

        a tool whose lock file is present is tried first and wins if it
        produces an environment, regardless of the configured order.

        arguments:
            `project_root: Path`
                project root directory
            `marker_files: Iterable[str]`
                marker filenames found at the root
            `search_path: str`
                inherited search path to prefix

        returns: `tuple[ResolvedEnvironment, ToolType] | None`
            the first environment produced and the tool that produced it
        """
        preferred = preferred_tool(marker_files, self.tool_order)
        attempted: ToolType | None = None
        if preferred is not None:
            logger.debug("lock file prefers %s", preferred.value)
            adapter = self.adapters.get(preferred)
            if adapter is not None and self.availability.exists(preferred.value):
                attempted = preferred
                if env := adapter.try_resolve(project_root, search_path):
                    logger.debug("successfully got environment from %s", preferred.value)
                    return env, preferred

        for tool in self.tool_order:
            adapter = self.adapters.get(tool)
            if adapter is None or tool is attempted:
                continue
            if env := adapter.try_resolve(project_root, search_path):
                logger.debug("successfully got environment from %s", tool.value)
                return env, tool

        return None
