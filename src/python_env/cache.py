"""
in-memory caches for python-env.

both caches live for the lifetime of the coordinator that owns them:
tool availability is looked up once per name and never expires, and
resolved project environments are only dropped by an explicit clear.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import final

from .models import CachedEnvironment, ResolvedEnvironment, ToolType

logger = logging.getLogger(__name__)

WhichFunction = Callable[[str], "str | None"]


@final
class ToolAvailabilityCache:
    """
    memoised search-path lookups for external tools.

    a tool installed after its first lookup stays unavailable until a new
    cache is created.

    attributes:
        `which: WhichFunction`
            search-path lookup returning the tool's location or none
        `_available: dict[str, bool]`
            first lookup result per tool name
        `_locations: dict[str, str | None]`
            first lookup location per tool name
    """

    which: WhichFunction
    _available: dict[str, bool]
    _locations: dict[str, str | None]

    def __init__(self, which: WhichFunction | None = None) -> None:
        self.which = which or shutil.which
        self._available = {}
        self._locations = {}

    def exists(self, name: str) -> bool:
        """
        check whether a tool is on the search path.

        arguments:
            `name: str`
                executable name, e.g. "uv"

        returns: `bool`
            cached result of the first lookup for `name`
        """
        if name not in self._available:
            location = self.which(name)
            self._locations[name] = location
            self._available[name] = location is not None
            logger.debug("tool %s available: %s", name, self._available[name])
        return self._available[name]

    def location(self, name: str) -> str | None:
        """return where the tool was found, looking it up if needed."""
        _ = self.exists(name)
        return self._locations.get(name)


@final
class ProjectCache:
    """
    resolved environments keyed by project root.

    attributes:
        `_entries: dict[Path, CachedEnvironment]`
            cached environment and tool per project root
    """

    _entries: dict[Path, CachedEnvironment]

    def __init__(self) -> None:
        self._entries = {}

    def __contains__(self, root: object) -> bool:
        return root in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, root: Path) -> CachedEnvironment | None:
        """return the cached environment for a project root, if any."""
        entry = self._entries.get(root)
        logger.debug("project cache %s for: %s", "hit" if entry else "miss", root)
        return entry

    def set(self, root: Path, environment: ResolvedEnvironment, tool: ToolType) -> CachedEnvironment:
        """remember the environment resolved for a project root."""
        entry = CachedEnvironment(environment=environment, tool=tool)
        self._entries[root] = entry
        return entry

    def invalidate(self, root: Path) -> bool:
        """
        forget one project root.

        returns: `bool`
            true if an entry was removed
        """
        return self._entries.pop(root, None) is not None

    def clear(self) -> None:
        """forget every project root."""
        self._entries.clear()
