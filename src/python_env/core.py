"""
coordinator for python-env.

`PythonEnv` owns every piece of mutable state (activation session, tool
availability, resolved projects) so independent instances never share
anything but the process environment they are handed.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import MutableMapping
from pathlib import Path

from .activator import EnvironmentActivator, Notifier
from .cache import ProjectCache, ToolAvailabilityCache, WhichFunction
from .config import Config
from .detectors import PoetryAdapter, ToolAdapter, UvAdapter
from .detectors.utils import build_environment
from .locator import find_project_root
from .models import EnvironmentInfo, ProjectMarkers, ToolType
from .resolver import ToolResolver
from .runner import CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)

NOTIFY_PREFIX = "[python-env]"


def log_notification(message: str) -> None:
    """default notification sink: log at info level."""
    logging.getLogger("python_env").info("%s %s", NOTIFY_PREFIX, message)


class PythonEnv:
    """
    detects, resolves, and activates project environments.

    attributes:
        `config: Config`
            configuration settings
        `runner: CommandRunner`
            runs external tool commands
        `availability: ToolAvailabilityCache`
            memoised tool lookups
        `adapters: dict[ToolType, ToolAdapter]`
            registered toolchain adapters
        `resolver: ToolResolver`
            chooses between adapters
        `activator: EnvironmentActivator`
            owns the activation session
        `projects: ProjectCache`
            resolved environment per project root

    logger levels and handlers are left to the host; `config.debug` is
    honoured by the cli, which configures logging before dispatching.
    """

    config: Config
    runner: CommandRunner
    availability: ToolAvailabilityCache
    adapters: dict[ToolType, ToolAdapter]
    resolver: ToolResolver
    activator: EnvironmentActivator
    projects: ProjectCache
    _lock: threading.RLock

    def __init__(
        self,
        config: Config | None = None,
        *,
        runner: CommandRunner | None = None,
        environ: MutableMapping[str, str] | None = None,
        notify: Notifier | None = None,
        which: WhichFunction | None = None,
    ) -> None:
        """
        initialise the coordinator.

        arguments:
            `config: Config | None`
                configuration settings (default: built-in defaults)
            `runner: CommandRunner | None`
                external command runner (default: subprocess)
            `environ: MutableMapping[str, str] | None`
                environment to activate into (default: `os.environ`)
            `notify: Notifier | None`
                user-facing message sink (default: info-level log line on
                the `python_env` logger, invisible until the host configures
                logging at info or below; pass a sink such as `print` for
                direct output)
            `which: WhichFunction | None`
                search-path lookup (default: `shutil.which`)
        """
        self.config = config or Config()
        self.runner = runner or SubprocessRunner()
        self.availability = ToolAvailabilityCache(which)
        self.adapters = {
            ToolType.UV: UvAdapter(self.runner, self.availability),
            ToolType.POETRY: PoetryAdapter(self.runner, self.availability),
        }
        self.resolver = ToolResolver(self.adapters, self.availability, self.config.tools)
        self.activator = EnvironmentActivator(
            os.environ if environ is None else environ,
            (notify or log_notification) if self.config.notify else None,
        )
        self.projects = ProjectCache()
        self._lock = threading.RLock()

        logger.debug("python environment coordinator initialised")

    def locate(self, start: str | Path | None = None) -> ProjectMarkers | None:
        """find the project enclosing `start` (default: current directory)."""
        return find_project_root(self.config.project_files, start)

    def setup_for_current_directory(self, start: str | Path | None = None) -> bool:
        """
        activate the environment of the project enclosing a directory.

        arguments:
            `start: str | Path | None`
                directory to search from (default: current directory)

        returns: `bool`
            true if an environment was activated
        """
        with self._lock:
            markers = self.locate(start)
            if markers is None:
                logger.debug("no python project detected in current directory")
                return False

            logger.debug(
                "found python project at: %s (%s)", markers.root, ", ".join(markers.files)
            )

            if cached := self.projects.get(markers.root):
                # PATH is rebuilt from the search path inherited now
                env = build_environment(
                    cached.environment.virtual_env,
                    cached.environment.python,
                    self.activator.inherited_path(),
                )
                return self.activator.activate(env, cached.tool)

            resolved = self.resolver.resolve(
                markers.root, markers.files, self.activator.inherited_path()
            )
            if resolved is None:
                logger.error("could not determine python environment for project: %s", markers.root)
                return False

            env, tool = resolved
            _ = self.projects.set(markers.root, env, tool)
            return self.activator.activate(env, tool)

    def on_directory_changed(self, directory: str | Path | None = None) -> bool:
        """
        handle a host directory-change event.

        returns: `bool`
            true if an environment was activated; always false when
            automatic setup is disabled
        """
        if not self.config.auto_setup:
            return False
        return self.setup_for_current_directory(directory)

    def restore(self) -> None:
        """restore the environment that existed before the first activation."""
        with self._lock:
            self.activator.restore()

    def get_info(self) -> EnvironmentInfo | None:
        """return the active environment, or none."""
        with self._lock:
            return self.activator.get_info()

    def clear_cache(self, root: str | Path | None = None) -> bool:
        """
        forget the environment cached for one project.

        the active environment is left untouched.

        arguments:
            `root: str | Path | None`
                project root (default: the project enclosing the current directory)

        returns: `bool`
            true if an entry was removed
        """
        with self._lock:
            if root is not None:
                project_root: Path | None = Path(os.path.abspath(root))
            else:
                markers = self.locate()
                project_root = markers.root if markers else None

            if project_root is not None and self.projects.invalidate(project_root):
                logger.debug("cleared cached environment for: %s", project_root)
                self.activator.announce(f"Cache cleared for {project_root}")
                return True

            self.activator.announce("No cached environment to clear")
            return False
