"""
process environment activation for python-env.

the first activation of a session snapshots the managed variables; every
later activation overwrites them again, and restore writes the snapshot
back and ends the session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass
from typing import final

from .models import ENV_PATH, MANAGED_VARIABLES, EnvironmentInfo, ResolvedEnvironment, ToolType

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


@dataclass
class ActivationState:
    """
    bookkeeping for one activation session.

    attributes:
        `original: dict[str, str | None]`
            managed variables as they were before the session, none if unset
        `active: ResolvedEnvironment`
            the environment currently applied
        `tool: ToolType`
            the toolchain that produced `active`
    """

    original: dict[str, str | None]
    active: ResolvedEnvironment
    tool: ToolType


@final
class EnvironmentActivator:
    """
    applies resolved environments to a process environment.

    attributes:
        `environ: MutableMapping[str, str]`
            environment written to, usually `os.environ`
        `notify: Notifier | None`
            user-facing message sink, none to stay quiet
        `state: ActivationState | None`
            the running session, none when nothing is active
    """

    environ: MutableMapping[str, str]
    notify: Notifier | None
    state: ActivationState | None

    def __init__(self, environ: MutableMapping[str, str], notify: Notifier | None = None) -> None:
        self.environ = environ
        self.notify = notify
        self.state = None

    @property
    def is_active(self) -> bool:
        return self.state is not None

    def inherited_path(self) -> str:
        """return the search path as it was before the session, or the current one."""
        if self.state is not None:
            return self.state.original.get(ENV_PATH) or ""
        return self.environ.get(ENV_PATH, "")

    def activate(self, env: ResolvedEnvironment | None, tool: ToolType) -> bool:
        """
        write an environment into the process environment.

        arguments:
            `env: ResolvedEnvironment | None`
                environment to apply
            `tool: ToolType`
                toolchain that produced it

        returns: `bool`
            false if there was nothing to apply
        """
        if env is None:
            return False

        if self.state is None:
            original = {key: self.environ.get(key) for key in MANAGED_VARIABLES}
            self.state = ActivationState(original=original, active=env, tool=tool)

        for key, value in env.as_environ().items():
            self.environ[key] = value

        self.state.active = env
        self.state.tool = tool
        logger.debug("activated %s environment: %s", tool.value, env.virtual_env)
        self.announce(f"Environment activated using {tool.value} ({env.virtual_env})")
        return True

    def restore(self) -> None:
        """write the pre-session variables back and end the session."""
        if self.state is None:
            return

        for key, value in self.state.original.items():
            if value is None:
                _ = self.environ.pop(key, None)
            else:
                self.environ[key] = value

        self.state = None
        logger.debug("restored original environment")
        self.announce("Environment restored")

    def get_info(self) -> EnvironmentInfo | None:
        """return the active environment, or none outside a session."""
        if self.state is None:
            return None

        active = self.state.active
        return EnvironmentInfo(
            virtual_env=active.virtual_env,
            python=active.python,
            path=active.path,
            tool=self.state.tool,
        )

    def announce(self, message: str) -> None:
        """send a user-facing message if notifications are enabled."""
        if self.notify is not None:
            self.notify(message)
