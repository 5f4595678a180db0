"""
configuration loading for python-env.

this module handles loading and validation of configuration from
the user configuration file, a pyproject.toml `[tool.python-env]` table,
plain dictionaries supplied by a host, and environment variables.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

DEFAULT_PROJECT_FILES = ("pyproject.toml", "poetry.lock", "uv.lock")
DEFAULT_TOOLS = ("uv", "poetry")

_TRUTHY = ("true", "1", "yes")


class PythonEnvError(Exception):
    """base class for python-env errors."""


class ConfigError(PythonEnvError):
    """raised when configuration cannot be read or has the wrong shape."""


def _as_names(value: object, key: str) -> tuple[str, ...]:
    """
    coerce a configured list of names into a tuple of strings.

    arguments:
        `value: object`
            raw value from a dictionary, toml table, or environment
        `key: str`
            configuration key, for error messages

    returns: `tuple[str, ...]`
        names with surrounding whitespace and empty entries removed

    raises: `ConfigError`
        if the value is not a string or a list of strings
    """
    if isinstance(value, str):
        items: Iterable[object] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value  # pyright: ignore[reportUnknownVariableType]
    else:
        raise ConfigError(f"'{key}' must be a list of strings, got {type(value).__name__}")

    names: list[str] = []
    for item in items:
        if not isinstance(item, str):
            raise ConfigError(f"'{key}' must only contain strings, got {type(item).__name__}")
        if stripped := item.strip():
            names.append(stripped)
    return tuple(names)


def _as_bool(value: object, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    raise ConfigError(f"'{key}' must be a boolean, got {type(value).__name__}")


@dataclass(frozen=True)
class Config:
    """
    main configuration class for python-env.

    supplied once when the coordinator is created; never mutated afterwards.

    attributes:
        `project_files: tuple[str, ...]`
            marker filenames searched for, in order, when walking upwards
        `tools: tuple[str, ...]`
            toolchains to try, in order of preference
        `auto_setup: bool`
            activate automatically when the working directory changes
        `notify: bool`
            emit user-facing notifications on activation and restore
        `debug: bool`
            emit debug-level log lines
    """

    project_files: tuple[str, ...] = DEFAULT_PROJECT_FILES
    tools: tuple[str, ...] = DEFAULT_TOOLS
    auto_setup: bool = True
    notify: bool = True
    debug: bool = False

    def __post_init__(self) -> None:
        """Normalise list values into tuples."""
        object.__setattr__(self, "project_files", _as_names(self.project_files, "project_files"))
        object.__setattr__(self, "tools", _as_names(self.tools, "tools"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: Config | None = None) -> Config:
        """
        create configuration from a (possibly partial) dictionary.

        keys missing from `data` keep the value from `base`; unknown keys
        are ignored.

        arguments:
            `data: Mapping[str, Any]`
                configuration dictionary
            `base: Config | None`
                configuration to extend (default: built-in defaults)

        returns: `Config`
            configuration object

        raises: `ConfigError`
            if a value has the wrong type
        """
        base = base or cls()
        values: dict[str, Any] = {f.name: getattr(base, f.name) for f in fields(cls)}

        if "project_files" in data:
            values["project_files"] = _as_names(data["project_files"], "project_files")
        if "tools" in data:
            values["tools"] = _as_names(data["tools"], "tools")
        for key in ("auto_setup", "notify", "debug"):
            if key in data:
                values[key] = _as_bool(data[key], key)

        return cls(**values)

    @classmethod
    def from_toml(cls, path: str | Path, base: Config | None = None) -> Config | None:
        """
        Load configuration from a toml file.

        a file named pyproject.toml is read from its `[tool.python-env]`
        table; any other file is read from its top level.

        arguments:
            `path: str | Path`
                file to read
            `base: Config | None`
                configuration to extend

        returns: `Config | None`
            configuration object if the file exists, none otherwise

        raises: `ConfigError`
            if the file cannot be parsed
        """
        config_file = Path(path)
        if not config_file.is_file():
            return None

        try:
            with open(config_file, "rb") as f:
                data: dict[str, Any] = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"could not read {config_file}: {exc}") from exc

        if config_file.name == "pyproject.toml":
            data = data.get("tool", {}).get("python-env", {})  # pyright: ignore[reportAny]

        return cls.from_dict(data, base)

    @classmethod
    def from_environment(cls, base: Config | None = None) -> Config:
        """
        Load configuration from environment variables.

        returns: `Config`
            configuration with values from environment
        """
        data: dict[str, str] = {}

        if project_files := os.environ.get("PYTHON_ENV_PROJECT_FILES"):
            data["project_files"] = project_files
        if tools := os.environ.get("PYTHON_ENV_TOOLS"):
            data["tools"] = tools
        for key in ("auto_setup", "notify", "debug"):
            if value := os.environ.get(f"PYTHON_ENV_{key.upper()}"):
                data[key] = value

        return cls.from_dict(data, base)

    @classmethod
    def user_config_path(cls) -> Path:
        """return the user configuration file location, respecting xdg config home."""
        base_dir = os.environ.get("XDG_CONFIG_HOME") or Path.home().joinpath(".config")
        return Path(base_dir).joinpath("python-env", "config.toml")

    @classmethod
    def load(cls, config_file: str | Path | None = None) -> Config:
        """
        Load configuration from all available sources.

        sources are loaded in order of priority (later overrides earlier):
        1. default values
        2. user configuration file
        3. environment variables

        arguments:
            `config_file: str | Path | None`
                configuration file to read instead of the user file

        returns: `Config`
            merged configuration from all sources
        """
        config = cls()

        if file_config := cls.from_toml(config_file or cls.user_config_path(), config):
            config = file_config

        return cls.from_environment(config)
