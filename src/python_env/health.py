"""
health check for python-env.

reports which toolchains are installed, whether the directory looks like a
python project, and what environment is currently active.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, final

from .core import PythonEnv
from .models import ToolType

HealthLevel = Literal["ok", "warn", "error", "info"]


@final
@dataclass(frozen=True)
class HealthItem:
    """one line of the health report."""

    level: HealthLevel
    message: str

    def __str__(self) -> str:
        return f"{self.level}: {self.message}"


def check_health(env: PythonEnv, directory: str | Path | None = None) -> list[HealthItem]:
    """
    build a health report.

    arguments:
        `env: PythonEnv`
            coordinator whose tools, configuration and session are inspected
        `directory: str | Path | None`
            directory checked for project files (default: current directory)

    returns: `list[HealthItem]`
        report lines in display order
    """
    items: list[HealthItem] = []
    directory_path = Path(directory) if directory is not None else Path.cwd()

    found_tools: list[str] = []
    for tool in ToolType:
        location = env.availability.location(tool.value)
        if location is not None:
            found_tools.append(tool.value)
            items.append(HealthItem("ok", f"{tool.value} found: {location}"))
        else:
            items.append(HealthItem("warn", f"{tool.value} not found in PATH"))

    if not found_tools:
        supported = ", ".join(tool.value for tool in ToolType)
        items.append(HealthItem("error", f"no supported python environment tools found ({supported})"))
        items.append(HealthItem("info", f"install at least one of: {' or '.join(tool.value for tool in ToolType)}"))
    else:
        items.append(
            HealthItem("ok", f"found {len(found_tools)} supported tool(s): {', '.join(found_tools)}")
        )

    project_files = [name for name in env.config.project_files if directory_path.joinpath(name).is_file()]
    if not project_files:
        items.append(HealthItem("info", "no python project files found in current directory"))
        return items

    items.append(HealthItem("ok", f"python project detected: {', '.join(project_files)}"))

    info = env.get_info()
    if info is None:
        items.append(HealthItem("warn", "no environment currently active"))
        items.append(HealthItem("info", "try running `python-env activate` to activate the environment"))
        return items

    items.append(HealthItem("ok", "environment active:"))
    items.append(HealthItem("info", f"  virtual env: {info.virtual_env}"))
    items.append(HealthItem("info", f"  python: {info.python}"))
    items.append(HealthItem("info", f"  tool: {info.tool.value}"))
    return items
