"""
project root discovery for python-env.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from .models import ProjectMarkers

logger = logging.getLogger(__name__)


def find_project_root(
    project_files: Sequence[str],
    start: str | Path | None = None,
) -> ProjectMarkers | None:
    """
    walk upwards from a directory looking for project marker files.

    the search stops at the first directory holding at least one marker;
    every marker present at that level is reported, in the order given by
    `project_files`.

    arguments:
        `project_files: Sequence[str]`
            marker filenames, e.g. ("pyproject.toml", "uv.lock")
        `start: str | Path | None`
            directory to start from (default: current working directory)

    returns: `ProjectMarkers | None`
        the nearest directory with markers, or none if the filesystem root
        is reached without a match
    """
    current = Path(os.path.abspath(start)) if start is not None else Path.cwd()

    while True:
        found = tuple(dict.fromkeys(name for name in project_files if current.joinpath(name).is_file()))
        if found:
            logger.debug("found project files at %s: %s", current, ", ".join(found))
            return ProjectMarkers(root=current, files=found)

        parent = current.parent
        if parent == current:
            return None
        current = parent
