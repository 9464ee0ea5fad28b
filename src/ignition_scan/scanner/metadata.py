"""Project metadata loader — reads ``project.json`` with safe defaults."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from ignition_scan.models.project import ProjectMetadata

logger = logging.getLogger(__name__)

PROJECT_FILE = "project.json"
RESOURCE_FILE = "resource.json"


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def parse_project_metadata(data: Any) -> ProjectMetadata:
    """Build metadata from decoded ``project.json`` content.

    Fields with an unexpected JSON type are treated as absent.
    """
    if not isinstance(data, dict):
        return ProjectMetadata()

    def text(key: str) -> str | None:
        value = data.get(key)
        return value if isinstance(value, str) else None

    def flag(key: str) -> bool:
        value = data.get(key)
        return value if isinstance(value, bool) else True

    return ProjectMetadata(
        name=text("name"),
        title=text("title"),
        description=text("description"),
        parent=text("parent"),
        enabled=flag("enabled"),
        inheritable=flag("inheritable"),
    )


async def load_project_metadata(project_path: str | Path) -> ProjectMetadata:
    """Read ``project.json`` from *project_path*. Never raises."""
    project_json = Path(project_path) / PROJECT_FILE
    try:
        data = await asyncio.to_thread(_read_json, project_json)
    except (OSError, ValueError, RecursionError) as exc:
        logger.debug("No usable project.json at %s: %s", project_json, exc)
        return ProjectMetadata()
    return parse_project_metadata(data)


async def is_ignition_project(path: str | Path) -> bool:
    """True iff *path* directly contains a ``project.json`` file."""
    project_json = Path(path) / PROJECT_FILE
    try:
        return await asyncio.to_thread(project_json.is_file)
    except OSError:
        return False
