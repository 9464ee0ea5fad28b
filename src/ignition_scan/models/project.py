"""Project-related data models."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

from ignition_scan.models.resource import ProjectResource


class ProjectMetadata(BaseModel):
    """Snapshot of a project's ``project.json``."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    title: str | None = None
    description: str | None = None
    parent: str | None = Field(
        default=None, description="Name of the parent project, not a path",
    )
    enabled: bool = True
    inheritable: bool = True

    @property
    def has_identity(self) -> bool:
        """True when the metadata identifies a real project."""
        return bool(self.title or self.name) or self.parent is not None


class ProjectScanResult(BaseModel):
    """The outcome of scanning one project directory."""

    project_path: str
    project_name: str
    metadata: ProjectMetadata
    resources: list[ProjectResource] = Field(default_factory=list)
    inheritance_chain: list[str] = Field(default_factory=list)
    inherited_resources: list[ProjectResource] = Field(default_factory=list)
    scan_time: float = Field(default=0.0, description="Milliseconds")
    resource_count: int = 0
    warnings: list[str] = Field(default_factory=list)
    last_scanned: str

    @property
    def directory_name(self) -> str:
        return os.path.basename(os.path.normpath(self.project_path))


class CacheEntry(BaseModel):
    """A cached scan result and its expiry bookkeeping (epoch seconds)."""

    result: ProjectScanResult
    last_modified: float
    expires_at: float


class CacheStats(BaseModel):
    """Cache statistics for observability tooling."""

    entries: int = 0
    total_size: int = 0
    hit_rate: float = 0.0
    cache_hits: int = 0
    cache_misses: int = 0
    oldest_entry: str | None = None
    newest_entry: str | None = None
