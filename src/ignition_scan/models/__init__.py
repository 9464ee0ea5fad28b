"""Pydantic data models for scanned Ignition projects."""

from ignition_scan.models.project import (
    CacheEntry,
    CacheStats,
    ProjectMetadata,
    ProjectScanResult,
)
from ignition_scan.models.resource import (
    ProjectResource,
    ResourceFile,
    ResourceMetadata,
    ResourceOrigin,
    ResourceTypeDescriptor,
)

__all__ = [
    "CacheEntry",
    "CacheStats",
    "ProjectMetadata",
    "ProjectResource",
    "ProjectScanResult",
    "ResourceFile",
    "ResourceMetadata",
    "ResourceOrigin",
    "ResourceTypeDescriptor",
]
