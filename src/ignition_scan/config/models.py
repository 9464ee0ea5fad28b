"""Pydantic models for scanner configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from ignition_scan.config.constants import (
    DEFAULT_BATCH_CONCURRENCY,
    DEFAULT_CACHE_TTL,
    DEFAULT_DEBOUNCE,
)
from ignition_scan.models.resource import ResourceTypeDescriptor

OUTPUT_FORMATS = ("table", "json", "yaml", "csv")


class ScannerSettings(BaseModel):
    """Tunables for the project scanner service."""

    cache_ttl_seconds: float = Field(
        default=DEFAULT_CACHE_TTL, gt=0, description="Cache entry lifetime",
    )
    debounce_seconds: float = Field(
        default=DEFAULT_DEBOUNCE, ge=0,
        description="Quiet period before a file change invalidates the cache",
    )
    batch_concurrency: int = Field(
        default=DEFAULT_BATCH_CONCURRENCY, ge=1, le=32,
        description="Projects scanned at the same time in a batch",
    )
    watch: bool = Field(default=True, description="Watch scanned projects for changes")


class ScanConfig(BaseModel):
    """Root configuration model."""

    project_paths: list[str] = Field(default_factory=list)
    default_format: str = "table"
    scanner: ScannerSettings = Field(default_factory=ScannerSettings)
    resource_types: list[ResourceTypeDescriptor] = Field(
        default_factory=list,
        description="Extra resource types registered on top of the built-ins",
    )

    @field_validator("default_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"Format must be one of: {', '.join(OUTPUT_FORMATS)}")
        return v
