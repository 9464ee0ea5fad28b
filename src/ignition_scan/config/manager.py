"""Configuration manager — read/write TOML config, resolve project paths."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import ValidationError

from ignition_scan.config.constants import (
    CONFIG_FILE,
    ENV_CONFIG_PATH,
    ENV_PROJECT_PATHS,
)
from ignition_scan.config.models import ScanConfig, ScannerSettings
from ignition_scan.scanner.errors import ConfigurationError

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib


class ConfigManager:
    """Manages scanner configuration on disk and resolves project paths."""

    def __init__(self, config_path: Path | None = None) -> None:
        env_path = os.environ.get(ENV_CONFIG_PATH)
        self.config_path = config_path or (Path(env_path) if env_path else CONFIG_FILE)
        self._config: ScanConfig | None = None

    @property
    def config(self) -> ScanConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> ScanConfig:
        if not self.config_path.exists():
            return ScanConfig()
        try:
            data = tomllib.loads(self.config_path.read_bytes().decode())
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationError(
                f"Cannot read config file {self.config_path}: {exc}"
            ) from exc
        try:
            return ScanConfig(
                project_paths=data.get("project_paths", []),
                default_format=data.get("default_format", "table"),
                scanner=ScannerSettings(**data.get("scanner", {})),
                resource_types=data.get("resource_types", []),
            )
        except (ValidationError, TypeError) as exc:
            raise ConfigurationError(
                f"Invalid config file {self.config_path}: {exc}"
            ) from exc

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        data: dict[str, Any] = {}
        if self.config.project_paths:
            data["project_paths"] = list(self.config.project_paths)
        if self.config.default_format != "table":
            data["default_format"] = self.config.default_format
        # Only non-default settings are written.
        scanner = self.config.scanner.model_dump(exclude_defaults=True)
        if scanner:
            data["scanner"] = scanner
        if self.config.resource_types:
            data["resource_types"] = [
                t.model_dump(exclude_defaults=True) for t in self.config.resource_types
            ]
        # Atomic write: write to temp file, then rename
        temp = self.config_path.with_suffix(".tmp")
        temp.write_text(tomli_w.dumps(data), encoding="utf-8")
        temp.replace(self.config_path)

    def add_project_path(self, path: str) -> bool:
        if path in self.config.project_paths:
            return False
        self.config.project_paths.append(path)
        self.save()
        return True

    def remove_project_path(self, path: str) -> bool:
        if path not in self.config.project_paths:
            return False
        self.config.project_paths.remove(path)
        self.save()
        return True

    def update_scanner(self, **values: Any) -> ScannerSettings:
        """Validate and persist new scanner settings."""
        merged = {**self.config.scanner.model_dump(), **values}
        try:
            settings = ScannerSettings(**merged)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid scanner setting: {exc}") from exc
        self.config.scanner = settings
        self.save()
        return settings

    def resolve_project_paths(self, extra: list[str] | None = None) -> list[str]:
        """Absolute project paths from the config file, env var, and *extra*.

        Relative config entries are resolved against the config file's
        directory; relative *extra* entries against the working directory.
        Duplicates are dropped, first occurrence wins.
        """
        base_dir = self.config_path.parent
        candidates = [
            str(p if Path(p).is_absolute() else (base_dir / p))
            for p in self.config.project_paths
        ]
        env_paths = os.environ.get(ENV_PROJECT_PATHS, "")
        candidates.extend(p for p in env_paths.split(os.pathsep) if p.strip())
        candidates.extend(extra or [])

        resolved: list[str] = []
        for candidate in candidates:
            absolute = os.path.abspath(os.path.expanduser(candidate.strip()))
            if absolute not in resolved:
                resolved.append(absolute)
        return resolved
