"""Project scanning engine: registry, directory scanner, inheritance, cache."""

from ignition_scan.scanner.cache import ScanCache
from ignition_scan.scanner.directory import DirectoryScanner, ScanOutcome
from ignition_scan.scanner.inheritance import ChainResolution, InheritanceResolver
from ignition_scan.scanner.metadata import is_ignition_project, load_project_metadata
from ignition_scan.scanner.registry import ResourceTypeRegistry
from ignition_scan.scanner.service import ProjectScannerService, ServiceStatus

__all__ = [
    "ChainResolution",
    "DirectoryScanner",
    "InheritanceResolver",
    "ProjectScannerService",
    "ResourceTypeRegistry",
    "ScanCache",
    "ScanOutcome",
    "ServiceStatus",
    "is_ignition_project",
    "load_project_metadata",
]
