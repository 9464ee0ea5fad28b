"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class IgnitionScanError(Exception):
    """Base exception for ignition-scan."""

    exit_code: int = 1


class ProjectPathNotFoundError(IgnitionScanError):
    """Project path does not exist or is not a directory."""

    exit_code = 4

    def __init__(self, project_path: str, reason: str | None = None) -> None:
        self.project_path = project_path
        self.reason = reason
        message = f"Project path not found: {project_path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ConfigurationError(IgnitionScanError):
    """Invalid or unreadable configuration."""

    exit_code = 6


class ProviderRegistrationError(ConfigurationError):
    """A resource type descriptor cannot be registered."""

    def __init__(self, resource_type_id: str, detail: str) -> None:
        self.resource_type_id = resource_type_id
        super().__init__(f"Resource type '{resource_type_id}': {detail}")


class ServiceStateError(IgnitionScanError):
    """Scanner service used outside its lifecycle."""

    exit_code = 8


def error_handler(func: F) -> F:
    """Decorator that catches IgnitionScanError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except IgnitionScanError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
