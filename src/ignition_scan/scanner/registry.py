"""Resource type registry — which directories hold which resource types."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from ignition_scan.models.resource import ResourceTypeDescriptor
from ignition_scan.scanner.errors import ProviderRegistrationError

logger = logging.getLogger(__name__)

RegistrationListener = Callable[[ResourceTypeDescriptor], None]

PERSPECTIVE_MODULE = "com.inductiveautomation.perspective"

BUILTIN_DESCRIPTORS: tuple[ResourceTypeDescriptor, ...] = (
    ResourceTypeDescriptor(
        resource_type_id="script-python",
        display_name="Project Scripts",
        directory_paths=["ignition/script-python"],
        searchable_extensions=[".py"],
        primary_file="code.py",
        category_icon="file-code",
    ),
    ResourceTypeDescriptor(
        resource_type_id="named-query",
        display_name="Named Queries",
        directory_paths=["ignition/named-query"],
        searchable_extensions=[".sql"],
        primary_file="query.sql",
        category_icon="database",
    ),
    ResourceTypeDescriptor(
        resource_type_id="perspective-view",
        display_name="Views",
        directory_paths=[f"{PERSPECTIVE_MODULE}/views"],
        category="Perspective",
        searchable_extensions=[".json"],
        primary_file="view.json",
        category_icon="layout",
    ),
    ResourceTypeDescriptor(
        resource_type_id="perspective-style-class",
        display_name="Style Classes",
        directory_paths=[f"{PERSPECTIVE_MODULE}/style-classes"],
        category="Perspective",
        searchable_extensions=[".json"],
        primary_file="style.json",
        category_icon="symbol-color",
    ),
    ResourceTypeDescriptor(
        resource_type_id="perspective-page-config",
        display_name="Page Config",
        directory_paths=[f"{PERSPECTIVE_MODULE}/page-config"],
        is_singleton=True,
        category="Perspective",
        searchable_extensions=[".json"],
        primary_file="config.json",
        category_icon="gear",
    ),
    ResourceTypeDescriptor(
        resource_type_id="perspective-session-props",
        display_name="Session Props",
        directory_paths=[f"{PERSPECTIVE_MODULE}/session-props"],
        is_singleton=True,
        category="Perspective",
        searchable_extensions=[".json"],
        primary_file="props.json",
        category_icon="settings",
    ),
)


class ResourceTypeRegistry:
    """In-memory lookup table of resource type descriptors.

    Registering an id that already exists replaces the previous descriptor,
    which lets plugins and test doubles override built-in types.
    """

    def __init__(self, descriptors: Iterable[ResourceTypeDescriptor] = ()) -> None:
        self._descriptors: dict[str, ResourceTypeDescriptor] = {}
        self._listeners: list[RegistrationListener] = []
        for descriptor in descriptors:
            self.register(descriptor)

    @classmethod
    def with_builtins(cls) -> ResourceTypeRegistry:
        return cls(BUILTIN_DESCRIPTORS)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, resource_type_id: object) -> bool:
        return resource_type_id in self._descriptors

    def register(self, descriptor: ResourceTypeDescriptor) -> None:
        if not descriptor.directory_paths:
            raise ProviderRegistrationError(
                descriptor.resource_type_id,
                "no directory paths defined in search configuration",
            )
        if descriptor.resource_type_id in self._descriptors:
            logger.debug(
                "Resource type '%s' already registered, replacing",
                descriptor.resource_type_id,
            )
        self._descriptors[descriptor.resource_type_id] = descriptor
        for listener in list(self._listeners):
            listener(descriptor)

    def unregister(self, resource_type_id: str) -> bool:
        return self._descriptors.pop(resource_type_id, None) is not None

    def clear(self) -> None:
        self._descriptors.clear()

    def get(self, resource_type_id: str) -> ResourceTypeDescriptor | None:
        return self._descriptors.get(resource_type_id)

    def has(self, resource_type_id: str) -> bool:
        return resource_type_id in self._descriptors

    def list(self) -> list[ResourceTypeDescriptor]:
        return list(self._descriptors.values())

    def list_searchable(self) -> list[ResourceTypeDescriptor]:
        """Descriptors whose content can be full-text searched."""
        return [d for d in self._descriptors.values() if d.supports_content_search]

    def on_registered(self, listener: RegistrationListener) -> Callable[[], None]:
        """Subscribe to registrations; returns a function that unsubscribes."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
