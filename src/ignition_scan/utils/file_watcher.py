"""File watcher for scanned projects — debounced cache invalidation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from watchfiles import Change, awatch

logger = logging.getLogger(__name__)


class Debouncer:
    """Collapse a burst of triggers into one call after a quiet period."""

    def __init__(self, delay: float, action: Callable[[], None]) -> None:
        self.delay = delay
        self._action = action
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """Restart the quiet period. Must be called from the event loop."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._action()


class ProjectWatcher:
    """Watch a project tree recursively and report changes, debounced."""

    def __init__(
        self,
        project_path: str,
        on_change: Callable[[], None],
        debounce: float = 1.0,
    ) -> None:
        self.project_path = project_path
        self._debouncer = Debouncer(debounce, on_change)
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Begin watching. Requires a running event loop."""
        if self.running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._stop_event), name=f"watch:{self.project_path}",
        )

    async def _run(self, stop_event: asyncio.Event) -> None:
        try:
            async for changes in awatch(
                Path(self.project_path), stop_event=stop_event, recursive=True,
            ):
                self.handle_changes(changes)
        except OSError as exc:
            logger.warning("Stopped watching %s: %s", self.project_path, exc)

    def handle_changes(self, changes: Iterable[tuple[Change, str]]) -> None:
        for change_type, changed_path in changes:
            logger.debug("%s: %s", change_type.name, changed_path)
        self._debouncer.trigger()

    def close(self) -> None:
        """Stop watching without waiting for the watch task to finish."""
        self._debouncer.cancel()
        if self._stop_event is not None:
            self._stop_event.set()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def stop(self) -> None:
        self.close()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
