"""Generational ownership of a single outstanding task."""

import logging

from loadview.task_manager.task_handle import TaskHandle

logger = logging.getLogger(__name__)


class TaskSlot:
    """Owns at most one outstanding TaskHandle for a loader.

    Every adopted handle is stamped with a fresh generation number. Adopting
    a new handle or cancelling the slot bumps the generation before the
    previous task can settle, so when a superseded task eventually reports
    back, is_current() is False and the loader drops the result.

    Not thread-safe: only the owning presenter's thread touches a slot.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._generation = 0
        self._handle: TaskHandle | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def handle(self) -> TaskHandle | None:
        return self._handle

    @property
    def busy(self) -> bool:
        return self._handle is not None

    def adopt(self, handle: TaskHandle) -> int:
        """Take ownership of handle, discarding any prior one."""
        self.cancel()
        handle.generation = self._generation
        self._handle = handle
        logger.debug(f"Slot '{self._name}' adopted task '{handle.name}' (generation {self._generation})")
        return self._generation

    def is_current(self, handle: TaskHandle) -> bool:
        return self._handle is not None and handle.generation == self._generation

    def release(self, handle: TaskHandle) -> bool:
        """Clear the slot if handle is the current one. Returns True if cleared."""
        if not self.is_current(handle):
            return False
        self._handle = None
        return True

    def cancel(self) -> None:
        """Cancel the held task (if any) and invalidate its generation."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._generation += 1
