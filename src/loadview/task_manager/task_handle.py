"""Handle for monitoring and controlling an issued loader task."""

import logging
from typing import Any

from PySide6.QtCore import QObject, Signal

from loadview.task_manager.cancellation import CancellationToken
from loadview.task_manager.task_state import TaskState

logger = logging.getLogger(__name__)


class TaskHandle(QObject):
    """Handle for monitoring and controlling an issued task.

    Created by TaskManager.submit() (or directly, for tasks driven by other
    means) and handed to whoever issued the task. Workers receive this to
    report progress; loaders connect to `settled` for the single resumption
    point of the task.

    The handle lives on the thread that created it, so signal deliveries to
    QObject slots on that thread are queued when the worker emits from its
    own thread.
    """

    started = Signal()  # emitted when task begins running
    completed = Signal(object)  # result value from worker
    failed = Signal(str, str)  # exception_type, message
    cancelled = Signal()
    progress_updated = Signal(int, str)  # percent (0-100), message
    settled = Signal(object)  # this handle, after any terminal state

    def __init__(
        self,
        task_id: str,
        name: str,
        token: CancellationToken | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._task_id = task_id
        self._name = name
        self._token = token if token is not None else CancellationToken()
        self._state = TaskState.PENDING
        self._result: Any = None
        self._error_type: str | None = None
        self._error_message: str | None = None

        # Stamped by the TaskSlot that owns this handle
        self.generation: int | None = None

    @property
    def task_id(self) -> str:
        return self._task_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def is_settled(self) -> bool:
        return self._state.is_terminal

    @property
    def result(self) -> Any:
        """Result from completed worker, or None."""
        return self._result

    @property
    def error_type(self) -> str | None:
        return self._error_type

    @property
    def error_message(self) -> str | None:
        """str() of the exception the worker raised, or None."""
        return self._error_message

    def cancel(self) -> None:
        """Request this task be cancelled.

        Unconditional: a pending or running task has its token cancelled,
        a settled task is left alone. The worker must still check
        token.is_cancelled cooperatively to stop early.
        """
        if self.is_settled:
            return
        if not self._token.is_cancelled:
            logger.info(f"Cancellation requested for task '{self._name}'")
        self._token.cancel()

    def report_progress(self, percent: int, message: str = "") -> None:
        """Report progress from within the worker."""
        self.progress_updated.emit(percent, message)

    # Methods below are called by whatever drives the task
    # (_WorkerThread for TaskManager.submit)

    def _set_running(self) -> None:
        if self.is_settled:
            return
        self._state = TaskState.RUNNING
        self.started.emit()

    def _emit_completed(self, result: Any) -> None:
        if self.is_settled:
            return
        self._result = result
        self._state = TaskState.COMPLETED
        self.completed.emit(result)
        self.settled.emit(self)

    def _emit_failed(self, exc_type: str, message: str) -> None:
        if self.is_settled:
            return
        self._error_type = exc_type
        self._error_message = message
        self._state = TaskState.FAILED
        logger.error(f"Task '{self._name}' failed: {exc_type}: {message}")
        self.failed.emit(exc_type, message)
        self.settled.emit(self)

    def _emit_cancelled(self) -> None:
        if self.is_settled:
            return
        self._state = TaskState.CANCELLED
        logger.info(f"Task '{self._name}' was cancelled")
        self.cancelled.emit()
        self.settled.emit(self)
