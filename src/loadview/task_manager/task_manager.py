"""Centralized manager for background loader tasks."""

import logging
import uuid
from typing import Any, Callable

from PySide6.QtCore import QObject, QThread

from loadview.task_manager.cancellation import CancellationToken
from loadview.task_manager.task_handle import TaskHandle
from loadview.task_manager.task_state import TaskState

logger = logging.getLogger(__name__)

WorkerFn = Callable[[CancellationToken, TaskHandle], Any]
PageWorkerFn = Callable[[CancellationToken, TaskHandle, int], Any]


class _WorkerThread(QThread):
    """Runs one worker function and reports its outcome through the handle."""

    def __init__(
        self,
        worker_fn: WorkerFn,
        token: CancellationToken,
        handle: TaskHandle,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._worker_fn = worker_fn
        self._token = token
        self._handle = handle

    def run(self) -> None:
        """Execute worker function with exception handling."""
        if self._token.is_cancelled:
            # discarded before the thread got scheduled
            self._handle._emit_cancelled()
            return

        self._handle._set_running()

        try:
            result = self._worker_fn(self._token, self._handle)

            if self._token.is_cancelled:
                self._handle._emit_cancelled()
            else:
                self._handle._emit_completed(result)

        except Exception as e:
            if self._token.is_cancelled:
                self._handle._emit_cancelled()
            else:
                self._handle._emit_failed(type(e).__name__, str(e))


class TaskManager(QObject):
    """Centralized manager for background task lifecycle.

    Loaders never own threads directly: they obtain TaskHandles from here
    (usually via the load_task/page_task factories) and the manager keeps
    the worker threads alive until they finish.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._tasks: dict[str, tuple[TaskHandle, _WorkerThread]] = {}

    def submit(
        self,
        worker: WorkerFn,
        name: str,
        task_id: str | None = None,
    ) -> TaskHandle:
        """Submit a task for background execution.

        Args:
            worker: Callable with signature (token, handle) -> Any
            name: Human-readable name for logging
            task_id: Optional identifier; auto-generated if not provided

        Returns:
            TaskHandle for monitoring/controlling the task
        """
        if task_id is None:
            task_id = str(uuid.uuid4())

        token = CancellationToken()
        # the caller owns the handle; only the thread is parented to the manager
        handle = TaskHandle(task_id, name, token)
        thread = _WorkerThread(worker, token, handle, parent=self)

        # Register cleanup on thread completion
        thread.finished.connect(lambda: self._cleanup_task(task_id))

        self._tasks[task_id] = (handle, thread)
        logger.info(f"Starting task '{name}' (id={task_id})")
        thread.start()

        return handle

    def load_task(self, worker: WorkerFn, name: str) -> Callable[[], TaskHandle]:
        """Wrap worker as a zero-argument task factory for LoaderPresenter."""

        def factory() -> TaskHandle:
            return self.submit(worker, name=name)

        return factory

    def page_task(self, worker: PageWorkerFn, name: str) -> Callable[[int], TaskHandle]:
        """Wrap worker as a page-fetch function for AutoLoadMorePresenter.

        The worker receives the number of items already loaded and returns
        the next page, an empty list at end of data, or None on failure.
        """

        def fetch(loaded_count: int) -> TaskHandle:
            return self.submit(
                lambda token, handle: worker(token, handle, loaded_count),
                name=f"{name} (from {loaded_count})",
            )

        return fetch

    def cancel(self, task_id: str) -> bool:
        """Cancel a specific task. Returns True if found."""
        if task_id in self._tasks:
            handle, _ = self._tasks[task_id]
            handle.cancel()
            return True
        return False

    def cancel_all(self) -> int:
        """Cancel all unsettled tasks. Returns count cancelled."""
        count = 0
        for handle, _ in self._tasks.values():
            if handle.state in (TaskState.PENDING, TaskState.RUNNING):
                handle.cancel()
                count += 1
        logger.info(f"Cancelled {count} task(s)")
        return count

    def shutdown(self, timeout_ms: int = 5000) -> None:
        """Cancel all tasks and wait for their threads to exit.

        Called during application exit to ensure clean shutdown.
        """
        logger.info("TaskManager shutdown initiated")
        self.cancel_all()

        per_thread_timeout = timeout_ms // max(len(self._tasks), 1)
        for handle, thread in list(self._tasks.values()):
            if thread.isRunning():
                logger.info(f"Waiting for task '{handle.name}' to finish...")
                finished = thread.wait(per_thread_timeout)
                if not finished:
                    logger.warning(f"Task '{handle.name}' did not finish in time")

        logger.info("TaskManager shutdown complete")

    def _cleanup_task(self, task_id: str) -> None:
        """Remove finished task from tracking dictionary and release its thread."""
        if task_id in self._tasks:
            handle, thread = self._tasks.pop(task_id)
            thread.deleteLater()
            logger.debug(f"Cleaned up task '{handle.name}' (id={task_id})")

    @property
    def running_tasks(self) -> list[TaskHandle]:
        return [handle for handle, _ in self._tasks.values() if handle.state == TaskState.RUNNING]

    @property
    def active_task_count(self) -> int:
        """Number of tasks currently tracked (any state)."""
        return len(self._tasks)
