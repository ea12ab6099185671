"""Presenter for a single value loaded in the background.

Runs one task at a time, checks its result with an optional verifier and
publishes a three-phase lifecycle (LOADING / SUCCESS / FAILED) for a view
to render. Restarting cancels the outstanding task; its eventual result is
dropped rather than overwriting the newer load.
"""

import logging
from enum import Enum, auto
from typing import Any, Callable

from PySide6.QtCore import QObject, Signal

from loadview.task_manager.task_handle import TaskHandle
from loadview.task_manager.task_slot import TaskSlot
from loadview.task_manager.task_state import TaskState
from loadview.verification import ResultVerifier, Verified, verify

logger = logging.getLogger(__name__)

LoadTask = Callable[[], TaskHandle]

CANCELLED_MESSAGE = "Load cancelled"


class LoaderPhase(Enum):
    """Lifecycle phases of a LoaderPresenter.

    LOADING -> SUCCESS   verified result
    LOADING -> FAILED    rejected result, task failure or external cancel
    SUCCESS|FAILED -> LOADING   restart
    """

    LOADING = auto()
    SUCCESS = auto()
    FAILED = auto()


class LoaderPresenter(QObject):
    """Presenter that loads one value and tracks the outcome.

    The task factory is called on every (re)start and must return a
    TaskHandle, typically from TaskManager.load_task(). The presenter owns
    that handle through a TaskSlot: starting again or disposing bumps the
    slot generation, so a superseded task can never publish state.

    Signals:
        state_changed: Emitted with the new LoaderPhase on every transition.
        load_succeeded: Emitted with the verified value.
        load_failed: Emitted with the failure message.
    """

    state_changed = Signal(LoaderPhase)
    load_succeeded = Signal(object)
    load_failed = Signal(str)

    def __init__(
        self,
        load_task: LoadTask,
        result_verify: ResultVerifier | None = None,
        name: str = "loader",
        parent: QObject | None = None,
    ) -> None:
        """Initialize the presenter.

        Args:
            load_task: Zero-argument factory returning a TaskHandle whose
                result is the value to display
            result_verify: Optional check applied to a completed result;
                defaults to accepting every result unchanged
            name: Name used in log messages
            parent: Optional Qt parent
        """
        super().__init__(parent)

        self._load_task = load_task
        self._result_verify = result_verify
        self._name = name

        self._slot = TaskSlot(name)
        self._phase = LoaderPhase.LOADING
        self._value: Any = None
        self._error_message: str | None = None
        self._failed_result: Any = None
        self._disposed = False

    @property
    def phase(self) -> LoaderPhase:
        return self._phase

    @property
    def value(self) -> Any:
        """Last verified value.

        Only meaningful in SUCCESS; in FAILED it may be left over from an
        earlier successful load.
        """
        return self._value

    @property
    def error_message(self) -> str | None:
        """Failure message, set only in FAILED."""
        return self._error_message

    @property
    def failed_result(self) -> Any:
        """Raw result rejected by the verifier, or None for task failures."""
        return self._failed_result

    @property
    def is_loading(self) -> bool:
        return self._phase == LoaderPhase.LOADING

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def active_task(self) -> TaskHandle | None:
        return self._slot.handle

    def start(self) -> None:
        """Discard any outstanding task and issue a new one."""
        if self._disposed:
            logger.warning(f"Cannot start '{self._name}': presenter was disposed")
            return

        self._slot.cancel()
        self._phase = LoaderPhase.LOADING
        self._error_message = None
        self._failed_result = None

        try:
            handle = self._load_task()
        except Exception as e:
            logger.error(f"Task factory for '{self._name}' raised: {e}")
            self._fail(str(e) or type(e).__name__)
            return

        generation = self._slot.adopt(handle)
        logger.info(f"Loading '{self._name}' (generation {generation})")
        handle.settled.connect(self._on_task_settled)
        self._emit_state_changed()

        # Factory may hand back a task that already finished
        if handle.is_settled:
            self._on_task_settled(handle)

    def restart(self) -> None:
        """Start over, dropping whatever the current task produces."""
        self.start()

    def refresh(self) -> None:
        """Retry hook for the view; same as restart()."""
        self.restart()

    def dispose(self) -> None:
        """Cancel the outstanding task. No state changes after this."""
        if self._disposed:
            return
        logger.debug(f"Disposing loader '{self._name}'")
        self._disposed = True
        self._slot.cancel()

    def _on_task_settled(self, handle: TaskHandle) -> None:
        """Single resumption point for every issued task."""
        if self._disposed or not self._slot.release(handle):
            logger.debug(f"Dropping stale outcome of task '{handle.name}' (generation {handle.generation})")
            return

        if handle.state == TaskState.COMPLETED:
            self._apply_result(handle.result)
        elif handle.state == TaskState.FAILED:
            self._fail(handle.error_message or handle.error_type or "Load failed")
        else:
            logger.info(f"Current task of '{self._name}' was cancelled externally")
            self._fail(CANCELLED_MESSAGE)

    def _apply_result(self, result: Any) -> None:
        try:
            outcome = verify(self._result_verify, result)
        except Exception as e:
            logger.error(f"Verifier for '{self._name}' raised: {e}")
            self._fail(str(e) or type(e).__name__, failed_result=result)
            return

        if isinstance(outcome, Verified):
            self._value = outcome.value
            self._error_message = None
            self._phase = LoaderPhase.SUCCESS
            logger.info(f"Loaded '{self._name}'")
            self._emit_state_changed()
            self.load_succeeded.emit(outcome.value)
        else:
            self._fail(outcome.message, failed_result=result)

    def _fail(self, message: str, failed_result: Any = None) -> None:
        self._error_message = message
        self._failed_result = failed_result
        self._phase = LoaderPhase.FAILED
        logger.warning(f"Loading '{self._name}' failed: {message}")
        self._emit_state_changed()
        self.load_failed.emit(message)

    def _emit_state_changed(self) -> None:
        logger.debug(f"'{self._name}' state changed to {self._phase}")
        self.state_changed.emit(self._phase)
