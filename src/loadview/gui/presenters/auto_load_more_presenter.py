"""Presenter for a list that fetches further pages as the user scrolls.

The view reports how far the viewport is from the end of the content; once
that distance drops below the proximity threshold the presenter requests the
next page. At most one page request is outstanding at a time. An empty page
ends the list, a failed page turns the trailing "loading more" row into a
retry control without touching the items already shown.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Iterable

from PySide6.QtCore import QObject, Signal

from loadview.settings import DEFAULT_PROXIMITY_THRESHOLD
from loadview.task_manager.task_handle import TaskHandle
from loadview.task_manager.task_slot import TaskSlot
from loadview.task_manager.task_state import TaskState

logger = logging.getLogger(__name__)

PageFetch = Callable[[int], TaskHandle]


class ListState(Enum):
    """States of a paginated list.

    States are computed from internal reality, not stored separately.
    """

    IDLE = auto()  # More items available, nothing outstanding
    FETCHING = auto()  # A page request is in flight
    FAILED = auto()  # Last page request failed, waiting for retry
    EXHAUSTED = auto()  # Total reached or empty page received


class SlotKind(Enum):
    ITEM = auto()
    LOADING_MORE = auto()
    RETRY = auto()


class PageFailure(Enum):
    """Why the last page request failed. Both kinds are retried the same way."""

    NO_DATA = auto()  # Worker returned None
    RAISED = auto()  # Worker raised, or the page fetch function itself did


@dataclass(frozen=True)
class ListSlot:
    """What the view should render at one row index."""

    kind: SlotKind
    item: Any = None


class AutoLoadMorePresenter(QObject):
    """Presenter for an incrementally fetched list.

    Signals:
        state_changed: Emitted with the computed ListState after every change.
        items_appended: Emitted with (start_index, count) when a page lands.
        items_reset: Emitted when initialize() replaces the whole list.
        fetch_failed: Emitted with an error message when a page request fails.
    """

    state_changed = Signal(ListState)
    items_appended = Signal(int, int)
    items_reset = Signal()
    fetch_failed = Signal(str)

    def __init__(
        self,
        load_more: PageFetch,
        total_count: int,
        initial_items: Iterable[Any] = (),
        proximity_threshold: float = DEFAULT_PROXIMITY_THRESHOLD,
        name: str = "auto_load_more",
        parent: QObject | None = None,
    ) -> None:
        """Initialize the presenter.

        Args:
            load_more: Called with the number of items loaded so far; returns a
                TaskHandle whose result is the next page (list), an empty list
                at end of data, or None on failure
            total_count: Declared number of items available (may be an estimate)
            initial_items: Items to show before any page is fetched
            proximity_threshold: Remaining scroll distance that triggers a fetch
            name: Name used in log messages
            parent: Optional Qt parent
        """
        super().__init__(parent)

        if proximity_threshold <= 0:
            raise ValueError(f"proximity_threshold must be positive, got {proximity_threshold}")

        self._load_more = load_more
        self._proximity_threshold = proximity_threshold
        self._name = name

        self._slot = TaskSlot(name)
        self._items: list[Any] = []
        self._total_count = 0
        self._exhausted = False
        self._failure: PageFailure | None = None
        self._error_message: str | None = None
        self._disposed = False

        self.initialize(initial_items, total_count)

    @property
    def state(self) -> ListState:
        """Compute current state from internal reality - never stale."""
        if self._slot.busy:
            return ListState.FETCHING
        if not self.has_more:
            return ListState.EXHAUSTED
        if self._failure is not None:
            return ListState.FAILED
        return ListState.IDLE

    @property
    def items(self) -> tuple[Any, ...]:
        return tuple(self._items)

    @property
    def total_count(self) -> int:
        return self._total_count

    @property
    def has_more(self) -> bool:
        """False once the declared total is reached or an empty page arrived."""
        return not self._exhausted and len(self._items) < self._total_count

    @property
    def error(self) -> bool:
        return self._failure is not None

    @property
    def last_failure(self) -> PageFailure | None:
        return self._failure

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def in_flight(self) -> TaskHandle | None:
        return self._slot.handle

    @property
    def proximity_threshold(self) -> float:
        return self._proximity_threshold

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def item_count(self) -> int:
        """Rows the view should render: items plus the trailing slot, if any."""
        return len(self._items) + (1 if self.has_more else 0)

    @property
    def trailing_slot(self) -> SlotKind | None:
        if not self.has_more:
            return None
        return SlotKind.RETRY if self.error else SlotKind.LOADING_MORE

    def slot_at(self, index: int) -> ListSlot:
        """Describe the row at index.

        Raises IndexError for anything outside [0, item_count): asking for
        such a row is a bug in the view, not an empty row.
        """
        if 0 <= index < len(self._items):
            return ListSlot(SlotKind.ITEM, self._items[index])

        trailing = self.trailing_slot
        if index == len(self._items) and trailing is not None:
            return ListSlot(trailing)

        raise IndexError(f"Row {index} requested from '{self._name}' which has {self.item_count} rows")

    def initialize(self, initial_items: Iterable[Any], total_count: int) -> None:
        """Replace the list contents and forget any fetch in progress."""
        if total_count < 0:
            raise ValueError(f"total_count must be non-negative, got {total_count}")
        if self._disposed:
            logger.warning(f"initialize() called on disposed list '{self._name}'")
            return

        self._slot.cancel()
        self._items = list(initial_items)
        self._total_count = total_count
        self._exhausted = False
        self._failure = None
        self._error_message = None

        logger.info(f"'{self._name}' initialized with {len(self._items)} of {total_count} items")
        self.items_reset.emit()
        self._emit_state_changed()

    def on_scroll(self, extent_after: float) -> None:
        """Report the remaining scroll distance below the viewport."""
        if extent_after < self._proximity_threshold:
            self.on_proximity_signal()

    def on_proximity_signal(self) -> None:
        """The viewport is close to the end of the rendered content."""
        self.try_fetch()

    def try_fetch(self) -> bool:
        """Request the next page unless one is outstanding, the list is
        exhausted or the last request failed. Returns True if issued.
        """
        if self._disposed or not self.has_more or self.error or self._slot.busy:
            return False

        loaded_count = len(self._items)
        try:
            handle = self._load_more(loaded_count)
        except Exception as e:
            logger.error(f"Page fetch function for '{self._name}' raised: {e}")
            self._record_failure(PageFailure.RAISED, str(e) or type(e).__name__)
            return False

        generation = self._slot.adopt(handle)
        logger.info(f"'{self._name}' fetching page after {loaded_count} items (generation {generation})")
        handle.settled.connect(self._on_page_settled)
        self._emit_state_changed()

        if handle.is_settled:
            self._on_page_settled(handle)
        return True

    def retry(self) -> bool:
        """Clear the error and request the failed page again."""
        if self._disposed:
            logger.warning(f"retry() called on disposed list '{self._name}'")
            return False
        if not self.error:
            logger.warning(f"Retry requested for '{self._name}' without a failed fetch")
            return False

        logger.info(f"Retrying page fetch for '{self._name}'")
        self._failure = None
        self._error_message = None
        issued = self.try_fetch()
        if not issued:
            self._emit_state_changed()
        return issued

    def dispose(self) -> None:
        """Cancel the outstanding fetch and ignore everything afterwards."""
        if self._disposed:
            return
        logger.debug(f"Disposing list '{self._name}'")
        self._disposed = True
        self._slot.cancel()

    def _on_page_settled(self, handle: TaskHandle) -> None:
        """Single resumption point for every page request."""
        if self._disposed or not self._slot.release(handle):
            logger.debug(f"Dropping stale page from task '{handle.name}' (generation {handle.generation})")
            return

        if handle.state == TaskState.COMPLETED:
            self._apply_page(handle.result)
        elif handle.state == TaskState.FAILED:
            self._record_failure(PageFailure.RAISED, handle.error_message or handle.error_type or "Fetch failed")
        else:
            logger.info(f"Page fetch for '{self._name}' was cancelled externally")
            self._emit_state_changed()

    def _apply_page(self, page: Any) -> None:
        if page is None:
            self._record_failure(PageFailure.NO_DATA, "No data returned")
            return
        if not isinstance(page, (list, tuple)):
            logger.error(f"Page fetch for '{self._name}' returned {type(page).__name__}, expected a list")
            self._record_failure(PageFailure.NO_DATA, f"Unexpected page type {type(page).__name__}")
            return

        if not page:
            logger.info(f"'{self._name}' received an empty page; end of data at {len(self._items)} items")
            self._exhausted = True
            self._emit_state_changed()
            return

        start = len(self._items)
        self._items.extend(page)
        logger.info(f"'{self._name}' appended {len(page)} items ({len(self._items)}/{self._total_count})")
        self.items_appended.emit(start, len(page))
        self._emit_state_changed()

    def _record_failure(self, failure: PageFailure, message: str) -> None:
        self._failure = failure
        self._error_message = message
        logger.warning(f"Page fetch for '{self._name}' failed ({failure.name}): {message}")
        self._emit_state_changed()
        self.fetch_failed.emit(message)

    def _emit_state_changed(self) -> None:
        current_state = self.state
        logger.debug(f"'{self._name}' state changed to {current_state}")
        self.state_changed.emit(current_state)
