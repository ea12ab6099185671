"""Scrollable list that asks its presenter for more items near the bottom.

Rows are built from AutoLoadMorePresenter.slot_at(); the trailing row is
the presenter's "loading more" or retry slot. The distance between the
viewport and the end of the content is reported on every scroll and on
every content size change, so a short first page still pulls the next one.
"""

import logging
from typing import Any, Callable

from PySide6.QtWidgets import QScrollArea, QVBoxLayout, QWidget

from loadview.gui.presenters.auto_load_more_presenter import (
    AutoLoadMorePresenter,
    ListState,
    SlotKind,
)
from loadview.gui.views.default_slots import loading_more_row, retry_row
from loadview.settings import LoaderSettings

logger = logging.getLogger(__name__)

ItemBuilder = Callable[[Any], QWidget]
SlotBuilder = Callable[[], QWidget]


class AutoLoadMoreList(QScrollArea):
    """Vertical list of item widgets with an auto-loading tail."""

    def __init__(
        self,
        presenter: AutoLoadMorePresenter,
        builder: ItemBuilder,
        loading_more_builder: SlotBuilder | None = None,
        retry_builder: SlotBuilder | None = None,
        settings: LoaderSettings | None = None,
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self._presenter = presenter
        self._builder = builder
        self._loading_more_builder = loading_more_builder
        self._retry_builder = retry_builder
        self._settings = settings or LoaderSettings()

        self._rows: list[QWidget] = []
        self._trailing: QWidget | None = None
        self._trailing_kind: SlotKind | None = None

        self._setup_ui()
        self._connect_signals()
        self._rebuild_rows()

    def _setup_ui(self) -> None:
        self.setWidgetResizable(True)

        self._container = QWidget()
        self._layout = QVBoxLayout(self._container)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(0)
        self._layout.addStretch()  # keeps rows packed at the top
        self.setWidget(self._container)

    def _connect_signals(self) -> None:
        # Presenter → View
        self._presenter.items_reset.connect(self._rebuild_rows)
        self._presenter.items_appended.connect(self._append_rows)
        self._presenter.state_changed.connect(self._update_trailing_slot)

        # View → Presenter
        scroll_bar = self.verticalScrollBar()
        scroll_bar.valueChanged.connect(self._report_extent_after)
        scroll_bar.rangeChanged.connect(self._report_extent_after)

    @property
    def row_count(self) -> int:
        """Rows currently rendered, including the trailing slot."""
        return len(self._rows) + (1 if self._trailing is not None else 0)

    @property
    def trailing_kind(self) -> SlotKind | None:
        return self._trailing_kind

    @property
    def trailing_widget(self) -> QWidget | None:
        return self._trailing

    def extent_after(self) -> int:
        """Scroll distance left below the viewport, in pixels."""
        scroll_bar = self.verticalScrollBar()
        return scroll_bar.maximum() - scroll_bar.value()

    def _report_extent_after(self, *_args) -> None:
        self._presenter.on_scroll(self.extent_after())

    def _rebuild_rows(self) -> None:
        for row in self._rows:
            self._layout.removeWidget(row)
            row.deleteLater()
        self._rows.clear()

        self._append_rows(0, len(self._presenter.items))
        self._update_trailing_slot()

    def _append_rows(self, start: int, count: int) -> None:
        for index in range(start, start + count):
            slot = self._presenter.slot_at(index)
            row = self._builder(slot.item)
            self._layout.insertWidget(len(self._rows), row)
            self._rows.append(row)

    def _update_trailing_slot(self, _state: ListState | None = None) -> None:
        kind = self._presenter.trailing_slot
        if kind == self._trailing_kind:
            return

        if self._trailing is not None:
            self._layout.removeWidget(self._trailing)
            self._trailing.deleteLater()
            self._trailing = None

        self._trailing_kind = kind
        if kind is None:
            return

        slot = self._presenter.slot_at(len(self._rows))
        if slot.kind == SlotKind.RETRY:
            if self._retry_builder is not None:
                self._trailing = self._retry_builder()
            else:
                self._trailing = retry_row(self._presenter.retry, self._settings)
        else:
            if self._loading_more_builder is not None:
                self._trailing = self._loading_more_builder()
            else:
                self._trailing = loading_more_row(self._settings)
        self._layout.insertWidget(len(self._rows), self._trailing)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._report_extent_after()

    def cleanup(self) -> None:
        """Explicit cleanup - call before destruction."""
        self._presenter.dispose()

    def closeEvent(self, event) -> None:
        """Handle close event."""
        self.cleanup()
        super().closeEvent(event)
