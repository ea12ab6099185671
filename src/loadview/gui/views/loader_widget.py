"""Widget that shows a loading, success or failure page for a LoaderPresenter.

This is a thin MVP widget following the state-driven UI pattern: every
phase change from the presenter rebuilds the single visible page through
the matching builder.
"""

import logging
from typing import Any, Callable

from PySide6.QtWidgets import QStackedWidget, QWidget

from loadview.gui.presenters.loader_presenter import LoaderPhase, LoaderPresenter
from loadview.gui.views.default_slots import failure_panel, loading_placeholder
from loadview.settings import LoaderSettings

logger = logging.getLogger(__name__)

SuccessBuilder = Callable[[Any], QWidget]
LoadingBuilder = Callable[[], QWidget]
FailedBuilder = Callable[[Any, str | None], QWidget]


class LoaderWidget(QStackedWidget):
    """Displays whatever the presenter's current phase calls for.

    Constructing the widget starts the presenter; cleanup() (also run on
    close) disposes it so a late result cannot touch a dead widget.
    """

    def __init__(
        self,
        presenter: LoaderPresenter,
        builder: SuccessBuilder,
        loading_builder: LoadingBuilder | None = None,
        failed_builder: FailedBuilder | None = None,
        settings: LoaderSettings | None = None,
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self._presenter = presenter
        self._builder = builder
        self._loading_builder = loading_builder
        self._failed_builder = failed_builder
        self._settings = settings or LoaderSettings()
        self._page: QWidget | None = None
        self._page_phase: LoaderPhase | None = None

        self._presenter.state_changed.connect(self._update_ui_for_state)
        self._presenter.start()

        if self._page is None:
            self._update_ui_for_state(self._presenter.phase)

    @classmethod
    def of(cls, widget: QWidget | None) -> "LoaderWidget | None":
        """Nearest LoaderWidget at or above widget, or None if there is none.

        Lets a page built by one of the builders reach the loader that owns
        it, e.g. to refresh it from a button nested deep inside the page.
        """
        while widget is not None:
            if isinstance(widget, cls):
                return widget
            widget = widget.parentWidget()
        return None

    @property
    def presenter(self) -> LoaderPresenter:
        return self._presenter

    @property
    def current_page(self) -> QWidget | None:
        return self._page

    @property
    def page_phase(self) -> LoaderPhase | None:
        """Phase the visible page was built for."""
        return self._page_phase

    def _update_ui_for_state(self, phase: LoaderPhase) -> None:
        if phase == LoaderPhase.SUCCESS:
            page = self._builder(self._presenter.value)
        elif phase == LoaderPhase.LOADING:
            page = self._loading_builder() if self._loading_builder else loading_placeholder()
        else:
            if self._failed_builder is not None:
                page = self._failed_builder(self._presenter.failed_result, self._presenter.error_message)
            else:
                page = failure_panel(self._presenter.error_message, self._presenter.refresh, self._settings)

        self._replace_page(page)
        self._page_phase = phase

    def _replace_page(self, page: QWidget) -> None:
        if self._page is not None:
            self.removeWidget(self._page)
            self._page.deleteLater()
        self._page = page
        self.addWidget(page)
        self.setCurrentWidget(page)

    def refresh(self) -> None:
        """Discard the current page and load again."""
        self._presenter.refresh()

    def cleanup(self) -> None:
        """Explicit cleanup - call before destruction."""
        self._presenter.dispose()

    def closeEvent(self, event) -> None:
        """Handle close event."""
        self.cleanup()
        super().closeEvent(event)
