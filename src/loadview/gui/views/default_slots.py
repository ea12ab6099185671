"""Default widgets shown while loading, after a failure, and at the end of
a paginated list. Callers can replace any of them with their own builders.
"""

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QLabel, QProgressBar, QPushButton, QVBoxLayout, QWidget

from loadview.gui.theme import Styles, Typography
from loadview.settings import LoaderSettings


def _busy_bar(width: int | None = None) -> QProgressBar:
    bar = QProgressBar()
    bar.setRange(0, 0)  # indeterminate
    bar.setTextVisible(False)
    if width is not None:
        bar.setFixedWidth(width)
    return bar


def loading_placeholder() -> QWidget:
    """Neutral placeholder with a busy indicator centered in it."""
    widget = QWidget()
    layout = QVBoxLayout(widget)
    layout.addStretch()
    layout.addWidget(_busy_bar(160), alignment=Qt.AlignmentFlag.AlignCenter)
    layout.addStretch()
    return widget


def failure_panel(message: str | None, on_retry: Callable[[], None], settings: LoaderSettings) -> QWidget:
    """Error message above a retry button."""
    widget = QWidget()
    layout = QVBoxLayout(widget)
    layout.addStretch()

    if message:
        label = QLabel(message)
        label.setObjectName("error_label")
        label.setWordWrap(True)
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        label.setStyleSheet(Typography.ERROR_TEXT)
        layout.addWidget(label)

    retry_btn = QPushButton(settings.load_failed_text)
    retry_btn.setObjectName("retry_button")
    retry_btn.setStyleSheet(Styles.PRIMARY_BUTTON)
    retry_btn.clicked.connect(on_retry)
    layout.addWidget(retry_btn, alignment=Qt.AlignmentFlag.AlignCenter)

    layout.addStretch()
    return widget


def loading_more_row(settings: LoaderSettings) -> QWidget:
    """Trailing list row shown while the next page is on its way."""
    widget = QWidget()
    widget.setFixedHeight(settings.slot_height)
    layout = QHBoxLayout(widget)
    layout.addStretch()
    layout.addWidget(_busy_bar(48))
    label = QLabel(settings.loading_more_text)
    label.setStyleSheet(Typography.HELPER_TEXT)
    layout.addWidget(label)
    layout.addStretch()
    return widget


def retry_row(on_retry: Callable[[], None], settings: LoaderSettings) -> QWidget:
    """Trailing list row offering to re-request a failed page."""
    widget = QWidget()
    widget.setFixedHeight(settings.slot_height)
    layout = QHBoxLayout(widget)

    retry_btn = QPushButton(settings.retry_text)
    retry_btn.setObjectName("retry_button")
    retry_btn.setStyleSheet(Styles.RETRY_BUTTON)
    retry_btn.clicked.connect(on_retry)
    layout.addWidget(retry_btn, alignment=Qt.AlignmentFlag.AlignCenter)
    return widget
