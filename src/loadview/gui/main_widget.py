"""Demo window wiring both loaders to simulated background work."""

import logging
import random
import sys

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QApplication,
    QDockWidget,
    QLabel,
    QMainWindow,
    QPlainTextEdit,
    QTabWidget,
)

from loadview.gui.presenters.auto_load_more_presenter import AutoLoadMorePresenter
from loadview.gui.presenters.loader_presenter import LoaderPresenter
from loadview.gui.views.auto_load_more_list import AutoLoadMoreList
from loadview.gui.views.loader_widget import LoaderWidget
from loadview.logger import qt_handler_instance
from loadview.settings import LoaderSettings
from loadview.task_manager import CancellationToken, TaskHandle, TaskManager
from loadview.verification import simple_verifier

logger = logging.getLogger(__name__)

DEMO_TOTAL_COUNT = 95
DEMO_PAGE_SIZE = 20


def _load_greeting(token: CancellationToken, handle: TaskHandle) -> str | None:
    if token.sleep_unless_cancelled(1.0):
        return None
    roll = random.random()
    if roll < 0.25:
        raise ConnectionError("network down")
    if roll < 0.4:
        return ""  # rejected by the verifier
    return "Hello from a background thread"


def _load_page(token: CancellationToken, handle: TaskHandle, loaded_count: int) -> list[str] | None:
    if token.sleep_unless_cancelled(0.6):
        return None
    if random.random() < 0.15:
        return None
    end = min(loaded_count + DEMO_PAGE_SIZE, DEMO_TOTAL_COUNT)
    return [f"Item {i + 1}" for i in range(loaded_count, end)]


class MainWindow(QMainWindow):
    def __init__(self, settings: LoaderSettings):
        super().__init__()
        self.setWindowTitle("loadview demo")
        self.setMinimumSize(500, 500)

        self.task_manager = TaskManager(self)

        self.loader_presenter = LoaderPresenter(
            self.task_manager.load_task(_load_greeting, name="greeting"),
            result_verify=simple_verifier(bool, error_msg="Server sent an empty greeting"),
            name="greeting",
        )
        self.loader_widget = LoaderWidget(
            self.loader_presenter,
            builder=lambda value: QLabel(value, alignment=Qt.AlignmentFlag.AlignCenter),
            settings=settings,
        )

        initial_items = [f"Item {i + 1}" for i in range(DEMO_PAGE_SIZE)]
        self.list_presenter = AutoLoadMorePresenter(
            self.task_manager.page_task(_load_page, name="demo page"),
            total_count=DEMO_TOTAL_COUNT,
            initial_items=initial_items,
            proximity_threshold=settings.proximity_threshold,
            name="demo list",
        )
        self.list_widget = AutoLoadMoreList(
            self.list_presenter,
            builder=lambda item: QLabel(item),
            settings=settings,
        )

        tabs = QTabWidget(self)
        tabs.addTab(self.loader_widget, "Loader")
        tabs.addTab(self.list_widget, "Auto Load More")
        self.setCentralWidget(tabs)

        self.build_docked_logger()

    def build_docked_logger(self) -> None:
        self.log_view = QPlainTextEdit()
        self.log_view.setReadOnly(True)
        qt_handler_instance.emitter.message_written.connect(self.log_view.insertPlainText)

        dock = QDockWidget("Log", self)
        dock.setWidget(self.log_view)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, dock)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Dispose both presenters, then wait for worker threads."""
        logger.info("Application exit initiated")
        self.loader_widget.cleanup()
        self.list_widget.cleanup()
        self.task_manager.shutdown()
        logger.info("Application cleanup complete")
        super().closeEvent(event)


def launch_main(settings: LoaderSettings | None = None):
    app = QApplication(sys.argv)
    window = MainWindow(settings or LoaderSettings())
    window.show()
    app.exec()
