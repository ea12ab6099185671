import os
import time
import uuid

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402
from PySide6.QtCore import QCoreApplication  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from loadview.logger import setup_logging  # noqa: E402
from loadview.task_manager import TaskHandle  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_app_logging(tmp_path_factory):
    """
    Configure the application's logging once for the whole test session.
    Log files go to a temporary directory and stderr is left alone.
    """
    setup_logging(log_dir=tmp_path_factory.mktemp("logs"), capture_stderr=False)


@pytest.fixture
def qapp():
    """Ensure a QApplication exists for Qt signal and widget tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


class HandleFactory:
    """Zero-argument task factory handing out manually driven TaskHandles.

    Tests settle the handles themselves with _emit_completed/_emit_failed,
    so signal delivery is direct and synchronous on the test thread.
    """

    def __init__(self, name: str = "test load"):
        self.name = name
        self.handles: list[TaskHandle] = []

    def __call__(self) -> TaskHandle:
        handle = TaskHandle(str(uuid.uuid4()), self.name)
        self.handles.append(handle)
        return handle

    @property
    def last(self) -> TaskHandle:
        return self.handles[-1]


class PageFetchRecorder:
    """Page fetch function recording the loaded_count of every call."""

    def __init__(self, name: str = "test page"):
        self.name = name
        self.calls: list[int] = []
        self.handles: list[TaskHandle] = []

    def __call__(self, loaded_count: int) -> TaskHandle:
        self.calls.append(loaded_count)
        handle = TaskHandle(str(uuid.uuid4()), f"{self.name} (from {loaded_count})")
        self.handles.append(handle)
        return handle

    @property
    def last(self) -> TaskHandle:
        return self.handles[-1]


@pytest.fixture
def load_task(qapp):
    return HandleFactory()


@pytest.fixture
def page_fetch(qapp):
    return PageFetchRecorder()


def wait_until(predicate, timeout: float = 5.0) -> bool:
    """Pump the Qt event loop until predicate() holds or timeout elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        if predicate():
            return True
        time.sleep(0.01)
    return False
