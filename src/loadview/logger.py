import logging
import logging.handlers
import os
import sys
from pathlib import Path

from PySide6 import QtCore

from loadview import LOG_DIR


class StderrLogger:
    """
    A file-like object that redirects writes to a logger.
    """

    def __init__(self, logger_name="stderr"):
        self.logger = logging.getLogger(logger_name)

    def write(self, message):
        if message.strip():
            self.logger.error(message.strip())

    def flush(self):
        pass


def handle_exception(exc_type, exc_value, exc_traceback):
    """
    Global exception hook to log unhandled exceptions.
    """
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logging.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_traceback))


class LogEmitter(QtCore.QObject):
    """
    Holds the signal for the QtHandler so a log panel can subscribe to it.
    """

    message_written = QtCore.Signal(str)


class QtHandler(logging.Handler):
    """
    A logging handler that emits log records via a Qt signal.
    It USES a LogEmitter instance (composition) to avoid method name clashes.
    """

    def __init__(self):
        super().__init__()
        self.emitter = LogEmitter()

    def emit(self, record):
        message = self.format(record)
        if message:
            self.emitter.message_written.emit(message + "\n")


# Global instance of the QtHandler so it can be accessed from a log panel
qt_handler_instance = QtHandler()


def setup_logging(log_dir: Path = LOG_DIR, capture_stderr: bool = True):
    """
    Configures the root logger for the entire application.

    Does nothing if the root logger already has handlers.
    """
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        return

    root_logger.setLevel(logging.DEBUG if os.getenv("DEBUG") == "1" else logging.INFO)
    log_format = "%(asctime)s | %(levelname)-8s | %(name)-15s | %(lineno)4d | %(message)s"
    formatter = logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S")

    # 1. File Handler
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_dir / "loadview.log", maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # 2. Console Handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # 3. Qt Handler
    qt_handler_instance.setLevel(logging.INFO)
    qt_handler_instance.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(qt_handler_instance)

    if capture_stderr:
        sys.stderr = StderrLogger()
        sys.excepthook = handle_exception

    root_logger.info("Logging configured.")
