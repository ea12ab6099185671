# loadview/startup.py

import logging

from loadview import APP_DIR, APP_SETTINGS_PATH, LOG_FILE_PATH, __package_name__
from loadview.settings import LoaderSettings, load_settings

logger = logging.getLogger(__name__)


def initialize_app() -> LoaderSettings:
    """
    Ensures the application directory and settings file exist, then returns
    the loader settings used by the widgets.
    """
    logger.info(f"--- Launching {__package_name__} ---")
    logger.info(f"Logs saved to: {LOG_FILE_PATH}")
    logger.info("-------------------------------------------")

    try:
        APP_DIR.mkdir(parents=True, exist_ok=True)
        return load_settings(APP_SETTINGS_PATH)
    except OSError as e:
        logger.error(f"Failed to initialize application directories or settings: {e}")
        return LoaderSettings()
