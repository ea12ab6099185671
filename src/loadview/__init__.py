"""Top-level package for loadview."""

from pathlib import Path

from platformdirs import user_data_dir

__package_name__ = "loadview"

# --- Use platformdirs to define standard paths ---
# - Windows: C:\Users\<user>\AppData\Local\loadview
# - macOS:   ~/Library/Application Support/loadview
# - Linux:   ~/.local/share/loadview
APP_DIR = Path(user_data_dir(appname=__package_name__))

LOG_DIR = APP_DIR / "logs"
LOG_FILE_PATH = LOG_DIR / "loadview.log"

# Define the path to the settings file
APP_SETTINGS_PATH = APP_DIR / "settings.toml"

# A helpful reference to the source code root
__root__ = Path(__file__).parent.parent.parent
