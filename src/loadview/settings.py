"""User-tunable loader settings persisted as TOML."""

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

import rtoml

logger = logging.getLogger(__name__)

# Remaining scroll distance (pixels) below which the next page is requested
DEFAULT_PROXIMITY_THRESHOLD = 500

# Height of the synthetic "loading more" / retry row after the last item
DEFAULT_SLOT_HEIGHT = 56


@dataclass(frozen=True)
class LoaderSettings:
    proximity_threshold: int = DEFAULT_PROXIMITY_THRESHOLD
    slot_height: int = DEFAULT_SLOT_HEIGHT
    loading_more_text: str = "Loading more..."
    retry_text: str = "Load failed, click to retry"
    load_failed_text: str = "Load failed, click to retry"

    def __post_init__(self) -> None:
        if self.proximity_threshold <= 0:
            raise ValueError(f"proximity_threshold must be positive, got {self.proximity_threshold}")
        if self.slot_height <= 0:
            raise ValueError(f"slot_height must be positive, got {self.slot_height}")

    @classmethod
    def from_dict(cls, data: dict) -> "LoaderSettings":
        """Build settings from a TOML table, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown loader settings: {sorted(unknown)}")
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_dict(self) -> dict:
        return asdict(self)


def save_settings(settings: LoaderSettings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        rtoml.dump({"loaders": settings.to_dict()}, f)


def load_settings(path: Path) -> LoaderSettings:
    """Load settings from path, creating the file with defaults if missing.

    A file that cannot be parsed or holds invalid values yields the defaults;
    the problem is logged rather than raised so the UI can still come up.
    """
    if not path.exists():
        logger.info(f"Settings file not found. Creating a new one at {path}")
        defaults = LoaderSettings()
        save_settings(defaults, path)
        return defaults

    logger.info(f"Loading settings from {path}")
    try:
        data = rtoml.load(path)
        return LoaderSettings.from_dict(data.get("loaders", {}))
    except (rtoml.TomlParsingError, TypeError, ValueError) as e:
        logger.error(f"Failed to read loader settings from {path}: {e}")
        return LoaderSettings()
