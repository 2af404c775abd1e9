"""Configuration and settings persistence."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from procpipe.config.paths import get_paths

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "PROCPIPE_LOG_LEVEL"
LOG_FILE_ENV = "PROCPIPE_LOG_FILE"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def get_settings_path() -> Path:
    """Get the path to the settings file."""
    return get_paths().global_settings


class Settings:
    """Persistent settings for procpipe."""

    _defaults: dict[str, Any] = {
        "log_level": "WARNING",
        "reap_background": False,
    }

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load settings from disk."""
        path = get_settings_path()
        if path.exists():
            try:
                loaded = json.loads(path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                loaded = {}
            self._data = loaded if isinstance(loaded, dict) else {}
        else:
            self._data = {}

    def _save(self) -> None:
        """Save settings to disk."""
        path = get_settings_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
            logger.info("Saved settings to %s: %s", path, self._data)
        except OSError as e:
            logger.error("Failed to save settings: %s", e)

    def get(self, key: str) -> Any:
        """Get a setting value, falling back to default."""
        return self._data.get(key, self._defaults.get(key))

    def set(self, key: str, value: Any) -> None:
        """Set a setting value and persist to disk."""
        self._data[key] = value
        self._save()

    @property
    def log_level(self) -> str:
        """Logging level name.

        Priority: PROCPIPE_LOG_LEVEL env var > settings > WARNING.
        Unknown level names fall back to the default.
        """
        raw = os.environ.get(LOG_LEVEL_ENV) or self.get("log_level")
        level = str(raw).strip().upper()
        if level not in _LOG_LEVELS:
            return str(self._defaults["log_level"])
        return level

    @log_level.setter
    def log_level(self, value: str) -> None:
        self.set("log_level", str(value).strip().upper())

    @property
    def log_file(self) -> Path | None:
        """Log file path, or None to log to stderr.

        Priority: PROCPIPE_LOG_FILE env var > settings.
        """
        raw = os.environ.get(LOG_FILE_ENV) or self._data.get("log_file")
        if not raw:
            return None
        return Path(raw).expanduser()

    @log_file.setter
    def log_file(self, value: str | Path | None) -> None:
        if value is None:
            self._data.pop("log_file", None)
            self._save()
            return
        self.set("log_file", str(value))

    @property
    def reap_background(self) -> bool:
        """Whether the CLI waits for non-terminal stages after a run."""
        return bool(self.get("reap_background"))

    @reap_background.setter
    def reap_background(self, value: bool) -> None:
        self.set("reap_background", bool(value))


settings = Settings()
