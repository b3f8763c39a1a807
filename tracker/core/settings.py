"""
Settings Manager
Simple JSON-based settings with defaults
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger


class Settings:
    """Application settings manager."""

    DEFAULTS = {
        'check_interval': 30,
        'server_address': '',
        'timezone': 'UTC',
        'render_charts': True,
        'request_timeout': 5.0,
    }

    def __init__(self, data_dir: Path = None):
        """Initialize settings."""
        if data_dir is None:
            data_dir = Path("data")

        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.file = self.data_dir / "settings.json"
        self.data = self.DEFAULTS.copy()

        self._load()

    def get(self, key: str, default: Any = None) -> Any:
        """Get setting value."""
        return self.data.get(key, default)

    def set(self, key: str, value: Any):
        """Set setting value and save."""
        self.data[key] = value
        self._save()

    def _load(self):
        """Load from file."""
        if self.file.exists():
            try:
                with open(self.file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Ignoring unreadable settings file {self.file}: {e}")
                return
            if isinstance(loaded, dict):
                self.data.update(loaded)
            else:
                logger.warning(f"Ignoring settings file {self.file}: not an object")

    def _save(self):
        """Save to file."""
        try:
            with open(self.file, 'w', encoding='utf-8') as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.error(f"Could not save settings: {e}")
