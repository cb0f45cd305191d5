"""Converter configuration file management.

Reads and writes the JSON file that holds the marker strings the
converter recognizes in the event stream and the placeholder text it
emits, so that a differently branded producer can be supported without
code changes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "location_prefix": "dart_location://",
    "loading_prefix": "loading ",
    "failed_to_load_prefix": "Failed to load ",
    "failed_to_load_name": "Failed to load",
    "unknown_location": "unknown",
    "comparison_failed": "Comparison failed",
}


class ConverterConfig:
    """Manages the converter's JSON configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        if path is not None and path.exists():
            self._load()

    def _load(self) -> None:
        """Load config from the file."""
        assert self.path is not None
        try:
            text = self.path.read_text()
            data = json.loads(text)
            if isinstance(data, dict):
                self._data = {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError):
            self._data = dict(DEFAULT_CONFIG)

    def save(self) -> None:
        """Write config to the file."""
        if self.path is None:
            raise ValueError("No config file path specified")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2)
            f.write("\n")

    @property
    def config(self) -> dict[str, Any]:
        """Get the full configuration dict."""
        return dict(self._data)

    def _get_str(self, key: str) -> str:
        return str(self._data.get(key, DEFAULT_CONFIG[key]))

    @property
    def location_prefix(self) -> str:
        """URL scheme prepended to a loaded file path in location hints."""
        return self._get_str("location_prefix")

    @property
    def loading_prefix(self) -> str:
        """Name prefix of the synthetic test announcing a file load."""
        return self._get_str("loading_prefix")

    @property
    def failed_to_load_prefix(self) -> str:
        """Error message prefix marking a load or compile failure."""
        return self._get_str("failed_to_load_prefix")

    @property
    def failed_to_load_name(self) -> str:
        """Test name reported for a synthesized load failure."""
        return self._get_str("failed_to_load_name")

    @property
    def unknown_location(self) -> str:
        """Location hint used before any file load has been seen."""
        return self._get_str("unknown_location")

    @property
    def comparison_failed(self) -> str:
        """Headline used when a failure message is only a comparison."""
        return self._get_str("comparison_failed")

    def set_config(
        self,
        location_prefix: str | None = None,
        loading_prefix: str | None = None,
    ) -> None:
        """Update configuration values."""
        if location_prefix is not None:
            self._data["location_prefix"] = location_prefix
        if loading_prefix is not None:
            self._data["loading_prefix"] = loading_prefix
