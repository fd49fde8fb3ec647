"""Parser configuration file management.

Reads and writes the optional JSON file that tunes how ``go test`` output
is decoded, how subtest nesting is measured and whether benchmark result
lines become events.  Every key has a default, so a missing or unreadable
file simply yields the defaults.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "indent_width": 4,
    "encoding": "utf-8",
    "encoding_errors": "replace",
    "benchmarks": False,
}


class ParserConfig:
    """Manages the parser's JSON configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        if path is not None and path.exists():
            self._load()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParserConfig:
        """Build an in-memory config with *data* merged over the defaults."""
        cfg = cls(None)
        cfg._data = {**DEFAULT_CONFIG, **data}
        return cfg

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

    @property
    def indent_width(self) -> int:
        """Get the number of spaces per subtest nesting level.

        Only used to measure the literal indentation of ``--- `` lines,
        which the parser compares with the depth the test was opened at
        and reports at DEBUG level when they differ.  The ``indent`` of an
        ``end_test`` event always comes from the test name, so this value
        never changes the events produced.
        """
        width = int(
            self._data.get("indent_width", DEFAULT_CONFIG["indent_width"])
        )
        if width < 1:
            raise ValueError(f"indent_width must be positive, got {width}")
        return width

    @property
    def encoding(self) -> str:
        """Get the codec used to decode bytes input."""
        return str(self._data.get("encoding", DEFAULT_CONFIG["encoding"]))

    @property
    def encoding_errors(self) -> str:
        """Get the codec error handler (``strict``, ``replace``, ...)."""
        return str(
            self._data.get(
                "encoding_errors", DEFAULT_CONFIG["encoding_errors"],
            )
        )

    @property
    def benchmarks(self) -> bool:
        """Get whether benchmark result lines become ``benchmark`` events.

        Off by default, in which case those lines pass through as output.
        """
        return bool(self._data.get("benchmarks", DEFAULT_CONFIG["benchmarks"]))

    def set_config(
        self,
        indent_width: int | None = None,
        encoding: str | None = None,
        encoding_errors: str | None = None,
        benchmarks: bool | None = None,
    ) -> None:
        """Update configuration values."""
        if indent_width is not None:
            self._data["indent_width"] = indent_width
        if encoding is not None:
            self._data["encoding"] = encoding
        if encoding_errors is not None:
            self._data["encoding_errors"] = encoding_errors
        if benchmarks is not None:
            self._data["benchmarks"] = benchmarks
