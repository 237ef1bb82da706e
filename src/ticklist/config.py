"""Configuration models for ticklist."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel

# Default config directory
TICKLIST_DIR = Path(".ticklist")
CONFIG_FILE = TICKLIST_DIR / "config.json"
DATA_FILE = TICKLIST_DIR / "tasks.txt"


class TicklistConfig(BaseModel):
    """Main configuration for ticklist."""

    data_file: str = str(DATA_FILE)
    # Reject unrecognised kind letters instead of keeping them as placeholders
    strict: bool = False

    @property
    def data_path(self) -> Path:
        return Path(self.data_file)

    @classmethod
    def load(cls, path: Path | None = None) -> TicklistConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_FILE

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)
