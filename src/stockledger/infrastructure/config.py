"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"
STORE_FILE_NAME = "store.json"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    low_stock_threshold: int = 10
    log_level: str = "WARNING"

    @property
    def store_path(self) -> Path:
        return self.data_dir / STORE_FILE_NAME

    @classmethod
    def from_env(cls) -> Settings:
        data_dir = os.getenv("STOCKLEDGER_DATA_DIR")
        threshold = os.getenv("STOCKLEDGER_LOW_STOCK_THRESHOLD", "10")
        try:
            low_stock_threshold = int(threshold)
        except ValueError:
            raise ValueError(
                f"STOCKLEDGER_LOW_STOCK_THRESHOLD must be an integer, got '{threshold}'"
            )
        return cls(
            data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
            low_stock_threshold=low_stock_threshold,
            log_level=os.getenv("STOCKLEDGER_LOG_LEVEL", "WARNING").upper(),
        )

    def with_overrides(
        self, data_dir: Path | None = None, log_level: str | None = None
    ) -> Settings:
        changes = {}
        if data_dir is not None:
            changes["data_dir"] = data_dir
        if log_level is not None:
            changes["log_level"] = log_level.upper()
        return replace(self, **changes)
