"""Runtime configuration read from environment variables.

Environment Variables:
    TAGUP_DATA_DIR: Directory holding the dataset JSON files. When unset,
        the files are downloaded from TAGUP_BASE_URL.
    TAGUP_BASE_URL: Base URL of the dataset `dist/` folder.
    TAGUP_SETTLE_DELAY: Seconds to wait before resolving location sets (default: 0.1)
    TAGUP_HTTP_TIMEOUT: Download timeout in seconds (default: 30)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/osmlab/name-suggestion-index/main/dist"


@dataclass(frozen=True)
class Settings:
    data_dir: Path | None = None
    base_url: str = DEFAULT_BASE_URL
    settle_delay: float = 0.1
    http_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "Settings":
        data_dir = os.environ.get("TAGUP_DATA_DIR")
        return cls(
            data_dir=Path(data_dir) if data_dir else None,
            base_url=os.environ.get("TAGUP_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            settle_delay=float(os.environ.get("TAGUP_SETTLE_DELAY", "0.1")),
            http_timeout=float(os.environ.get("TAGUP_HTTP_TIMEOUT", "30")),
        )
