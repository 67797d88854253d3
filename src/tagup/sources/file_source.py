"""DatasetSource reading JSON files from a local directory."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from tagup.errors import SourceError
from tagup.sources.protocol import RESOURCES

logger = logging.getLogger(__name__)


class FileSource:
    """Serves resources from a directory mirroring the dataset `dist/` folder.

    For a resource such as `nsi_data` the following paths are tried, in order:
    `nsi_data.json`, `nsi.min.json`, `nsi.json`.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def _candidates(self, name: str) -> list[Path]:
        remote = RESOURCES[name]
        paths = [self._directory / f"{name}.json", self._directory / remote]
        if ".min.json" in remote:
            paths.append(self._directory / remote.replace(".min.json", ".json"))
        return paths

    def _read(self, name: str) -> dict[str, Any]:
        if name not in RESOURCES:
            raise SourceError(name, "unknown resource")

        for path in self._candidates(name):
            if path.is_file():
                try:
                    with open(path, encoding="utf-8") as f:
                        doc = json.load(f)
                except json.JSONDecodeError as e:
                    raise SourceError(name, f"invalid JSON in {path}: {e}") from e
                logger.debug(f"[FileSource] Read {name} from {path}")
                return doc

        raise SourceError(name, f"not found in {self._directory}")

    async def get(self, name: str) -> dict[str, Any]:
        return await asyncio.to_thread(self._read, name)
