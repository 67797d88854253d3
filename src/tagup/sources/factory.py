"""Source factory for creating a DatasetSource from settings.

Uses FileSource when a data directory is configured, HttpSource otherwise.
"""

from __future__ import annotations

import logging

from tagup.config import Settings
from tagup.sources.file_source import FileSource
from tagup.sources.http_source import HttpSource
from tagup.sources.protocol import DatasetSource

logger = logging.getLogger(__name__)


def create_source(settings: Settings | None = None) -> DatasetSource:
    """Create a dataset source based on configuration.

    Args:
        settings: Settings to use; read from the environment when omitted.

    Returns:
        DatasetSource: FileSource if TAGUP_DATA_DIR is set, HttpSource otherwise.
    """
    settings = settings or Settings.from_env()

    if settings.data_dir is not None:
        logger.debug(f"[Source] TAGUP_DATA_DIR set, reading from {settings.data_dir}")
        return FileSource(settings.data_dir)

    logger.info(f"[Source] No TAGUP_DATA_DIR, downloading from {settings.base_url}")
    return HttpSource(settings.base_url, timeout=settings.http_timeout)
