"""Dataset sources: where the canonical dataset JSON comes from.

Usage:
    from tagup.sources import create_source

    source = create_source()  # FileSource or HttpSource based on env
    data = await source.get("nsi_data")
"""

from tagup.sources.factory import create_source
from tagup.sources.file_source import FileSource
from tagup.sources.http_source import HttpSource
from tagup.sources.protocol import RESOURCES, DatasetSource

__all__ = [
    # Factory
    "create_source",
    # Protocol & implementations
    "DatasetSource",
    "FileSource",
    "HttpSource",
    "RESOURCES",
]
