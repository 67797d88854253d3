"""Exception taxonomy for the tag suggestion engine.

- DataShapeError: the canonical dataset is malformed (fatal for index build)
- LoadFailure: a stage of the asynchronous load pipeline rejected
- SourceError: a dataset resource could not be fetched or decoded

"No match" is never an error: upgrade returns None and generic
detection returns False.
"""

from __future__ import annotations


class TagupError(Exception):
    """Base class for all tagup errors."""


class DataShapeError(TagupError):
    """Raised when the canonical dataset does not have the expected shape."""


class LoadFailure(TagupError):
    """Raised when the dataset load pipeline fails at some stage."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"Load failed during '{stage}': {message}")
        self.stage = stage


class SourceError(LoadFailure):
    """Raised when a named dataset resource is missing or unreadable."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(f"fetch {name}", message)
        self.name = name
