"""DatasetSource Protocol and the resources it serves."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

# Resource name → file name in the dataset `dist/` folder.
RESOURCES: dict[str, str] = {
    "nsi_data": "nsi.min.json",
    "nsi_dissolved": "dissolved.min.json",
    "nsi_features": "featureCollection.min.json",
    "nsi_generics": "genericWords.min.json",
    "nsi_presets": "presets/nsi-id-presets.min.json",
    "nsi_replacements": "replacements.min.json",
    "nsi_trees": "trees.min.json",
}


@runtime_checkable
class DatasetSource(Protocol):
    """Protocol for anything that can serve the named dataset resources."""

    async def get(self, name: str) -> dict[str, Any]:
        """Fetch and decode one resource.

        Args:
            name: Resource name, one of RESOURCES (e.g. 'nsi_data').

        Returns:
            The decoded JSON document.

        Raises:
            SourceError: If the resource is unknown, missing or not valid JSON.
        """
        ...
