"""SuggestionService: dataset readiness and the public matching interface.

Status moves through an explicit state machine:

    loading ──load() succeeds──▶ ok
       └─any stage fails or───▶ failed   (terminal, never retried)
         the load is cancelled

The load pipeline runs its stages one after another:

    presets → settle delay → location sets → dataset → indices

Until the status is "ok" the service answers over an empty Engine, so
`upgrade()` returns None and `is_generic()` returns False instead of
raising.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Literal, Mapping

from tagup.config import Settings
from tagup.engine import Engine
from tagup.errors import LoadFailure
from tagup.index import build_indices
from tagup.matching.lexical import LexicalMatcher
from tagup.matching.null_matcher import NullLocationService
from tagup.matching.protocol import Location, LocationService, Matcher, PresetClassifier
from tagup.presets import BuildingPresetClassifier
from tagup.sources.factory import create_source
from tagup.sources.protocol import DatasetSource
from tagup.types import FeatureTags, Indices

logger = logging.getLogger(__name__)

Status = Literal["loading", "ok", "failed"]


class SuggestionService:
    """Owns the Engine and the load pipeline that produces it.

    The Engine is swapped in exactly once, on the transition to "ok";
    matching operations never write to it.
    """

    def __init__(
        self,
        source: DatasetSource,
        matcher: Matcher | None = None,
        presets: PresetClassifier | None = None,
        location: LocationService | None = None,
        settle_delay: float = 0.1,
    ) -> None:
        self._source = source
        self._matcher = matcher or LexicalMatcher()
        self._presets = presets or BuildingPresetClassifier()
        self._location = location or NullLocationService()
        self._settle_delay = settle_delay

        self._status: Status = "loading"
        self._engine = Engine.empty()
        self._started = False

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SuggestionService":
        settings = settings or Settings.from_env()
        return cls(source=create_source(settings), settle_delay=settings.settle_delay)

    @property
    def started(self) -> bool:
        return self._started

    @property
    def engine(self) -> Engine:
        return self._engine

    def status(self) -> Status:
        return self._status

    async def load(self, raise_on_failure: bool = False) -> Status:
        """Run the load pipeline once.

        Args:
            raise_on_failure: Raise LoadFailure instead of only recording
                the "failed" status.

        Returns:
            The resulting status. Calling again returns the current status
            without reloading.
        """
        if self._started:
            logger.debug(f"[Service] Load already started (status={self._status})")
            return self._status
        self._started = True

        stage = "presets"
        try:
            await self._load_presets()

            stage = "settle"
            await asyncio.sleep(self._settle_delay)

            stage = "locations"
            await self._location.resolve_pending()

            stage = "data"
            engine = await self._load_data()
        except asyncio.CancelledError:
            self._status = "failed"
            logger.warning(f"[Service] Load cancelled during '{stage}'")
            raise
        except Exception as e:
            self._status = "failed"
            logger.error(f"[Service] Load failed during '{stage}': {e}")
            if raise_on_failure:
                raise LoadFailure(stage, str(e)) from e
            return self._status

        self._engine = engine
        self._status = "ok"
        logger.info("[Service] Dataset ready")
        return self._status

    async def _load_presets(self) -> None:
        presets_doc, features = await asyncio.gather(
            self._source.get("nsi_presets"),
            self._source.get("nsi_features"),
        )
        presets: Mapping[str, Any] = presets_doc["presets"]
        # Mark every dataset preset as a suggestion preset.
        marked = {pid: {**preset, "suggestion": True} for pid, preset in presets.items()}
        self._presets.merge(marked, features)

    async def _load_data(self) -> Engine:
        data, dissolved, replacements, trees = await asyncio.gather(
            self._source.get("nsi_data"),
            self._source.get("nsi_dissolved"),
            self._source.get("nsi_replacements"),
            self._source.get("nsi_trees"),
        )
        indices = build_indices(
            data["nsi"],
            dissolved["dissolved"],
            replacements["replacements"],
            trees["trees"],
        )
        self._matcher.build_match_index(indices.data)
        self._matcher.build_location_index(indices.data, self._location)
        return Engine(indices=indices, matcher=self._matcher, presets=self._presets)

    def reset(self) -> None:
        """Called when the caller's edits are saved. Nothing to reset."""

    def upgrade(self, tags: FeatureTags, loc: Location | None = None) -> dict[str, str] | None:
        """Suggest tag upgrades. See `tagup.upgrade.upgrade_tags`."""
        return self._engine.upgrade(tags, loc)

    def is_generic(self, tags: FeatureTags) -> bool:
        """Is the `name` tag generic? See `tagup.upgrade.is_generic_name`."""
        return self._engine.is_generic(tags)

    def raw_indices(self) -> Indices:
        """Direct access to the indices, for diagnostics and tests."""
        return self._engine.indices
