"""Tests for the preset classifier."""

import pytest

from tagup.presets import BuildingPresetClassifier


@pytest.fixture
def classifier():
    return BuildingPresetClassifier()


class TestBuildingPresetClassifier:
    """Tests for BuildingPresetClassifier.match_tags()."""

    def test_notable_key(self, classifier):
        """The first notable key/value pair names the preset."""
        assert classifier.match_tags({"amenity": "cafe", "building": "yes"}, "area").id == "amenity/cafe"

    def test_notable_key_priority(self, classifier):
        """Notable keys are tried in priority order, not tag order."""
        tags = {"shop": "convenience", "amenity": "fuel"}
        assert classifier.match_tags(tags, "point").id == "amenity/fuel"

    def test_building_only(self, classifier):
        """A bare building is classified by its building value."""
        assert classifier.match_tags({"building": "retail", "name": "X"}, "area").id == "building/retail"

    def test_geometry_fallback(self, classifier):
        """With nothing notable the geometry kind is returned."""
        assert classifier.match_tags({"name": "X"}, "line").id == "line"


class TestMerge:
    """Tests for merged presets."""

    def test_merged_preset_wins(self, classifier):
        """A merged preset whose tags all match takes priority."""
        classifier.merge({
            "shop/convenience/acme": {
                "geometry": ["point", "area"],
                "tags": {"brand:wikidata": "Q1001", "shop": "convenience"},
            },
        })
        tags = {"shop": "convenience", "brand:wikidata": "Q1001"}
        assert classifier.match_tags(tags, "area").id == "shop/convenience/acme"

    def test_partial_match_ignored(self, classifier):
        """A merged preset missing one of its tags does not match."""
        classifier.merge({"shop/convenience/acme": {"tags": {"brand:wikidata": "Q1001", "shop": "convenience"}}})
        assert classifier.match_tags({"shop": "convenience"}, "area").id == "shop/convenience"

    def test_geometry_must_match(self, classifier):
        """A merged preset only applies to its listed geometries."""
        classifier.merge({"amenity/bench/x": {"geometry": ["point"], "tags": {"amenity": "bench"}}})
        assert classifier.match_tags({"amenity": "bench"}, "area").id == "amenity/bench"
        assert classifier.match_tags({"amenity": "bench"}, "point").id == "amenity/bench/x"

    def test_wildcard_value(self, classifier):
        """A '*' preset value matches any non-empty value."""
        classifier.merge({"building/any": {"tags": {"building": "*"}}})
        assert classifier.match_tags({"building": "barn"}, "area").id == "building/any"

    def test_presets_are_kept(self, classifier):
        """Merged presets are exposed by id."""
        classifier.merge({"a/b": {"tags": {"a": "b"}}}, {"features": [{"id": "f1"}]})
        assert set(classifier.presets) == {"a/b"}

    def test_feature_collection_accepted(self, classifier):
        """A feature collection passed with the bundle leaves the presets as merged."""
        classifier.merge({"a/b": {"tags": {"a": "b"}}}, {"type": "FeatureCollection", "features": [{"id": "f1"}]})
        assert classifier.match_tags({"a": "b"}, "area").id == "a/b"
