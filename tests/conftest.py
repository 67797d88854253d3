"""Shared test fixtures."""
import copy
import json

import pytest

from tagup.engine import Engine
from tagup.index import build_indices
from tagup.matching import LexicalMatcher, NullPresetClassifier
from tagup.presets import BuildingPresetClassifier


NSI_DATA = {
    "brands/shop/convenience": {
        "properties": {"exclude": {"generic": ["^convenience( store)?$"]}},
        "items": [
            {
                "id": "acme-1a2b3c",
                "displayName": "Acme",
                "tags": {
                    "brand": "Acme",
                    "brand:wikidata": "Q1001",
                    "brand:wikipedia": "en:Acme Stores",
                    "name": "Acme",
                    "shop": "convenience",
                },
            },
            {
                "id": "oldmart-000001",
                "displayName": "OldMart",
                "tags": {
                    "brand": "OldMart",
                    "brand:wikidata": "Q1002",
                    "name": "OldMart",
                    "shop": "convenience",
                },
            },
            {
                "id": "cornershop-abc123",
                "displayName": "Corner Shop",
                "matchNames": ["corner store"],
                "tags": {
                    "brand": "Corner Shop",
                    "brand:wikidata": "Q1003",
                    "name": "Corner Shop",
                    "shop": "convenience",
                },
            },
            {
                "id": "nowiki-000002",
                "displayName": "No Wiki",
                "tags": {"brand": "No Wiki", "name": "No Wiki", "shop": "convenience"},
            },
        ],
    },
    "brands/amenity/cafe": {
        "properties": {"preserveTags": ["^name"], "exclude": {"generic": ["^cafe$"]}},
        "items": [
            {
                "id": "beanery-a1b2c3",
                "displayName": "Beanery",
                "tags": {
                    "amenity": "cafe",
                    "brand": "Beanery",
                    "brand:wikidata": "Q2001",
                    "cuisine": "coffee_shop",
                    "name": "Beanery",
                },
            },
            {
                "id": "daybreak-d4e5f6",
                "displayName": "Daybreak",
                "preserveTags": [],
                "tags": {
                    "amenity": "cafe",
                    "brand": "Daybreak",
                    "brand:wikidata": "Q2002",
                    "name": "Daybreak",
                },
            },
        ],
    },
    "brands/amenity/fast_food": {
        "items": [
            {
                "id": "burgerbarn-b1c2d3",
                "displayName": "Burger Barn",
                "tags": {
                    "amenity": "fast_food",
                    "brand": "Burger Barn",
                    "brand:wikidata": "Q3001",
                    "cuisine": "burger",
                    "name": "Burger Barn",
                    "takeaway": "yes",
                },
            },
        ],
    },
    "brands/office/company": {
        "items": [
            {
                "id": "acmecorp-0f0f0f",
                "displayName": "Acme Corporate",
                "tags": {
                    "brand": "Acme",
                    "brand:wikidata": "Q1001",
                    "name": "Acme Corporate",
                    "office": "company",
                },
            },
        ],
    },
    "brands/shop/mall": {
        "items": [
            {
                "id": "westfield-w1w2w3",
                "displayName": "Westfield",
                "tags": {
                    "brand": "Westfield",
                    "brand:wikidata": "Q4001",
                    "building": "retail",
                    "name": "Westfield",
                    "shop": "mall",
                },
            },
        ],
    },
    "transit/route/bus": {
        "items": [
            {
                "id": "metrobus-r1r2r3",
                "displayName": "Metro Bus",
                "tags": {
                    "network": "Metro Bus",
                    "network:wikidata": "Q5001",
                    "operator": "Metro Transit",
                    "route": "bus",
                },
            },
        ],
    },
    "flags/man_made/flagpole": {
        "items": [
            {
                "id": "flagoffrance-f1f2f3",
                "displayName": "Flag of France",
                "matchNames": ["France"],
                "tags": {
                    "flag:name": "Flag of France",
                    "flag:type": "national",
                    "flag:wikidata": "Q6001",
                    "man_made": "flagpole",
                    "subject": "France",
                    "subject:wikidata": "Q142",
                },
            },
        ],
    },
}

TREES = {
    "brands": {"emoji": "🍔", "mainTag": "brand:wikidata"},
    "flags": {"emoji": "🚩", "mainTag": "flag:wikidata"},
    "operators": {"emoji": "💼", "mainTag": "operator:wikidata"},
    "transit": {"emoji": "🚇", "mainTag": "network:wikidata"},
}

DISSOLVED = {"oldmart-000001": [{"date": "2020-06-01", "upgrade": "acme-1a2b3c"}]}

REPLACEMENTS = {
    "Q9001": {"wikidata": "Q1001", "wikipedia": "en:Acme Stores"},
    "Q9002": {"wikidata": None, "wikipedia": None},
    "Q9003": {"wikidata": "Q2001"},
}

PRESETS = {
    "shop/convenience/acme-1a2b3c": {
        "name": "Acme",
        "geometry": ["point", "area"],
        "tags": {"brand:wikidata": "Q1001", "shop": "convenience"},
    },
}

FEATURES = {"type": "FeatureCollection", "features": [{"id": "acme-area.geojson", "properties": {}}]}

GENERICS = {"genericWords": ["^(shop|store)$"]}


class ScriptedMatcher:
    """Matcher returning canned hits per (key, value, name), recording every call."""

    def __init__(self, responses=None):
        self.responses = {k: list(v) for k, v in (responses or {}).items()}
        self.calls = []
        self.indexed = False
        self.location_indexed = False

    def build_match_index(self, data):
        self.indexed = True

    def build_location_index(self, data, location):
        self.location_indexed = True

    def match(self, key, value, name, loc=None):
        self.calls.append((key, value, name, loc))
        return list(self.responses.get((key, value, name), []))


@pytest.fixture
def nsi_data():
    return copy.deepcopy(NSI_DATA)


@pytest.fixture
def trees():
    return copy.deepcopy(TREES)


@pytest.fixture
def dissolved():
    return copy.deepcopy(DISSOLVED)


@pytest.fixture
def replacements():
    return copy.deepcopy(REPLACEMENTS)


@pytest.fixture
def indices(nsi_data, dissolved, replacements, trees):
    return build_indices(nsi_data, dissolved, replacements, trees)


@pytest.fixture
def scripted_matcher():
    """Factory for ScriptedMatcher instances."""
    return ScriptedMatcher


@pytest.fixture
def lexical_engine(indices):
    """Engine over the sample dataset with the reference matcher."""
    matcher = LexicalMatcher()
    matcher.build_match_index(indices.data)
    return Engine(indices=indices, matcher=matcher, presets=BuildingPresetClassifier())


@pytest.fixture
def scripted_engine(indices):
    """Factory for engines whose matcher answers from a response table."""

    def _make(responses):
        return Engine(
            indices=indices,
            matcher=ScriptedMatcher(responses),
            presets=NullPresetClassifier(),
        )

    return _make


@pytest.fixture
def data_dir(tmp_path):
    """Directory laid out like the dataset dist/ folder."""
    files = {
        "nsi.min.json": {"_meta": {"version": "test"}, "nsi": NSI_DATA},
        "dissolved.min.json": {"dissolved": DISSOLVED},
        "replacements.min.json": {"replacements": REPLACEMENTS},
        "trees.min.json": {"trees": TREES},
        "featureCollection.min.json": FEATURES,
        "genericWords.min.json": GENERICS,
    }
    for name, doc in files.items():
        (tmp_path / name).write_text(json.dumps(doc), encoding="utf-8")
    (tmp_path / "presets").mkdir()
    (tmp_path / "presets" / "nsi-id-presets.min.json").write_text(
        json.dumps({"presets": PRESETS}), encoding="utf-8"
    )
    return tmp_path
