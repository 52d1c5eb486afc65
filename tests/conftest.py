"""
Shared pytest fixtures for geoconvert tests.

Provides reusable datasets, rows and a deterministic factory to avoid
duplication across test files.
"""

import itertools
from datetime import datetime, timezone

import pytest

from geoconvert.factory import DatasetFactory


# =============================================================================
# Factory Fixtures
# =============================================================================

FIXED_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_time():
    """Timestamp returned by the factory fixture's clock."""
    return FIXED_TIME


@pytest.fixture
def factory():
    """DatasetFactory with sequential ids and a fixed clock."""
    counter = itertools.count(1)
    return DatasetFactory(
        id_generator=lambda: f"ds_{next(counter)}",
        clock=lambda: FIXED_TIME,
    )


# =============================================================================
# Tabular Fixtures
# =============================================================================

@pytest.fixture
def xy_rows():
    """20 rows with x/y columns holding valid decimal degrees."""
    return [{"x": str(10 + i), "y": str(20 + i)} for i in range(20)]


@pytest.fixture
def station_rows():
    """Rows with coordinates, a numeric column and a text column."""
    return [
        {"Station": "Alpha", "lat": "-33.86", "lon": "151.21", "depth": "12.5"},
        {"Station": "Bravo", "lat": "-37.81", "lon": "144.96", "depth": "7"},
        {"Station": "Charlie", "lat": "n/a", "lon": "", "depth": ""},
    ]


@pytest.fixture
def station_table(factory, station_rows):
    """TableDataset built from station_rows."""
    return factory.create_table_dataset(
        "stations", station_rows, source={"file": "stations.csv", "format": "csv"}
    )


@pytest.fixture
def photo_rows():
    """Rows carrying attachment values in the importer's tagged-mapping form."""
    return [
        {
            "site": "A",
            "photo": {"_att": True, "name": "a.jpg", "dataUrl": "data:image/jpeg;base64,AAAA"},
        },
        {"site": "B", "photo": {"_att": True, "dataUrl": "data:image/png;base64,BBBB"}},
        {"site": "C", "photo": None},
    ]


# =============================================================================
# Spatial Fixtures
# =============================================================================

@pytest.fixture
def mixed_feature_collection():
    """GeoJSON mapping with points, a line, a polygon, a collection and a null geometry."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [151.2, -33.9]},
                "properties": {"name": "p1", "kind": "point"},
            },
            {
                "type": "Feature",
                "geometry": {"type": "MultiPoint", "coordinates": [[150.0, -34.0], [151.0, -33.0]]},
                "properties": {"name": "mp1", "kind": "point"},
            },
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": [[144.9, -37.8], [145.1, -37.7]]},
                "properties": {"name": "l1", "kind": "line"},
            },
            {
                "type": "Feature",
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[115.8, -32.0], [116.0, -32.0], [116.0, -31.9], [115.8, -32.0]]],
                },
                "properties": {"name": "poly1", "kind": "polygon"},
            },
            {
                "type": "Feature",
                "geometry": {
                    "type": "GeometryCollection",
                    "geometries": [{"type": "Point", "coordinates": [138.6, -34.9]}],
                },
                "properties": {"name": "gc1", "kind": "collection"},
            },
            {
                "type": "Feature",
                "geometry": None,
                "properties": {"name": "none1", "kind": "none"},
            },
        ],
    }


@pytest.fixture
def mixed_dataset(factory, mixed_feature_collection):
    """SpatialDataset built from mixed_feature_collection."""
    return factory.create_spatial_dataset(
        "survey", mixed_feature_collection, source={"file": "survey.geojson", "format": "geojson"}
    )


@pytest.fixture
def points_dataset(factory):
    """SpatialDataset holding only Point features."""
    return factory.create_spatial_dataset(
        "points",
        {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": [float(i), float(i)]},
                    "properties": {"idx": i},
                }
                for i in range(3)
            ],
        },
    )
