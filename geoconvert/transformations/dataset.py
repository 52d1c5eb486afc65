# =============================================================================
# Dataset Transforms
# =============================================================================
# Pure dataset -> dataset operations:
# - table_to_spatial / spatial_to_table
# - merge_datasets
# - split_by_geometry_type
# Every operation returns newly constructed datasets and never mutates input.
# =============================================================================

import logging
import math
from typing import Optional, Sequence

from geoconvert.factory import DatasetFactory, get_default_factory
from geoconvert.models import (
    AnyDataset,
    Feature,
    FeatureCollection,
    Geometry,
    GeometryType,
    SpatialDataset,
    TableDataset,
)
from geoconvert.spatial_utils.coordinates import parse_coordinate

__all__ = [
    "SOURCE_FILE_FIELD",
    "GEOMETRY_BUCKETS",
    "table_to_spatial",
    "spatial_to_table",
    "merge_datasets",
    "split_by_geometry_type",
]

log = logging.getLogger(__name__)

SOURCE_FILE_FIELD = "source_file"

# Geometry type -> split bucket. Anything not listed (GeometryCollection or an
# unknown tag) goes to the polygon bucket.
GEOMETRY_BUCKETS = {
    GeometryType.POINT.value: "point",
    GeometryType.MULTI_POINT.value: "point",
    GeometryType.LINE_STRING.value: "line",
    GeometryType.MULTI_LINE_STRING.value: "line",
    GeometryType.POLYGON.value: "polygon",
    GeometryType.MULTI_POLYGON.value: "polygon",
}
_BUCKET_LABELS = {"point": "Points", "line": "Lines", "polygon": "Polygons"}


def table_to_spatial(
    dataset: TableDataset,
    lat_field: str,
    lon_field: str,
    factory: Optional[DatasetFactory] = None,
) -> SpatialDataset:
    """
    Turn a table with coordinate columns into point features.

    Rows whose latitude or longitude cannot be parsed become features without
    geometry. Every row's properties are kept as-is, coordinate columns
    included.

    Args:
        dataset: Source table
        lat_field: Column holding latitude
        lon_field: Column holding longitude
        factory: Factory for the new dataset

    Returns:
        New SpatialDataset with one feature per row
    """
    if not isinstance(dataset, TableDataset):
        raise TypeError(f"table_to_spatial expects a TableDataset, got {type(dataset).__name__}")
    factory = factory or get_default_factory()

    features = []
    for row in dataset.rows:
        lat = parse_coordinate(row.get(lat_field))
        lon = parse_coordinate(row.get(lon_field))
        geometry = None
        if math.isfinite(lat) and math.isfinite(lon):
            geometry = Geometry(type=GeometryType.POINT.value, coordinates=[lon, lat])
        features.append(Feature(geometry=geometry, properties=dict(row)))

    return factory.create_spatial_dataset(
        dataset.name, FeatureCollection(features=features), dataset.source
    )


def spatial_to_table(dataset: SpatialDataset, factory: Optional[DatasetFactory] = None) -> TableDataset:
    """Drop geometry and keep each feature's properties as a row."""
    if not isinstance(dataset, SpatialDataset):
        raise TypeError(f"spatial_to_table expects a SpatialDataset, got {type(dataset).__name__}")
    factory = factory or get_default_factory()

    rows = [dict(f.properties) for f in dataset.features]
    return factory.create_table_dataset(dataset.name, rows, source=dataset.source)


def merge_datasets(
    datasets: Sequence[AnyDataset],
    add_source_field: bool = True,
    factory: Optional[DatasetFactory] = None,
) -> SpatialDataset:
    """
    Concatenate the records of several datasets into one spatial dataset.

    Table rows become features without geometry. With `add_source_field`,
    each record gets a trailing "source_file" property naming the dataset it
    came from (its source file, or its display name).

    Args:
        datasets: Datasets in output order
        add_source_field: Whether to tag records with their origin
        factory: Factory for the new dataset

    Returns:
        New SpatialDataset named "Merged_<names>"
    """
    factory = factory or get_default_factory()

    features: list[Feature] = []
    for ds in datasets:
        label = ds.source_label
        if isinstance(ds, SpatialDataset):
            for feature in ds.features:
                props = dict(feature.properties)
                if add_source_field:
                    props[SOURCE_FILE_FIELD] = label
                features.append(feature.model_copy(update={"properties": props}))
        else:
            for row in ds.rows:
                props = dict(row)
                if add_source_field:
                    props[SOURCE_FILE_FIELD] = label
                features.append(Feature(geometry=None, properties=props))

    joined = "_".join(ds.name for ds in datasets)[: factory.settings.merge_name_max_length]
    merged = factory.create_spatial_dataset(
        f"Merged_{joined}",
        FeatureCollection(features=features),
        {"format": "merge", "merged_from": [ds.id for ds in datasets]},
    )
    log.info(f"Merged {len(datasets)} datasets into {merged.id} ({len(features)} features)")
    return merged


def split_by_geometry_type(
    dataset: AnyDataset, factory: Optional[DatasetFactory] = None
) -> list[AnyDataset]:
    """
    Split a mixed-geometry dataset into point, line and polygon datasets.

    Returns `[dataset]` itself when there is nothing to split: a table, an
    empty dataset, or features that all fall into one bucket. Features
    without geometry are not carried into the split outputs.

    Args:
        dataset: Dataset to split
        factory: Factory for the new datasets

    Returns:
        One dataset per non-empty bucket, named "<name> - Points|Lines|Polygons"
    """
    if not isinstance(dataset, SpatialDataset) or not dataset.features:
        return [dataset]
    factory = factory or get_default_factory()

    groups: dict[str, list[Feature]] = {"point": [], "line": [], "polygon": []}
    for feature in dataset.features:
        if feature.geometry is None or not feature.geometry.type:
            continue
        groups[GEOMETRY_BUCKETS.get(feature.geometry.type, "polygon")].append(feature)

    populated = [(bucket, feats) for bucket, feats in groups.items() if feats]
    if len(populated) <= 1:
        return [dataset]

    parts = [
        factory.create_spatial_dataset(
            f"{dataset.name} - {_BUCKET_LABELS[bucket]}",
            FeatureCollection(features=feats),
            dataset.source,
        )
        for bucket, feats in populated
    ]
    log.info(
        f"Split {dataset.id} into {len(parts)} datasets: "
        + ", ".join(f"{_BUCKET_LABELS[b]}={len(f)}" for b, f in populated)
    )
    return parts
