# =============================================================================
# Field Projection
# =============================================================================
# Select / rename / reorder fields according to a schema's edit state.
# =============================================================================

from collections.abc import Mapping
from typing import Any, Optional, Sequence, Union

from geoconvert.factory import DatasetFactory, get_default_factory
from geoconvert.models import (
    AnyDataset,
    Feature,
    FeatureCollection,
    FieldMeta,
    LayerSchema,
    SpatialDataset,
)

__all__ = ["get_selected_fields", "apply_field_selection", "project_dataset"]

Record = Union[Feature, Mapping[str, Any]]


def get_selected_fields(schema: LayerSchema) -> list[FieldMeta]:
    """Selected fields sorted by their export order."""
    return sorted((f for f in schema.fields if f.selected), key=lambda f: f.order)


def _project(properties: Mapping[str, Any], selected: Sequence[FieldMeta]) -> dict[str, Any]:
    # Absent source values become None so every record has the same columns
    return {f.output_name: properties.get(f.name) for f in selected}


def apply_field_selection(records: Sequence[Record], schema: LayerSchema) -> list[Record]:
    """
    Project records onto the schema's selected fields.

    Each output record holds exactly the selected fields, keyed by
    `output_name` and in export order. Features keep their geometry; row
    mappings come back as new dicts. Inputs are not modified.

    Args:
        records: Feature models or row mappings
        schema: Schema carrying the selection/rename/order state

    Returns:
        New records in input order
    """
    selected = get_selected_fields(schema)
    projected: list[Record] = []
    for record in records:
        if isinstance(record, Feature):
            projected.append(
                record.model_copy(update={"properties": _project(record.properties, selected)})
            )
        else:
            projected.append(_project(record, selected))
    return projected


def project_dataset(dataset: AnyDataset, factory: Optional[DatasetFactory] = None) -> AnyDataset:
    """
    Build the export view of a dataset as a new dataset.

    The result has a fresh id and a schema inferred from the projected
    records, so its field names are the selected output names.
    """
    factory = factory or get_default_factory()
    schema = dataset.layer_schema

    if isinstance(dataset, SpatialDataset):
        collection = FeatureCollection(features=apply_field_selection(dataset.features, schema))
        return factory.create_spatial_dataset(dataset.name, collection, dataset.source)

    selected = get_selected_fields(schema)
    return factory.create_table_dataset(
        dataset.name,
        apply_field_selection(dataset.rows, schema),
        field_names=[f.output_name for f in selected],
        source=dataset.source,
    )
