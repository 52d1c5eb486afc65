# =============================================================================
# Attachment Flattening
# =============================================================================
# Replaces embedded attachment values with plain text for export targets that
# cannot carry binaries inline (CSV, spreadsheets, DBF).
# =============================================================================

from typing import Any, Mapping, Optional

from geoconvert.factory import DatasetFactory, get_default_factory
from geoconvert.models import (
    AnyDataset,
    FeatureCollection,
    LayerSchema,
    SpatialDataset,
    attachment_label,
    is_attachment,
)

__all__ = ["flatten_properties", "flatten_attachments"]


def flatten_properties(properties: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of a property bag with every attachment replaced by its label."""
    return {
        key: attachment_label(value) if is_attachment(value) else value
        for key, value in properties.items()
    }


def _carry_edit_state(source: LayerSchema, flattened: LayerSchema) -> LayerSchema:
    """
    Keep the user's selection, renames and order on the flattened schema.

    Fields are matched by name; only the inferred type and samples are
    taken from the flattened records.
    """
    fields = []
    for field in source.fields:
        inferred = flattened.get_field(field.name)
        if inferred is None:
            fields.append(field.model_copy())
            continue
        fields.append(
            field.model_copy(
                update={"type": inferred.type, "sample_values": inferred.sample_values}
            )
        )

    next_order = max((f.order for f in fields), default=-1) + 1
    for field in flattened.fields:
        if source.get_field(field.name) is None:
            fields.append(field.model_copy(update={"order": next_order}))
            next_order += 1

    return flattened.model_copy(update={"fields": fields})


def flatten_attachments(dataset: AnyDataset, factory: Optional[DatasetFactory] = None) -> AnyDataset:
    """
    Return a new dataset whose attachment values are plain strings.

    Each attachment becomes its display name, or "[attachment]" when it has
    none. Field selection, renames and order carry over from the source
    schema, so flattening and projection can run in either order. The
    source dataset is left untouched.
    """
    factory = factory or get_default_factory()

    if isinstance(dataset, SpatialDataset):
        features = [
            f.model_copy(update={"properties": flatten_properties(f.properties)})
            for f in dataset.features
        ]
        flat = factory.create_spatial_dataset(
            dataset.name, FeatureCollection(features=features), dataset.source
        )
    else:
        flat = factory.create_table_dataset(
            dataset.name,
            [flatten_properties(row) for row in dataset.rows],
            field_names=dataset.field_names,
            source=dataset.source,
        )

    return flat.model_copy(
        update={"layer_schema": _carry_edit_state(dataset.layer_schema, flat.layer_schema)}
    )
