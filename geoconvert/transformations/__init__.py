# =============================================================================
# Transformations Library
# =============================================================================
# Pure dataset -> dataset transforms and recipe-based export preparation.
# =============================================================================

"""
Transformations library for geoconvert.

This library provides:
- Dataset transforms: table_to_spatial, spatial_to_table, merge_datasets,
  split_by_geometry_type
- Field projection: apply_field_selection, project_dataset
- Attachment flattening: flatten_properties, flatten_attachments
- ExportStep: Base class for export preparation steps
- Export steps: SelectFieldsStep, FlattenAttachmentsStep, SanitizeFieldNamesStep
- ExportRecipeRegistry: Format-based recipe lookup
"""

from .dataset import (
    GEOMETRY_BUCKETS,
    SOURCE_FILE_FIELD,
    merge_datasets,
    spatial_to_table,
    split_by_geometry_type,
    table_to_spatial,
)
from .projection import apply_field_selection, get_selected_fields, project_dataset
from .attachments import flatten_attachments, flatten_properties
from .base import ExportStep
from .steps import FlattenAttachmentsStep, SanitizeFieldNamesStep, SelectFieldsStep
from .registry import ExportRecipeRegistry, prepare_for_export

__all__ = [
    "GEOMETRY_BUCKETS",
    "SOURCE_FILE_FIELD",
    "merge_datasets",
    "spatial_to_table",
    "split_by_geometry_type",
    "table_to_spatial",
    "apply_field_selection",
    "get_selected_fields",
    "project_dataset",
    "flatten_attachments",
    "flatten_properties",
    "ExportStep",
    "FlattenAttachmentsStep",
    "SanitizeFieldNamesStep",
    "SelectFieldsStep",
    "ExportRecipeRegistry",
    "prepare_for_export",
]
