# =============================================================================
# Data Models Library
# =============================================================================
# Pydantic models for the canonical dataset representation.
# =============================================================================

"""
Data models for geoconvert.

This library provides:
- Spatial types: Geometry, Feature, FeatureCollection, Bounds, CRS
- Attachment: embedded binary-like property values
- Schema: FieldType, FieldMeta, LayerSchema
- Datasets: SpatialDataset, TableDataset and their provenance
- Configuration: InferenceSettings
"""

# Spatial types
from .spatial import (
    CRS,
    DEFAULT_CRS,
    MIXED_GEOMETRY,
    Bounds,
    Feature,
    FeatureCollection,
    Geometry,
    GeometryType,
    compute_bounds,
    validate_crs,
)

# Attachments
from .attachment import (
    ATTACHMENT_PLACEHOLDER,
    ATTACHMENT_TAG,
    Attachment,
    attachment_label,
    is_attachment,
)

# Schema models
from .schema import (
    FieldMeta,
    FieldType,
    LayerSchema,
)

# Dataset models
from .dataset import (
    AnyDataset,
    Dataset,
    DatasetKind,
    DatasetSource,
    SpatialDataset,
    TableDataset,
)

# Configuration models
from .config import InferenceSettings

__all__ = [
    # Spatial types
    "CRS",
    "DEFAULT_CRS",
    "MIXED_GEOMETRY",
    "Bounds",
    "Feature",
    "FeatureCollection",
    "Geometry",
    "GeometryType",
    "compute_bounds",
    "validate_crs",
    # Attachments
    "ATTACHMENT_PLACEHOLDER",
    "ATTACHMENT_TAG",
    "Attachment",
    "attachment_label",
    "is_attachment",
    # Schema models
    "FieldMeta",
    "FieldType",
    "LayerSchema",
    # Dataset models
    "AnyDataset",
    "Dataset",
    "DatasetKind",
    "DatasetSource",
    "SpatialDataset",
    "TableDataset",
    # Configuration models
    "InferenceSettings",
]
