# =============================================================================
# Dataset Models Module
# =============================================================================
# The canonical dataset records every importer produces and every exporter
# consumes:
# - DatasetKind: spatial or table
# - DatasetSource: provenance (file, format, format-specific extras)
# - SpatialDataset: FeatureCollection + schema
# - TableDataset: rows + schema
# =============================================================================

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .schema import LayerSchema
from .spatial import Feature, FeatureCollection

__all__ = [
    "DatasetKind",
    "DatasetSource",
    "Dataset",
    "SpatialDataset",
    "TableDataset",
    "AnyDataset",
]


class DatasetKind(str, Enum):
    """Variant of a canonical dataset."""
    SPATIAL = "spatial"
    TABLE = "table"


class DatasetSource(BaseModel):
    """
    Provenance of a dataset.

    Format-specific metadata (parse error counts, detected coordinate columns,
    sheet names, ...) is kept as extra attributes and is opaque to the core.

    Attributes:
        file: Originating file name
        format: Format tag (e.g. "csv", "geojson", "merge")
    """

    file: Optional[str] = Field(None, description="Originating file name")
    format: str = Field("unknown", description="Format tag")

    model_config = ConfigDict(extra="allow")

    @property
    def extra(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class Dataset(BaseModel):
    """
    Fields shared by both dataset variants.

    Attributes:
        id: Identifier allocated at creation; never changes
        name: Display name
        kind: Dataset variant
        layer_schema: Inferred schema, owned by this dataset
        source: Provenance
        visible: UI flag
        active: UI flag
        created_at: Creation timestamp (UTC)
    """

    id: str = Field(..., description="Dataset identifier")
    name: str = Field(..., description="Display name")
    kind: DatasetKind
    layer_schema: LayerSchema = Field(..., description="Inferred schema")
    source: DatasetSource = Field(default_factory=DatasetSource)
    visible: bool = True
    active: bool = True
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp",
    )

    @property
    def source_label(self) -> str:
        """Provenance file name, falling back to the display name."""
        return self.source.file or self.name


class SpatialDataset(Dataset):
    """Dataset backed by a FeatureCollection."""

    kind: Literal[DatasetKind.SPATIAL] = DatasetKind.SPATIAL
    geojson: FeatureCollection

    @property
    def features(self) -> list[Feature]:
        return self.geojson.features


class TableDataset(Dataset):
    """
    Dataset backed by geometry-less rows.

    Attributes:
        rows: Property bags in source order
        field_names: Authoritative column ordering
    """

    kind: Literal[DatasetKind.TABLE] = DatasetKind.TABLE
    rows: list[dict[str, Any]] = Field(default_factory=list)
    field_names: list[str] = Field(default_factory=list)


AnyDataset = Union[SpatialDataset, TableDataset]
