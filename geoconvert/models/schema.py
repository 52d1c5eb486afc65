# =============================================================================
# Schema Models Module
# =============================================================================
# Inferred field metadata and per-dataset schema:
# - FieldType: Inferred field type vocabulary
# - FieldMeta: Per-field statistics plus export edit state
# - LayerSchema: Fields, geometry type, feature count, CRS, bounds
# =============================================================================

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .spatial import CRS, Bounds

__all__ = ["FieldType", "FieldMeta", "LayerSchema"]


class FieldType(str, Enum):
    """Inferred type of a field."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ATTACHMENT = "attachment"


class FieldMeta(BaseModel):
    """
    Metadata for one field of a dataset.

    `name` is the identity of the field (the source property key). The
    `output_name`, `order` and `selected` attributes are edit state used when
    projecting records for export; changing them never touches the records.

    Attributes:
        name: Source property key
        output_name: Name used on export (defaults to name)
        order: Export column position
        selected: Whether the field is included on export
        type: Inferred field type
        null_count: Number of null-like values (None or "")
        unique_count: Number of distinct present values (string-coerced)
        sample_values: First present values in encounter order
        min: Numeric minimum (number fields only)
        max: Numeric maximum (number fields only)
    """

    name: str = Field(..., description="Source property key")
    output_name: Optional[str] = Field(None, description="Export name")
    order: int = Field(..., ge=0, description="Export column position")
    selected: bool = Field(True, description="Included on export")
    type: FieldType = Field(FieldType.STRING, description="Inferred field type")
    null_count: int = Field(0, ge=0)
    unique_count: int = Field(0, ge=0)
    sample_values: list[Any] = Field(default_factory=list)
    min: Optional[float] = None
    max: Optional[float] = None

    model_config = ConfigDict(validate_assignment=True)

    @model_validator(mode="after")
    def default_output_name(self) -> "FieldMeta":
        if not self.output_name:
            # object.__setattr__ avoids re-entering assignment validation
            object.__setattr__(self, "output_name", self.name)
        return self


class LayerSchema(BaseModel):
    """
    Inferred structure and statistics of a dataset's fields.

    Attributes:
        fields: Field metadata in discovery (or caller-supplied) order
        geometry_type: GeoJSON type tag, "Mixed", or None
        feature_count: Number of features or rows
        crs: "EPSG:4326" for spatial datasets, None for tables
        bounds: Extent of all geometry positions, if any
    """

    fields: list[FieldMeta] = Field(default_factory=list)
    geometry_type: Optional[str] = None
    feature_count: int = Field(0, ge=0)
    crs: Optional[CRS] = None
    bounds: Optional[Bounds] = None

    @field_validator("fields")
    @classmethod
    def validate_unique_fields(cls, v: list[FieldMeta]) -> list[FieldMeta]:
        """Field names and order positions must be unique within a schema."""
        names = [f.name for f in v]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field names in schema: {names}")
        orders = [f.order for f in v]
        if len(orders) != len(set(orders)):
            raise ValueError(f"Duplicate field order values in schema: {orders}")
        return v

    def get_field(self, name: str) -> Optional[FieldMeta]:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]
