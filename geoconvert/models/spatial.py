# =============================================================================
# Spatial Types Module
# =============================================================================
# Provides the GeoJSON-shaped building blocks of the canonical data model:
# - GeometryType: The seven GeoJSON geometry type tags
# - Geometry / Feature / FeatureCollection: GeoJSON-shaped records
# - CRS: Coordinate Reference System (EPSG codes only)
# - Bounds: Geographic bounding box
# =============================================================================

import math
import re
from enum import Enum
from typing import Annotated, Any, Iterable, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

__all__ = [
    "GeometryType",
    "MIXED_GEOMETRY",
    "DEFAULT_CRS",
    "CRS",
    "validate_crs",
    "Bounds",
    "Geometry",
    "Feature",
    "FeatureCollection",
    "compute_bounds",
]


# =============================================================================
# Enums and constants
# =============================================================================

class GeometryType(str, Enum):
    """GeoJSON geometry type tags."""
    POINT = "Point"
    MULTI_POINT = "MultiPoint"
    LINE_STRING = "LineString"
    MULTI_LINE_STRING = "MultiLineString"
    POLYGON = "Polygon"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"


MIXED_GEOMETRY = "Mixed"
"""Schema sentinel used when a collection holds more than one geometry type."""

DEFAULT_CRS = "EPSG:4326"


# =============================================================================
# CRS (Coordinate Reference System)
# =============================================================================

_EPSG_PATTERN = re.compile(r"^EPSG:\d{4,6}$", re.IGNORECASE)


def validate_crs(value: str) -> str:
    """
    Validate and normalize an EPSG code string.

    Only EPSG codes are accepted: all coordinates are WGS84 longitude/latitude
    and no reprojection is performed, so the CRS is descriptive metadata.

    Args:
        value: CRS string to validate (e.g. "epsg:4326")

    Returns:
        Normalized CRS string (uppercased, e.g. "EPSG:4326")

    Raises:
        TypeError: If the value is not a string
        ValueError: If the CRS format is invalid
    """
    if not isinstance(value, str):
        raise TypeError(f"CRS must be a string, got {type(value).__name__}")

    value = value.strip()
    if not value:
        raise ValueError("CRS cannot be empty or whitespace only")

    if not _EPSG_PATTERN.match(value):
        raise ValueError(f"Invalid CRS format. Expected 'EPSG:<code>', got: {value[:100]}")

    return value.upper()


CRS = Annotated[
    str,
    Field(..., description="Coordinate Reference System (EPSG code)"),
    BeforeValidator(validate_crs),
]


# =============================================================================
# Bounds (Geographic Bounding Box)
# =============================================================================

class Bounds(BaseModel):
    """
    Geographic bounding box defining a rectangular area.

    Validates that minx <= maxx and miny <= maxy (allows point bounds).

    Attributes:
        minx: Minimum X coordinate (west)
        miny: Minimum Y coordinate (south)
        maxx: Maximum X coordinate (east)
        maxy: Maximum Y coordinate (north)
    """

    minx: float = Field(..., description="Minimum X coordinate (west)")
    miny: float = Field(..., description="Minimum Y coordinate (south)")
    maxx: float = Field(..., description="Maximum X coordinate (east)")
    maxy: float = Field(..., description="Maximum Y coordinate (north)")

    @model_validator(mode="after")
    def validate_bounds(self) -> "Bounds":
        if self.minx > self.maxx:
            raise ValueError(
                f"Invalid bounds: minx ({self.minx}) must be less than or equal to maxx ({self.maxx})"
            )
        if self.miny > self.maxy:
            raise ValueError(
                f"Invalid bounds: miny ({self.miny}) must be less than or equal to maxy ({self.maxy})"
            )
        return self

    @property
    def width(self) -> float:
        return self.maxx - self.minx

    @property
    def height(self) -> float:
        return self.maxy - self.miny


# =============================================================================
# GeoJSON records
# =============================================================================

class Geometry(BaseModel):
    """
    GeoJSON-shaped geometry.

    The type tag is kept as a plain string so that unexpected tags coming from
    an importer are carried through (and surface as "Mixed" in the schema)
    instead of rejecting the whole collection.

    Attributes:
        type: Geometry type tag (normally a GeometryType value)
        coordinates: Nested coordinate arrays (absent for GeometryCollection)
        geometries: Member geometries of a GeometryCollection
    """

    type: str = Field(..., description="GeoJSON geometry type tag")
    coordinates: Any = Field(None, description="Nested coordinate arrays")
    geometries: Optional[list["Geometry"]] = Field(
        None, description="Members of a GeometryCollection"
    )

    model_config = ConfigDict(extra="allow")

    def iter_positions(self) -> Iterable[tuple[float, float]]:
        """Yield every (x, y) position of this geometry, depth first."""
        if self.geometries:
            for member in self.geometries:
                yield from member.iter_positions()
        yield from _walk_positions(self.coordinates)


def _walk_positions(coords: Any) -> Iterable[tuple[float, float]]:
    if not isinstance(coords, (list, tuple)) or not coords:
        return
    if isinstance(coords[0], (int, float)) and not isinstance(coords[0], bool):
        if len(coords) >= 2:
            try:
                x, y = float(coords[0]), float(coords[1])
            except (OverflowError, TypeError, ValueError):
                # Not representable as a float, so not a usable position
                return
            yield x, y
        return
    for part in coords:
        yield from _walk_positions(part)


class Feature(BaseModel):
    """
    GeoJSON-shaped feature: optional geometry plus an ordered property bag.

    Attributes:
        type: Always "Feature"
        id: Optional feature identifier carried from the source
        geometry: Geometry, or None for attribute-only records
        properties: Ordered mapping of field name to value
    """

    type: Literal["Feature"] = "Feature"
    id: Optional[Any] = None
    geometry: Optional[Geometry] = None
    properties: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    @field_validator("properties", mode="before")
    @classmethod
    def default_properties(cls, v: Any) -> Any:
        """Importers may hand over `properties: null`; normalize to an empty bag."""
        return {} if v is None else v


class FeatureCollection(BaseModel):
    """Ordered sequence of features."""

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


def compute_bounds(features: Iterable[Feature]) -> Optional[Bounds]:
    """
    Compute the bounding box of all finite positions across features.

    Returns:
        Bounds, or None when no feature carries a usable position.
    """
    minx = miny = math.inf
    maxx = maxy = -math.inf
    for feature in features:
        if feature.geometry is None:
            continue
        for x, y in feature.geometry.iter_positions():
            if not (math.isfinite(x) and math.isfinite(y)):
                continue
            minx, maxx = min(minx, x), max(maxx, x)
            miny, maxy = min(miny, y), max(maxy, y)

    if not math.isfinite(minx):
        return None
    return Bounds(minx=minx, miny=miny, maxx=maxx, maxy=maxy)
