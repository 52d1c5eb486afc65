# =============================================================================
# Spatial Utils Library
# =============================================================================
# Coordinate parsing/detection and export field-name utilities.
# =============================================================================

"""
Spatial utilities for geoconvert.

This library provides:
- parse_coordinate: Decimal-degree / DMS scalar parsing
- detect_coordinate_columns: Latitude/longitude column detection
- normalize_field_names: Identifier-safe output names for restricted targets
"""

from .coordinates import (
    CoordinateColumns,
    dd_to_dms,
    detect_coordinate_columns,
    dms_to_dd,
    parse_coordinate,
    split_coord_string,
)
from .field_names import DBF_FIELD_NAME_LIMIT, normalize_field_names

__all__ = [
    "CoordinateColumns",
    "dd_to_dms",
    "detect_coordinate_columns",
    "dms_to_dd",
    "parse_coordinate",
    "split_coord_string",
    "DBF_FIELD_NAME_LIMIT",
    "normalize_field_names",
]
