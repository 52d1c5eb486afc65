# =============================================================================
# Coordinates Module
# =============================================================================
# Parses scalar coordinate values (decimal degrees or degrees/minutes/seconds)
# and detects latitude/longitude column pairs in tabular data. Shared by every
# tabular importer and by the table -> spatial transform.
# =============================================================================

import logging
import math
import re
from typing import Any, Mapping, NamedTuple, Optional, Sequence, Tuple

from geoconvert.models import InferenceSettings

__all__ = [
    "LATITUDE_CANDIDATES",
    "LONGITUDE_CANDIDATES",
    "CoordinateColumns",
    "parse_coordinate",
    "dms_to_dd",
    "dd_to_dms",
    "split_coord_string",
    "is_valid_position",
    "detect_coordinate_columns",
]

log = logging.getLogger(__name__)

# Priority order matters: the first candidate with a matching field wins.
LATITUDE_CANDIDATES: Tuple[str, ...] = ("lat", "latitude", "y", "lat_dd", "latitude_dd")
LONGITUDE_CANDIDATES: Tuple[str, ...] = (
    "lon",
    "lng",
    "long",
    "longitude",
    "x",
    "lon_dd",
    "longitude_dd",
)

# Pre-compiled patterns
_PLAIN_NUMBER_PATTERN = re.compile(r"^-?\d+\.?\d*$")
_LEADING_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_DMS_NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")
_DMS_SEPARATOR_PATTERN = re.compile(r"^[\s°º˚'′’\"″”:]*$")
_HEMISPHERES = "NSEW"


class CoordinateColumns(NamedTuple):
    """Latitude/longitude field pair found by detect_coordinate_columns."""

    lat_field: str
    lon_field: str


# -----------------------------------------------------------------------------
# Scalar parsing
# -----------------------------------------------------------------------------
def _leading_float(text: str) -> float:
    """Parse the leading number of a string, ignoring trailing text (NaN if none)."""
    match = _LEADING_NUMBER_PATTERN.match(text.strip())
    if not match:
        return math.nan
    return float(match.group(0))


def dms_to_dd(text: str) -> Optional[float]:
    """
    Convert a degrees/minutes/seconds string to decimal degrees.

    Accepts degree, minute and second symbols, colons or whitespace between
    the parts, and a hemisphere letter at either end. S and W (or a negative
    degree value) give a negative result.

    Args:
        text: Coordinate string (e.g. `40°26'46.56"N`, `W 73 58 30`, `40:26:46`)

    Returns:
        Decimal degrees, or None when the text is not DMS-shaped.

    Examples:
        >>> dms_to_dd("40°26'46.56\\"N")
        40.44626666666667
        >>> dms_to_dd("73 58 30 W")
        -73.975
    """
    cleaned = text.strip().upper()
    if not cleaned:
        return None

    hemisphere = None
    if cleaned[-1] in _HEMISPHERES:
        hemisphere, cleaned = cleaned[-1], cleaned[:-1]
    elif cleaned[0] in _HEMISPHERES:
        hemisphere, cleaned = cleaned[0], cleaned[1:]

    parts = _DMS_NUMBER_PATTERN.findall(cleaned)
    if not parts or len(parts) > 3:
        return None
    # Anything left besides separators means this is not a DMS value
    if not _DMS_SEPARATOR_PATTERN.match(_DMS_NUMBER_PATTERN.sub("", cleaned)):
        return None
    if any(p.startswith("-") for p in parts[1:]):
        return None

    degrees = float(parts[0])
    minutes = float(parts[1]) if len(parts) > 1 else 0.0
    seconds = float(parts[2]) if len(parts) > 2 else 0.0
    if minutes >= 60 or seconds >= 60:
        return None

    dd = abs(degrees) + minutes / 60 + seconds / 3600
    if parts[0].startswith("-") or hemisphere in ("S", "W"):
        dd = -dd
    return dd


def parse_coordinate(raw: Any) -> float:
    """
    Parse a single coordinate value into decimal degrees.

    Plain decimal strings are parsed directly; anything else goes through
    DMS parsing before the lossy leading-number fallback, so that `40°26'`
    is not silently read as 40.

    Args:
        raw: Cell value (number, string, or None)

    Returns:
        Decimal degrees, or NaN when unparseable.
    """
    if raw is None or (isinstance(raw, str) and raw == ""):
        return math.nan

    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            finite = math.isfinite(raw)
        except OverflowError:
            # int too large for a float
            return math.nan
        return raw if finite else float(raw)

    text = str(raw).strip()
    if _PLAIN_NUMBER_PATTERN.match(text):
        return float(text)

    dd = dms_to_dd(text)
    if dd is not None and math.isfinite(dd):
        return dd

    return _leading_float(text)


def dd_to_dms(dd: float, is_lon: bool = False) -> str:
    """
    Format decimal degrees as a DMS string.

    Examples:
        >>> dd_to_dms(40.446, is_lon=False)
        '40° 26\\' 45.60" N'
    """
    if is_lon:
        direction = "E" if dd >= 0 else "W"
    else:
        direction = "N" if dd >= 0 else "S"

    # Round on total seconds so 59.999" carries into the minutes
    total = round(abs(dd) * 3600, 2)
    degrees = int(total // 3600)
    minutes = int((total - degrees * 3600) // 60)
    seconds = total - degrees * 3600 - minutes * 60
    return f"{degrees}° {minutes}' {seconds:.2f}\" {direction}"


def split_coord_string(
    text: str, delimiter: str = ",", lon_lat_order: bool = False
) -> Optional[Tuple[float, float]]:
    """
    Split a combined coordinate cell ("lat, lon") into its parts.

    Args:
        text: Combined coordinate string
        delimiter: Separator between the two values
        lon_lat_order: True when the cell is written "lon, lat"

    Returns:
        (lat, lon) tuple, or None when either part is not numeric.
    """
    parts = [p.strip() for p in str(text).split(delimiter)]
    if len(parts) < 2:
        return None
    first, second = _leading_float(parts[0]), _leading_float(parts[1])
    if math.isnan(first) or math.isnan(second):
        return None
    return (second, first) if lon_lat_order else (first, second)


def is_valid_position(lat: float, lon: float) -> bool:
    """True when both values are finite and inside WGS84 ranges."""
    return (
        math.isfinite(lat)
        and math.isfinite(lon)
        and abs(lat) <= 90
        and abs(lon) <= 180
    )


# -----------------------------------------------------------------------------
# Column detection
# -----------------------------------------------------------------------------
def _match_field(field_names: Sequence[str], candidates: Sequence[str]) -> Optional[str]:
    lowered = [(name, str(name).strip().lower()) for name in field_names]
    for candidate in candidates:
        compact = candidate.replace("_", "")
        for name, low in lowered:
            if low == candidate or low == compact:
                return name
    return None


def detect_coordinate_columns(
    field_names: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
    settings: Optional[InferenceSettings] = None,
) -> Optional[CoordinateColumns]:
    """
    Decide whether two fields of a table hold point coordinates.

    Field names are matched case-insensitively against fixed candidate lists.
    A matched pair is only accepted when at least half of the first rows hold
    parseable, in-range values; tables often carry innocuous "x"/"y" columns
    that are not coordinates.

    Args:
        field_names: Column names in source order
        rows: Parsed rows (mappings of column name to value)
        settings: Sample size and acceptance ratio (defaults: 20 rows, 0.5)

    Returns:
        CoordinateColumns(lat_field, lon_field), or None.

    Examples:
        >>> rows = [{"x": "10", "y": "20"}, {"x": "11", "y": "21"}]
        >>> detect_coordinate_columns(["x", "y"], rows)
        CoordinateColumns(lat_field='y', lon_field='x')
    """
    settings = settings or InferenceSettings()

    lat_field = _match_field(field_names, LATITUDE_CANDIDATES)
    lon_field = _match_field(field_names, LONGITUDE_CANDIDATES)
    if lat_field is None or lon_field is None:
        return None

    sample = list(rows[: settings.coordinate_sample_rows])
    valid_count = 0
    skipped = 0
    for row in sample:
        if not isinstance(row, Mapping):
            skipped += 1
            continue
        lat = parse_coordinate(row.get(lat_field))
        lon = parse_coordinate(row.get(lon_field))
        if is_valid_position(lat, lon):
            valid_count += 1

    if skipped:
        log.warning(f"Skipped {skipped} non-mapping rows while detecting coordinate columns")

    if valid_count >= len(sample) * settings.coordinate_valid_ratio:
        log.debug(
            f"Detected coordinate columns lat={lat_field!r} lon={lon_field!r} "
            f"({valid_count}/{len(sample)} sampled rows valid)"
        )
        return CoordinateColumns(lat_field=lat_field, lon_field=lon_field)

    log.debug(
        f"Rejected coordinate columns lat={lat_field!r} lon={lon_field!r}: "
        f"only {valid_count}/{len(sample)} sampled rows valid"
    )
    return None
