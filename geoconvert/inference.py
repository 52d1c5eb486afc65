# =============================================================================
# Schema Inference Module
# =============================================================================
# Characterizes heterogeneous property bags (feature attributes or table rows)
# as typed field metadata:
# - infer_field_type: majority-vote type over a value sample
# - infer_schema: per-field statistics in discovery or caller order
# - analyze_feature_collection / analyze_table: layer-level schemas
# =============================================================================

import logging
import math
import re
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from geoconvert.models import (
    DEFAULT_CRS,
    MIXED_GEOMETRY,
    FeatureCollection,
    FieldMeta,
    FieldType,
    InferenceSettings,
    LayerSchema,
    compute_bounds,
    is_attachment,
)

__all__ = [
    "is_null_like",
    "infer_field_type",
    "infer_schema",
    "aggregate_geometry_type",
    "analyze_feature_collection",
    "analyze_table",
]

logger = logging.getLogger(__name__)

_NUMERIC_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")

# Calendar formats tried after ISO 8601
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%B %d, %Y",
)


def is_null_like(value: Any) -> bool:
    """None and the empty string count as missing values."""
    return value is None or (isinstance(value, str) and value == "")


def _is_numeric_like(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and bool(_NUMERIC_PATTERN.match(value.strip()))


def _is_boolean_like(value: Any) -> bool:
    return isinstance(value, bool) or value in ("true", "false")


def _parses_as_date(text: str) -> bool:
    text = text.strip()
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
        return True
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            datetime.strptime(text, fmt)
            return True
        except ValueError:
            continue
    return False


def _is_date_like(value: Any, min_length: int) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    return isinstance(value, str) and len(value) >= min_length and _parses_as_date(value)


def _to_float(value: Any) -> Optional[float]:
    """Coerce a value to float for numeric bounds; None when not numeric."""
    if isinstance(value, (bool, int, float)):
        try:
            return float(value)
        except OverflowError:
            return None
    if isinstance(value, str) and _NUMERIC_PATTERN.match(value.strip()):
        return float(value.strip())
    return None


def _string_key(value: Any) -> str:
    """String coercion used for distinct-value counting."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def infer_field_type(values: Sequence[Any], settings: Optional[InferenceSettings] = None) -> FieldType:
    """
    Infer the type of a field from its present (non-null) values.

    Only the first `type_sample_size` values are examined. Any attachment in
    the sample wins outright; otherwise a majority vote decides between
    number, boolean and date, with string as the fallback. A date
    classification additionally requires that the sample is not numeric.

    Args:
        values: Present values in encounter order
        settings: Sample size and majority thresholds

    Returns:
        Inferred FieldType (string for an empty value list)
    """
    settings = settings or InferenceSettings()
    sample = list(values[: settings.type_sample_size])
    if not sample:
        return FieldType.STRING

    if any(is_attachment(v) for v in sample):
        return FieldType.ATTACHMENT

    num_count = sum(1 for v in sample if _is_numeric_like(v))
    bool_count = sum(1 for v in sample if _is_boolean_like(v))
    date_count = sum(1 for v in sample if _is_date_like(v, settings.min_date_length))

    threshold = len(sample) * settings.type_majority_ratio
    if num_count >= threshold:
        return FieldType.NUMBER
    if bool_count >= threshold:
        return FieldType.BOOLEAN
    if date_count >= len(sample) * settings.date_majority_ratio and num_count < threshold:
        return FieldType.DATE
    return FieldType.STRING


def _build_field_meta(
    name: str,
    order: int,
    present: list[Any],
    null_count: int,
    settings: InferenceSettings,
) -> FieldMeta:
    field_type = infer_field_type(present, settings)

    minimum = maximum = None
    if field_type == FieldType.NUMBER:
        # Bounds are a property of the whole column, not of the type sample
        numbers = [n for n in (_to_float(v) for v in present) if n is not None and math.isfinite(n)]
        if numbers:
            minimum, maximum = min(numbers), max(numbers)

    return FieldMeta(
        name=name,
        output_name=name,
        order=order,
        selected=True,
        type=field_type,
        null_count=null_count,
        unique_count=len({_string_key(v) for v in present}),
        sample_values=present[: settings.sample_values_limit],
        min=minimum,
        max=maximum,
    )


def infer_schema(
    property_bags: Iterable[Mapping[str, Any]],
    field_names: Optional[Sequence[str]] = None,
    settings: Optional[InferenceSettings] = None,
) -> list[FieldMeta]:
    """
    Infer per-field metadata over a collection of property bags.

    Without `field_names`, fields are discovered in first-seen order while
    scanning the bags, and only bags that carry a key count toward its nulls.
    With `field_names`, that ordering is authoritative and a missing key
    counts as a null value.

    Args:
        property_bags: Feature properties or table rows
        field_names: Optional authoritative field ordering
        settings: Inference thresholds

    Returns:
        FieldMeta list ordered by `order`
    """
    settings = settings or InferenceSettings()
    bags = list(property_bags)

    if field_names is not None:
        fields = []
        for order, name in enumerate(dict.fromkeys(field_names)):
            present = []
            for bag in bags:
                value = bag.get(name)
                if not is_null_like(value):
                    present.append(value)
            fields.append(
                _build_field_meta(name, order, present, len(bags) - len(present), settings)
            )
        return fields

    # Insertion-ordered: discovery order is the field order
    observed: dict[str, list[Any]] = {}
    nulls: dict[str, int] = {}
    for bag in bags:
        for key, value in bag.items():
            if key not in observed:
                observed[key] = []
                nulls[key] = 0
            if is_null_like(value):
                nulls[key] += 1
            else:
                observed[key].append(value)

    return [
        _build_field_meta(name, order, present, nulls[name], settings)
        for order, (name, present) in enumerate(observed.items())
    ]


def aggregate_geometry_type(geometry_types: Iterable[Optional[str]]) -> Optional[str]:
    """Collapse observed geometry types into one tag, "Mixed", or None."""
    distinct = list(dict.fromkeys(t for t in geometry_types if t))
    if not distinct:
        return None
    if len(distinct) == 1:
        return distinct[0]
    return MIXED_GEOMETRY


def analyze_feature_collection(
    feature_collection: FeatureCollection,
    settings: Optional[InferenceSettings] = None,
) -> LayerSchema:
    """Build the schema of a spatial dataset."""
    features = feature_collection.features
    geometry_type = aggregate_geometry_type(
        f.geometry.type for f in features if f.geometry is not None
    )
    schema = LayerSchema(
        fields=infer_schema((f.properties for f in features), settings=settings),
        geometry_type=geometry_type,
        feature_count=len(features),
        crs=DEFAULT_CRS,
        bounds=compute_bounds(features),
    )
    logger.debug(
        f"Analyzed {schema.feature_count} features: {len(schema.fields)} fields, "
        f"geometry_type={geometry_type}"
    )
    return schema


def analyze_table(
    rows: Sequence[Mapping[str, Any]],
    field_names: Sequence[str],
    settings: Optional[InferenceSettings] = None,
) -> LayerSchema:
    """Build the schema of a table dataset; field order follows `field_names`."""
    return LayerSchema(
        fields=infer_schema(rows, field_names=field_names, settings=settings),
        geometry_type=None,
        feature_count=len(rows),
        crs=None,
    )
