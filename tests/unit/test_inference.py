"""
Unit tests for schema inference.

Tests type voting, null/unique/sample statistics, numeric bounds, field
ordering and layer-level analysis.
"""

import pytest

from geoconvert.inference import (
    aggregate_geometry_type,
    analyze_feature_collection,
    analyze_table,
    infer_field_type,
    infer_schema,
    is_null_like,
)
from geoconvert.models import (
    DEFAULT_CRS,
    MIXED_GEOMETRY,
    Attachment,
    FeatureCollection,
    FieldType,
    InferenceSettings,
)


# =============================================================================
# Type Inference Tests
# =============================================================================


class TestInferFieldType:
    """Test majority-vote type inference."""

    def test_numeric_majority(self):
        """Test that 75 numeric and 25 text values infer number."""
        values = ["1.5"] * 75 + ["abc"] * 25
        assert infer_field_type(values) == FieldType.NUMBER

    def test_below_numeric_majority(self):
        """Test that 69 numeric and 31 text values infer string."""
        values = ["1"] * 69 + ["abc"] * 31
        assert infer_field_type(values) == FieldType.STRING

    def test_exact_threshold_is_number(self):
        """Test that exactly 70% numeric values infer number."""
        values = [1] * 7 + ["x"] * 3
        assert infer_field_type(values) == FieldType.NUMBER

    def test_native_numbers(self):
        """Test ints and floats."""
        assert infer_field_type([1, 2.5, -3]) == FieldType.NUMBER

    def test_numeric_strings(self):
        """Test numeric-looking strings including exponents."""
        assert infer_field_type(["1e3", "-.5", "+2", " 7 "]) == FieldType.NUMBER

    def test_booleans(self):
        """Test native and textual booleans, which are not numbers."""
        assert infer_field_type([True, False, "true", "false"]) == FieldType.BOOLEAN

    def test_dates(self):
        """Test ISO and calendar date strings."""
        values = ["2024-01-15", "2024-02-01T10:00:00Z", "2023/12/31", "15 Mar 2024"]
        assert infer_field_type(values) == FieldType.DATE

    def test_date_needs_ninety_percent(self):
        """Test that 80% date-like values fall back to string."""
        values = ["2024-01-15"] * 8 + ["later", "soon"]
        assert infer_field_type(values) == FieldType.STRING

    def test_compact_dates_are_numbers(self):
        """Test that numeric-looking values never infer date."""
        assert infer_field_type(["20240115", "20240116"]) == FieldType.NUMBER

    def test_short_strings_are_not_dates(self):
        """Test the minimum date length."""
        assert infer_field_type(["2024-1"]) == FieldType.STRING

    def test_attachment_wins(self):
        """Test that a single attachment in the sample tags the field."""
        values = ["a", "b", {"_att": True, "name": "p.jpg"}]
        assert infer_field_type(values) == FieldType.ATTACHMENT
        assert infer_field_type([Attachment(name="x.png")]) == FieldType.ATTACHMENT

    def test_empty_is_string(self):
        """Test that a field with no values is a string field."""
        assert infer_field_type([]) == FieldType.STRING

    def test_only_sample_is_examined(self):
        """Test that values past the sample size do not vote."""
        settings = InferenceSettings(type_sample_size=10)
        values = [1] * 10 + ["x"] * 100
        assert infer_field_type(values, settings) == FieldType.NUMBER


def test_is_null_like():
    """Test that only None and the empty string are null-like."""
    assert is_null_like(None)
    assert is_null_like("")
    assert not is_null_like(0)
    assert not is_null_like(" ")
    assert not is_null_like(False)


# =============================================================================
# Schema Inference Tests
# =============================================================================


class TestInferSchema:
    """Test per-field statistics and ordering."""

    def test_first_seen_order(self):
        """Test that fields are ordered by discovery."""
        bags = [{"a": 1, "b": ""}, {"c": "x", "a": 2}]
        fields = infer_schema(bags)

        assert [f.name for f in fields] == ["a", "b", "c"]
        assert [f.order for f in fields] == [0, 1, 2]
        assert all(f.selected for f in fields)
        assert all(f.output_name == f.name for f in fields)

    def test_null_counts_without_field_names(self):
        """Test that only bags carrying a key count toward its nulls."""
        bags = [{"a": 1, "b": ""}, {"c": "x", "a": None}]
        fields = {f.name: f for f in infer_schema(bags)}

        assert fields["a"].null_count == 1
        assert fields["b"].null_count == 1
        assert fields["c"].null_count == 0

    def test_field_names_are_authoritative(self):
        """Test caller ordering and missing keys counted as nulls."""
        rows = [{"a": 1}, {"b": 2}]
        fields = infer_schema(rows, field_names=["b", "a"])

        assert [f.name for f in fields] == ["b", "a"]
        assert fields[0].null_count == 1
        assert fields[1].null_count == 1

    def test_numeric_bounds(self):
        """Test min/max for number fields."""
        fields = infer_schema([{"v": "3"}, {"v": 10}, {"v": -2.5}])
        assert fields[0].type == FieldType.NUMBER
        assert fields[0].min == -2.5
        assert fields[0].max == 10

    def test_bounds_cover_values_past_sample(self):
        """Test that min/max use every present value."""
        settings = InferenceSettings(type_sample_size=3)
        fields = infer_schema([{"v": 1}, {"v": 2}, {"v": 3}, {"v": 100}], settings=settings)
        assert fields[0].max == 100

    def test_bounds_skip_non_numeric(self):
        """Test that non-numeric values in a number field are ignored."""
        bags = [{"v": i} for i in range(8)] + [{"v": "n/a"}, {"v": float("nan")}]
        field = infer_schema(bags)[0]
        assert field.type == FieldType.NUMBER
        assert (field.min, field.max) == (0, 7)

    def test_bounds_skip_huge_integers(self):
        """Test that ints too large for a float do not break min/max."""
        field = infer_schema([{"v": 10 ** 400}, {"v": 3}, {"v": 8}])[0]
        assert field.type == FieldType.NUMBER
        assert (field.min, field.max) == (3, 8)

    def test_non_numeric_fields_have_no_bounds(self):
        """Test that min/max stay None for other types."""
        field = infer_schema([{"v": "a"}, {"v": "b"}])[0]
        assert field.min is None and field.max is None

    def test_unique_count_uses_string_coercion(self):
        """Test that 1, 1.0 and "1" are the same distinct value."""
        bags = [{"v": 1}, {"v": 1.0}, {"v": "1"}, {"v": True}, {"v": "true"}]
        assert infer_schema(bags)[0].unique_count == 2

    def test_sample_values(self):
        """Test that the first five present values are kept in order."""
        bags = [{"v": None}] + [{"v": i} for i in range(8)]
        assert infer_schema(bags)[0].sample_values == [0, 1, 2, 3, 4]

    def test_empty_input(self):
        """Test that no bags produce no fields."""
        assert infer_schema([]) == []


# =============================================================================
# Layer Analysis Tests
# =============================================================================


class TestLayerAnalysis:
    """Test geometry aggregation and layer schemas."""

    def test_aggregate_geometry_type(self):
        """Test single, mixed and absent geometry types."""
        assert aggregate_geometry_type([]) is None
        assert aggregate_geometry_type([None, None]) is None
        assert aggregate_geometry_type(["Point", "Point"]) == "Point"
        assert aggregate_geometry_type(["Point", "LineString"]) == MIXED_GEOMETRY

    def test_analyze_feature_collection(self, mixed_feature_collection):
        """Test spatial schema: mixed type, CRS, count and bounds."""
        collection = FeatureCollection.model_validate(mixed_feature_collection)
        schema = analyze_feature_collection(collection)

        assert schema.geometry_type == MIXED_GEOMETRY
        assert schema.feature_count == 6
        assert schema.crs == DEFAULT_CRS
        assert schema.field_names == ["name", "kind"]
        assert schema.bounds.minx == pytest.approx(115.8)
        assert schema.bounds.maxx == pytest.approx(151.2)
        assert schema.bounds.miny == pytest.approx(-37.8)
        assert schema.bounds.maxy == pytest.approx(-31.9)

    def test_analyze_empty_collection(self):
        """Test that an empty collection has no geometry type or bounds."""
        schema = analyze_feature_collection(FeatureCollection())
        assert schema.geometry_type is None
        assert schema.bounds is None
        assert schema.feature_count == 0

    def test_analyze_table(self, station_rows):
        """Test table schema: no geometry, no CRS, caller ordering."""
        schema = analyze_table(station_rows, ["depth", "Station", "lat", "lon"])

        assert schema.geometry_type is None
        assert schema.crs is None
        assert schema.feature_count == 3
        assert schema.field_names == ["depth", "Station", "lat", "lon"]
        depth = schema.get_field("depth")
        assert depth.type == FieldType.NUMBER
        assert depth.null_count == 1
        assert (depth.min, depth.max) == (7, 12.5)
