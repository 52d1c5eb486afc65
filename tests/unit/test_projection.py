"""
Unit tests for field projection.

Tests selection, renaming and reordering driven by schema edit state.
"""

from geoconvert.models import Feature
from geoconvert.transformations.projection import (
    apply_field_selection,
    get_selected_fields,
    project_dataset,
)


class TestGetSelectedFields:
    """Test selected-field resolution."""

    def test_all_selected_by_default(self, station_table):
        """Test that a fresh schema selects every field in order."""
        names = [f.name for f in get_selected_fields(station_table.layer_schema)]
        assert names == ["Station", "lat", "lon", "depth"]

    def test_deselect_and_reorder(self, station_table):
        """Test that deselected fields drop out and order is respected."""
        schema = station_table.layer_schema
        schema.get_field("lat").selected = False
        schema.get_field("Station").order = 10

        names = [f.name for f in get_selected_fields(schema)]
        assert names == ["lon", "depth", "Station"]


class TestApplyFieldSelection:
    """Test record projection."""

    def test_rows_projected_and_renamed(self, station_table):
        """Test output keys, order and renames for row mappings."""
        schema = station_table.layer_schema
        schema.get_field("depth").output_name = "depth_m"
        schema.get_field("lon").selected = False

        projected = apply_field_selection(station_table.rows, schema)

        assert projected[0] == {"Station": "Alpha", "lat": "-33.86", "depth_m": "12.5"}
        assert list(projected[0]) == ["Station", "lat", "depth_m"]

    def test_missing_values_become_none(self, station_table):
        """Test that absent source keys are emitted as None."""
        projected = apply_field_selection([{"Station": "Delta"}], station_table.layer_schema)
        assert projected == [{"Station": "Delta", "lat": None, "lon": None, "depth": None}]

    def test_features_keep_geometry(self, mixed_dataset):
        """Test that Feature records keep their geometry."""
        schema = mixed_dataset.layer_schema
        schema.get_field("kind").selected = False

        projected = apply_field_selection(mixed_dataset.features, schema)

        assert all(isinstance(f, Feature) for f in projected)
        assert projected[0].properties == {"name": "p1"}
        assert projected[0].geometry == mixed_dataset.features[0].geometry

    def test_inputs_not_mutated(self, station_table, station_rows):
        """Test that rows and the schema are left untouched."""
        schema = station_table.layer_schema
        schema.get_field("lat").output_name = "latitude"

        apply_field_selection(station_table.rows, schema)

        assert station_table.rows == station_rows
        assert schema.get_field("lat").name == "lat"

    def test_deterministic(self, mixed_dataset):
        """Test that projecting twice gives identical output."""
        schema = mixed_dataset.layer_schema
        schema.get_field("name").output_name = "label"

        first = apply_field_selection(mixed_dataset.features, schema)
        second = apply_field_selection(mixed_dataset.features, schema)

        assert [f.model_dump() for f in first] == [f.model_dump() for f in second]


class TestProjectDataset:
    """Test dataset-level projection."""

    def test_table_projection(self, factory, station_table):
        """Test a new table with the selected output names."""
        schema = station_table.layer_schema
        schema.get_field("depth").output_name = "depth_m"
        schema.get_field("Station").selected = False

        projected = project_dataset(station_table, factory)

        assert projected.id != station_table.id
        assert projected.field_names == ["lat", "lon", "depth_m"]
        assert projected.layer_schema.field_names == ["lat", "lon", "depth_m"]
        assert "Station" in station_table.rows[0]

    def test_spatial_projection(self, factory, mixed_dataset):
        """Test a new spatial dataset with projected properties."""
        mixed_dataset.layer_schema.get_field("name").selected = False

        projected = project_dataset(mixed_dataset, factory)

        assert len(projected.features) == 6
        assert projected.layer_schema.field_names == ["kind"]
        assert projected.layer_schema.geometry_type == mixed_dataset.layer_schema.geometry_type
