# =============================================================================
# Export Recipe Registry
# =============================================================================
# Format-based recipe lookup for export preparation steps.
# =============================================================================

import logging
from typing import List, Optional

from geoconvert.factory import DatasetFactory, get_default_factory
from geoconvert.models import AnyDataset
from geoconvert.spatial_utils.field_names import DBF_FIELD_NAME_LIMIT

from .base import ExportStep
from .steps import FlattenAttachmentsStep, SanitizeFieldNamesStep, SelectFieldsStep

__all__ = ["ExportRecipeRegistry", "prepare_for_export"]

log = logging.getLogger(__name__)


class ExportRecipeRegistry:
    """
    Registry of export preparation recipes by target format.

    Every format gets the user's field selection. Text-based formats that
    cannot embed binaries also get attachment flattening, and shapefiles get
    DBF-safe field names. Unknown formats fall back to the default recipe.
    """

    BINARY_CAPABLE_FORMATS = ("geojson", "json", "kml", "kmz")
    TEXT_FORMATS = ("csv", "xlsx")
    DBF_FORMATS = ("shapefile", "shp")

    @staticmethod
    def get_recipe(export_format: str) -> List[ExportStep]:
        """
        Get the export recipe for a target format.

        Steps are instantiated fresh each time (no shared state).

        Args:
            export_format: Target format tag (case-insensitive, e.g. "csv")

        Returns:
            List of ExportStep instances to execute in order
        """
        default_recipe = [SelectFieldsStep()]

        text_recipe = [
            SelectFieldsStep(),
            FlattenAttachmentsStep(),
        ]

        dbf_recipe = [
            SelectFieldsStep(),
            FlattenAttachmentsStep(),
            SanitizeFieldNamesStep(max_length=DBF_FIELD_NAME_LIMIT),
        ]

        recipes = {fmt: text_recipe for fmt in ExportRecipeRegistry.TEXT_FORMATS}
        recipes.update({fmt: dbf_recipe for fmt in ExportRecipeRegistry.DBF_FORMATS})

        return recipes.get(export_format.strip().lower(), default_recipe)


def prepare_for_export(
    dataset: AnyDataset,
    export_format: str,
    factory: Optional[DatasetFactory] = None,
) -> AnyDataset:
    """
    Run the recipe for `export_format` and return the dataset to serialize.

    The input dataset is never modified; each step yields a new dataset.
    """
    factory = factory or get_default_factory()
    steps = ExportRecipeRegistry.get_recipe(export_format)

    result = dataset
    for step in steps:
        result = step.apply(result, factory)

    log.info(
        f"Prepared {dataset.id} for {export_format} export: "
        f"{[repr(s) for s in steps]} -> {result.id}"
    )
    return result
