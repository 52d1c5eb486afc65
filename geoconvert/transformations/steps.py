# =============================================================================
# Export Steps
# =============================================================================
# Concrete export preparation steps.
# =============================================================================

import logging
from typing import Dict, Optional, Set

from geoconvert.factory import DatasetFactory
from geoconvert.models import AnyDataset, FeatureCollection, SpatialDataset
from geoconvert.spatial_utils.field_names import DBF_FIELD_NAME_LIMIT, normalize_field_names

from .attachments import flatten_attachments
from .base import ExportStep
from .projection import project_dataset

__all__ = ["SelectFieldsStep", "FlattenAttachmentsStep", "SanitizeFieldNamesStep"]

log = logging.getLogger(__name__)


class SelectFieldsStep(ExportStep):
    """Apply the schema's field selection, renames and order."""

    def apply(self, dataset: AnyDataset, factory: DatasetFactory) -> AnyDataset:
        return project_dataset(dataset, factory)


class FlattenAttachmentsStep(ExportStep):
    """Replace attachment values with their names."""

    def apply(self, dataset: AnyDataset, factory: DatasetFactory) -> AnyDataset:
        return flatten_attachments(dataset, factory)


class SanitizeFieldNamesStep(ExportStep):
    """
    Rename fields to short identifier-safe names.

    The original -> sanitized mapping is recorded on the new dataset's
    source as `field_name_mapping`.
    """

    def __init__(
        self,
        max_length: int = DBF_FIELD_NAME_LIMIT,
        stop_words: Optional[Set[str]] = None,
        abbreviations: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize field-name sanitization step.

        Args:
            max_length: Maximum field name length (default: 10, the DBF limit)
            stop_words: Words to drop (default: NLTK English stopwords)
            abbreviations: Long -> short word map (default: built-in list)
        """
        self.max_length = max_length
        self.stop_words = stop_words
        self.abbreviations = abbreviations

    def apply(self, dataset: AnyDataset, factory: DatasetFactory) -> AnyDataset:
        names = dataset.layer_schema.field_names
        mapping, cleaned = normalize_field_names(
            names,
            max_length=self.max_length,
            stop_words=self.stop_words,
            abbreviations=self.abbreviations,
        )
        renamed = {k: v for k, v in mapping.items() if k != v}
        if renamed:
            log.info(f"Renamed {len(renamed)} fields of {dataset.id} for export: {renamed}")

        def rename(properties):
            return {mapping.get(k, k): v for k, v in properties.items()}

        source = {**dataset.source.model_dump(), "field_name_mapping": mapping}
        if isinstance(dataset, SpatialDataset):
            features = [
                f.model_copy(update={"properties": rename(f.properties)}) for f in dataset.features
            ]
            return factory.create_spatial_dataset(
                dataset.name, FeatureCollection(features=features), source
            )

        return factory.create_table_dataset(
            dataset.name,
            [rename(row) for row in dataset.rows],
            field_names=cleaned,
            source=source,
        )

    def __repr__(self) -> str:
        return f"SanitizeFieldNamesStep(max_length={self.max_length})"
