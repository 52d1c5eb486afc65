# =============================================================================
# Dataset Factory
# =============================================================================
# Builds canonical SpatialDataset / TableDataset records from already-parsed
# importer output, running schema inference on the way in.
# =============================================================================

"""
Dataset construction.

Importers call the factory exactly once with fully parsed input; every later
step (field editing, rendering, export) works on the returned dataset.
Identifiers come from an injected generator so that no process-wide counter
is involved.
"""

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Sequence, Union

from pydantic import ValidationError

from geoconvert.errors import InvalidInputShapeError
from geoconvert.inference import analyze_feature_collection, analyze_table
from geoconvert.models import (
    DatasetSource,
    FeatureCollection,
    InferenceSettings,
    SpatialDataset,
    TableDataset,
)

__all__ = [
    "IdGenerator",
    "generate_dataset_id",
    "DatasetFactory",
    "get_default_factory",
    "create_spatial_dataset",
    "create_table_dataset",
]

log = logging.getLogger(__name__)

IdGenerator = Callable[[], str]
SourceInput = Union[DatasetSource, Mapping[str, Any], None]


def generate_dataset_id() -> str:
    """Default id generator: "ds_" followed by 12 random hex characters."""
    return f"ds_{uuid.uuid4().hex[:12]}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DatasetFactory:
    """
    Constructs canonical datasets.

    Construction never fails on heterogeneous or odd content: mixed geometry,
    ragged rows and unknown values are simply reflected in the inferred
    schema. Only input that violates the structural contract (rows that are
    not a list of mappings, a collection without a feature list) is rejected
    with InvalidInputShapeError.

    Args:
        id_generator: Callable returning a new unique dataset id
        settings: Inference thresholds shared by every dataset built here
        clock: Callable returning the creation timestamp
    """

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        settings: Optional[InferenceSettings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.id_generator = id_generator or generate_dataset_id
        self.settings = settings or InferenceSettings()
        self.clock = clock or _utc_now

    # -------------------------------------------------------------------------
    # Input normalization
    # -------------------------------------------------------------------------
    @staticmethod
    def _build_source(name: str, source: SourceInput) -> DatasetSource:
        if source is None:
            data: dict[str, Any] = {}
        elif isinstance(source, DatasetSource):
            data = source.model_dump()
        elif isinstance(source, Mapping):
            data = dict(source)
        else:
            raise InvalidInputShapeError(
                f"source must be a mapping, got {type(source).__name__}",
                {"received": type(source).__name__},
            )
        data["file"] = data.get("file") or name
        data["format"] = data.get("format") or "unknown"
        return DatasetSource(**data)

    @staticmethod
    def _coerce_feature_collection(value: Any) -> FeatureCollection:
        if isinstance(value, FeatureCollection):
            return value
        if not isinstance(value, Mapping):
            raise InvalidInputShapeError(
                f"Invalid input shape: expected a FeatureCollection mapping, got {type(value).__name__}",
                {"received": type(value).__name__},
            )
        features = value.get("features")
        if not isinstance(features, list):
            raise InvalidInputShapeError(
                "Invalid input shape: 'features' must be a list, "
                f"got {type(features).__name__}",
                {"received": type(features).__name__},
            )
        try:
            return FeatureCollection.model_validate(value)
        except ValidationError as e:
            raise InvalidInputShapeError(
                f"Invalid input shape: malformed feature collection ({e.error_count()} errors)",
                {"errors": e.errors(include_url=False)},
            ) from e

    @staticmethod
    def _check_rows(rows: Any) -> list[dict[str, Any]]:
        if not isinstance(rows, (list, tuple)):
            raise InvalidInputShapeError(
                f"Invalid input shape: rows must be a list, got {type(rows).__name__}",
                {"received": type(rows).__name__},
            )
        for index, row in enumerate(rows):
            if not isinstance(row, Mapping):
                raise InvalidInputShapeError(
                    f"Invalid input shape: row {index} is {type(row).__name__}, expected a mapping",
                    {"index": index, "received": type(row).__name__},
                )
        return [row if isinstance(row, dict) else dict(row) for row in rows]

    @staticmethod
    def _check_field_names(field_names: Any) -> list[str]:
        if isinstance(field_names, (str, bytes)) or not isinstance(field_names, Sequence):
            raise InvalidInputShapeError(
                f"Invalid input shape: field_names must be a list of strings, "
                f"got {type(field_names).__name__}",
                {"received": type(field_names).__name__},
            )
        bad = [f for f in field_names if not isinstance(f, str)]
        if bad:
            raise InvalidInputShapeError(
                f"Invalid input shape: field names must be strings, got {bad[:5]!r}",
                {"invalid": bad[:5]},
            )
        return list(dict.fromkeys(field_names))

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------
    def create_spatial_dataset(
        self,
        name: str,
        feature_collection: Union[FeatureCollection, Mapping[str, Any]],
        source: SourceInput = None,
    ) -> SpatialDataset:
        """
        Wrap a FeatureCollection as a SpatialDataset.

        A FeatureCollection model is wrapped as-is (same object, not copied);
        a GeoJSON-shaped mapping is validated into one.

        Raises:
            InvalidInputShapeError: If the input is not FeatureCollection-shaped
        """
        collection = self._coerce_feature_collection(feature_collection)
        dataset = SpatialDataset(
            id=self.id_generator(),
            name=name,
            geojson=collection,
            layer_schema=analyze_feature_collection(collection, self.settings),
            source=self._build_source(name, source),
            visible=True,
            active=True,
            created_at=self.clock(),
        )
        log.debug(
            f"Created spatial dataset {dataset.id} ({name!r}): "
            f"{dataset.layer_schema.feature_count} features, "
            f"geometry_type={dataset.layer_schema.geometry_type}"
        )
        return dataset

    def create_table_dataset(
        self,
        name: str,
        rows: Sequence[Mapping[str, Any]],
        field_names: Optional[Sequence[str]] = None,
        source: SourceInput = None,
    ) -> TableDataset:
        """
        Wrap parsed rows as a TableDataset.

        When `field_names` is omitted the key order of the first row is used;
        an empty row list yields an empty field list.

        Raises:
            InvalidInputShapeError: If rows are not a list of mappings
        """
        checked_rows = self._check_rows(rows)
        if field_names is None:
            names = list(checked_rows[0].keys()) if checked_rows else []
        else:
            names = self._check_field_names(field_names)

        dataset = TableDataset(
            id=self.id_generator(),
            name=name,
            rows=checked_rows,
            field_names=names,
            layer_schema=analyze_table(checked_rows, names, self.settings),
            source=self._build_source(name, source),
            visible=True,
            active=True,
            created_at=self.clock(),
        )
        log.debug(
            f"Created table dataset {dataset.id} ({name!r}): "
            f"{len(checked_rows)} rows, {len(names)} fields"
        )
        return dataset


_default_factory = DatasetFactory()


def get_default_factory() -> DatasetFactory:
    """Factory used when callers do not inject their own."""
    return _default_factory


def create_spatial_dataset(
    name: str,
    feature_collection: Union[FeatureCollection, Mapping[str, Any]],
    source: SourceInput = None,
) -> SpatialDataset:
    """Build a SpatialDataset with the default (UUID-based) factory."""
    return _default_factory.create_spatial_dataset(name, feature_collection, source)


def create_table_dataset(
    name: str,
    rows: Sequence[Mapping[str, Any]],
    field_names: Optional[Sequence[str]] = None,
    source: SourceInput = None,
) -> TableDataset:
    """Build a TableDataset with the default (UUID-based) factory."""
    return _default_factory.create_table_dataset(name, rows, field_names, source)
