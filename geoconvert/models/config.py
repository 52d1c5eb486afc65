# =============================================================================
# Configuration Models Module
# =============================================================================
# Pydantic Settings model for the inference and detection heuristics:
# - InferenceSettings: sample sizes and majority thresholds
# =============================================================================

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["InferenceSettings"]


class InferenceSettings(BaseSettings):
    """
    Tuning knobs for schema inference and coordinate-column detection.

    Maps environment variables with prefix "GEOCONVERT_":
    - GEOCONVERT_TYPE_SAMPLE_SIZE → type_sample_size
    - GEOCONVERT_SAMPLE_VALUES_LIMIT → sample_values_limit
    - GEOCONVERT_TYPE_MAJORITY_RATIO → type_majority_ratio
    - GEOCONVERT_DATE_MAJORITY_RATIO → date_majority_ratio
    - GEOCONVERT_MIN_DATE_LENGTH → min_date_length
    - GEOCONVERT_COORDINATE_SAMPLE_ROWS → coordinate_sample_rows
    - GEOCONVERT_COORDINATE_VALID_RATIO → coordinate_valid_ratio
    - GEOCONVERT_MERGE_NAME_MAX_LENGTH → merge_name_max_length

    Attributes:
        type_sample_size: Present values examined for type inference (default: 100)
        sample_values_limit: Present values kept as field samples (default: 5)
        type_majority_ratio: Share of the sample needed for number/boolean (default: 0.7)
        date_majority_ratio: Share of the sample needed for date (default: 0.9)
        min_date_length: Minimum string length considered as a date (default: 7)
        coordinate_sample_rows: Rows checked by coordinate detection (default: 20)
        coordinate_valid_ratio: Share of checked rows that must be valid (default: 0.5)
        merge_name_max_length: Max length of the joined names in a merge (default: 50)
    """

    type_sample_size: int = Field(100, gt=0, description="Values examined for type inference")
    sample_values_limit: int = Field(5, ge=0, description="Sample values kept per field")
    type_majority_ratio: float = Field(0.7, gt=0, le=1, description="Number/boolean majority")
    date_majority_ratio: float = Field(0.9, gt=0, le=1, description="Date majority")
    min_date_length: int = Field(7, ge=1, description="Minimum length of a date string")
    coordinate_sample_rows: int = Field(20, gt=0, description="Rows checked by coordinate detection")
    coordinate_valid_ratio: float = Field(0.5, gt=0, le=1, description="Valid-row share for detection")
    merge_name_max_length: int = Field(50, gt=0, description="Max joined-name length for merges")

    model_config = SettingsConfigDict(
        env_prefix="GEOCONVERT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore unrelated env vars from shared .env files
    )
