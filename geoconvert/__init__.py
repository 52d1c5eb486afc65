# =============================================================================
# geoconvert Core Library
# =============================================================================
# Canonical dataset model shared by every importer, editor and exporter.
# See individual sub-packages for detailed documentation.
# =============================================================================

"""
geoconvert core.

Sub-packages / modules:
- models: Pydantic models for geometry, schema and datasets
- spatial_utils: Coordinate parsing/detection and field-name sanitization
- inference: Schema inference over property bags
- factory: Dataset construction
- transformations: Dataset transforms and export recipes
"""

__version__ = "0.1.0"
