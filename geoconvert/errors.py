"""Errors raised at the boundary between importers and the dataset core."""

from typing import Any, Optional

__all__ = ["InvalidInputShapeError"]


class InvalidInputShapeError(ValueError):
    """
    Raised when a collaborator hands over structurally invalid input.

    Examples: rows that are not a list, a feature collection without a
    feature list, a row that is not a mapping. Heterogeneous but well-shaped
    content is never an error; it is reflected in the inferred schema.

    Attributes:
        details: Context about the offending input (index, received type, ...)
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}
