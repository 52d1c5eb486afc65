# =============================================================================
# Base Class for Export Steps
# =============================================================================
# Abstract base class for the steps that turn a dataset into an export view.
# =============================================================================

from abc import ABC, abstractmethod

from geoconvert.factory import DatasetFactory
from geoconvert.models import AnyDataset

__all__ = ["ExportStep"]


class ExportStep(ABC):
    """
    Base class for all export preparation steps.

    A step reads a dataset and returns a new one; it must never modify its
    input. Steps are chained by an export recipe, each consuming the output
    of the previous one.
    """

    @abstractmethod
    def apply(self, dataset: AnyDataset, factory: DatasetFactory) -> AnyDataset:
        """
        Produce the next dataset in the chain.

        Args:
            dataset: Output of the previous step (or the user's dataset)
            factory: Factory used to build the new dataset

        Returns:
            New dataset
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
