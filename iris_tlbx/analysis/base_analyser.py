"""Base analyzer class for all analysis components."""

from abc import ABC, abstractmethod
from typing import Any


class BaseAnalyser(ABC):
    """Abstract base class for data analysis components.

    All analyzers must:
    1. Accept a DatasetView in their constructor
    2. Implement fit() to perform the analysis and return self for chaining
    3. Implement result() to return a frozen dataclass with results

    Analyzers are pure computation: they never mutate the view they were given
    and never plot. Plotting helpers in :mod:`iris_tlbx.plotting` accept the
    result dataclasses instead.
    """

    @abstractmethod
    def fit(self) -> "BaseAnalyser":
        """Fit the analyzer to the data.

        Returns:
            Self for method chaining.
        """
        ...

    @abstractmethod
    def result(self) -> Any:
        """Return analysis results as a frozen dataclass instance.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        ...
