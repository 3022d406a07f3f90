"""Task-specific views over dataset content."""

from collections.abc import Mapping
from dataclasses import dataclass, field

import pandas as pd


@dataclass(frozen=True)
class DatasetView:
    """Immutable snapshot of dataset data and related metadata.

    Attributes:
        df: Dataframe slice containing the relevant columns.
        pretty_by_col: Mapping from normalized column names to display-friendly labels.
        numeric_cols: Ordered list of numeric feature names present in ``df``.
        categorical_cols: Ordered list of categorical column names present in ``df``.
        target_col: Optional name of the label column.
    """

    df: pd.DataFrame
    """Dataframe slice containing the relevant columns."""
    pretty_by_col: Mapping[str, str]
    """Mapping from normalized column names to display-friendly labels."""
    numeric_cols: list[str]
    categorical_cols: list[str] = field(default_factory=list)
    target_col: str | None = None

    @property
    def features(self) -> pd.DataFrame:
        """Return view over numeric feature columns."""
        cols = self.numeric_cols or self.df.columns.tolist()
        return self.df.loc[:, cols]

    def pretty(self, column: str) -> str:
        """Display label for ``column`` (falls back to the raw name)."""
        return self.pretty_by_col.get(column, column)
