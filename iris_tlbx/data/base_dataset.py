"""Base dataset class for all dataset implementations."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Self

import pandas as pd
from sklearn.preprocessing import StandardScaler

from iris_tlbx.errors import DataError, SchemaError


if TYPE_CHECKING:
    from iris_tlbx.analysis.explorer import DatasetExplorer
    from iris_tlbx.analysis.splitter import Split

from .base_columns import BaseColumn
from .preprocessing import SCALED_SUFFIX, add_dummy_columns, add_scaled_columns
from .views import DatasetView


class BaseDataset(ABC):
    """Abstract base class for dataset handlers.

    A dataset is created once at load time and only ever grows by derived
    columns. Every transforming method returns a *new* instance that owns its own
    copy of the data.
    """

    Col: type[BaseColumn]

    def __init__(self, df: pd.DataFrame | None = None) -> None:
        """Initialize the base dataset.

        Args:
            df: Pre-loaded and cleaned DataFrame (optional)
        """
        self._df: pd.DataFrame | None = df

    @classmethod
    @abstractmethod
    def from_csv(cls, csv_path: str | Path, **kwargs: object) -> "BaseDataset":
        """Load dataset from CSV file.

        Args:
            csv_path: Path to the CSV file
            **kwargs: Additional loading parameters

        Returns:
            Dataset instance with loaded data
        """
        ...

    @property
    def df(self) -> pd.DataFrame:
        """Get the raw/cleaned DataFrame.

        Raises:
            DataError: If dataset not loaded
        """
        if self._df is None:
            raise DataError("Dataset not loaded. Use load() or from_csv() to load data.", stage="load")
        return self._df

    def __len__(self) -> int:
        return len(self.df)

    @property
    def df_pretty(self) -> pd.DataFrame:
        """Get the DataFrame with pretty column names."""
        return self.df.rename(columns={col: self.get_pretty_name(col) for col in self.df.columns})

    @property
    def numeric_cols(self) -> pd.Index:
        """Get numeric column names (source and derived).

        Default implementation filters columns by numeric dtypes.
        """
        return self.df.select_dtypes(include=["number"]).columns

    @property
    def categorical_cols(self) -> pd.Index:
        """Get categorical column names (everything non-numeric)."""
        return self.df.select_dtypes(exclude=["number"]).columns

    def standardize(self, df: pd.DataFrame | None = None) -> pd.DataFrame:
        """Compute a standardized version of the numeric columns using [sklearn's StandardScaler](https://scikit-learn.org/stable/modules/generated/sklearn.preprocessing.StandardScaler.html).

        Unlike :meth:`with_scaled_columns` this replaces values instead of appending
        columns; it is used for side-by-side comparisons.

        Returns:
            DataFrame with numeric columns scaled to mean=0, std=1
        """
        if df is None:
            df = self.df
        cols = df.select_dtypes(include=["number"]).columns

        return pd.DataFrame(
            StandardScaler().fit_transform(df[cols]),
            columns=cols,
            index=df.index,
        )

    def with_scaled_columns(self, columns: Iterable[str] | None = None, suffix: str = SCALED_SUFFIX) -> Self:
        """Return a new dataset with ``<col>_scaled`` z-score columns appended.

        Args:
            columns: Numeric columns to standardize (defaults to the source numeric columns).
            suffix: Suffix for the derived columns.
        """
        columns = list(columns) if columns is not None else self.Col.numeric_columns()
        return type(self)(df=add_scaled_columns(self.df, columns, suffix=suffix))

    def with_dummy_columns(self, column: str | None = None, levels: Sequence[object] | None = None) -> Self:
        """Return a new dataset with one ``<column>_<level>`` indicator per level appended.

        Args:
            column: Categorical column (defaults to the label column).
            levels: Level set (defaults to the levels declared in the column metadata).
        """
        column = column or self.Col.TARGET
        if levels is None:
            try:
                levels = self.Col(column).levels or None
            except ValueError:
                levels = None
        return type(self)(df=add_dummy_columns(self.df, column, levels=levels))

    def split(self, *, seed: int, train_fraction: float = 0.8) -> "Split":
        """Partition the rows into train/test frames (see :func:`~iris_tlbx.analysis.splitter.split_dataset`)."""
        from iris_tlbx.analysis.splitter import split_dataset

        return split_dataset(self.df, seed=seed, train_fraction=train_fraction)

    def get_pretty_names(self, column_names: list[str] | None = None) -> list[str]:
        """Convert multiple column names to pretty names."""
        return [self.get_pretty_name(name) for name in column_names or self.df.columns.to_list()]

    def get_pretty_name(self, column_name: str) -> str:
        """Convert column name to pretty name for visualization.

        Derived columns are labelled after their source column, e.g.
        ``petal_length_scaled`` -> ``Petal Length (cm) [z]``.
        """
        try:
            col_enum = self.Col(column_name)
        except ValueError:
            if column_name.endswith(SCALED_SUFFIX):
                source = column_name.removesuffix(SCALED_SUFFIX)
                if source in self.Col.numeric_columns():
                    return f"{self.Col(source).pretty_name} [z]"
            # Fallback: capitalize and replace underscores if not in enum
            return column_name.replace("_", " ").title()
        else:
            return str(col_enum.pretty_name)

    def view(
        self,
        columns: Iterable[str] | None = None,
        target_col: str | None = None,
    ) -> DatasetView:
        """Build an immutable dataset view for analyzers and plotting layers.

        Args:
            columns: Columns to include in the view (defaults to all)
            target_col: Optional label column reference

        Returns:
            DatasetView containing a copy of the selected data and metadata
        """
        selected_cols = list(columns or self.df.columns.to_list())
        missing = [col for col in selected_cols if col not in self.df.columns]
        if missing:
            raise SchemaError(f"Columns not found in dataset: {missing}", stage="view", field=missing[0])

        return DatasetView(
            df=self.df.loc[:, selected_cols].copy(),
            pretty_by_col={col: self.get_pretty_name(col) for col in selected_cols},
            numeric_cols=[col for col in selected_cols if col in self.numeric_cols],
            categorical_cols=[col for col in selected_cols if col in self.categorical_cols],
            target_col=target_col or (self.Col.TARGET if self.Col.TARGET in selected_cols else None),
        )

    def make_explorer(self, columns: Iterable[str] | None = None, bins: int = 10) -> "DatasetExplorer":
        """Instantiate an explorer (summary statistics, histograms, missing values) for this dataset."""
        from iris_tlbx.analysis.explorer import DatasetExplorer

        return DatasetExplorer(self.view(columns=columns), bins=bins)
