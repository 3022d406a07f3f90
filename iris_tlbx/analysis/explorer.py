"""Exploratory summaries: descriptive statistics, histograms and missing values."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Self

import numpy as np
import pandas as pd
from sklearn.impute import KNNImputer, SimpleImputer

from iris_tlbx.data.views import DatasetView
from iris_tlbx.errors import ConfigurationError, SchemaError

from .base_analyser import BaseAnalyser


logger = logging.getLogger(__name__)

_STAGE = "explore"


@dataclass(frozen=True)
class HistogramData:
    """Binned counts for one numeric column.

    Attributes:
        counts: Number of observations per bin (length ``bins``).
        bin_edges: Bin boundaries (length ``bins + 1``).
    """

    column: str
    counts: np.ndarray
    bin_edges: np.ndarray

    def to_frame(self) -> pd.DataFrame:
        """Tidy table with one row per bin."""
        return pd.DataFrame(
            {
                "left": self.bin_edges[:-1],
                "right": self.bin_edges[1:],
                "count": self.counts,
            },
        )


@dataclass(frozen=True)
class ExplorationResult:
    """Exploratory analysis outputs grouped for reporting and plotting.

    Attributes:
        summary: ``DataFrame.describe()`` of the numeric columns (count, mean, std, min, quartiles, max).
        category_counts: Level counts per categorical column.
        group_means: Per-level means of the numeric columns, per categorical column.
        histograms: Binned counts per numeric column.
        missing: Number of missing values per column.
        pretty_by_col: Mapping from raw column names to presentation labels.
    """

    summary: pd.DataFrame
    category_counts: dict[str, pd.Series]
    group_means: dict[str, pd.DataFrame]
    histograms: dict[str, HistogramData]
    missing: pd.Series
    pretty_by_col: dict[str, str]

    @property
    def n_missing(self) -> int:
        """Total number of missing cells."""
        return int(self.missing.sum())

    @property
    def is_complete(self) -> bool:
        """Whether no column has missing values."""
        return self.n_missing == 0

    def require_complete(self) -> None:
        """Raise unless every column is free of missing values.

        Raises:
            ConfigurationError: Naming the columns with missing values. Impute
                explicitly (see :func:`impute_missing`) before continuing.
        """
        incomplete = self.missing[self.missing > 0]
        if not incomplete.empty:
            raise ConfigurationError(
                f"Missing values present in columns {incomplete.to_dict()}; impute or drop them first.",
                stage=_STAGE,
                field=str(incomplete.index[0]),
            )

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_histograms(self, **kwargs: object):
        """Plot the per-column histograms using the plotting helper."""
        from iris_tlbx.plotting.dataset_plots import plot_histograms  # noqa: PLC0415

        return plot_histograms(self, **kwargs)


class DatasetExplorer(BaseAnalyser):
    """Analyzer computing the exploratory overview of a dataset view.

    Example:
        >>> from iris_tlbx.data import IrisDataset
        >>> res = IrisDataset.load().make_explorer(bins=8).fit().result()
        >>> round(res.summary.loc["mean", "petal_length"], 3)
        3.758
        >>> res.category_counts["species"].to_dict()
        {'setosa': 50, 'versicolor': 50, 'virginica': 50}
    """

    def __init__(self, view: DatasetView, bins: int = 10) -> None:
        """Initialize the explorer.

        Args:
            view: Immutable dataset view to analyze
            bins: Number of equal-width histogram bins per numeric column (NumPy default: 10)
        """
        if bins < 1:
            raise ConfigurationError(f"bins must be positive, got {bins}.", stage=_STAGE, field="bins")
        self._view = view
        self.bins = bins
        self._result: ExplorationResult | None = None

    def _histogram(self, column: str) -> HistogramData:
        values = self._view.df[column].dropna().to_numpy(dtype=float)
        counts, edges = np.histogram(values, bins=self.bins)
        return HistogramData(column=column, counts=counts, bin_edges=edges)

    def fit(self) -> Self:
        """Compute summaries, histograms and missing-value counts."""
        df = self._view.df
        numeric = self._view.numeric_cols
        categorical = self._view.categorical_cols

        summary = df.loc[:, numeric].describe() if numeric else pd.DataFrame()
        category_counts = {col: df[col].value_counts(sort=False) for col in categorical}
        group_means = {
            col: df.groupby(col, observed=False)[numeric].mean() for col in categorical if numeric
        }
        missing = df.isna().sum()

        self._result = ExplorationResult(
            summary=summary,
            category_counts=category_counts,
            group_means=group_means,
            histograms={col: self._histogram(col) for col in numeric},
            missing=missing,
            pretty_by_col=dict(self._view.pretty_by_col),
        )
        logger.info(
            "Explored %d rows: %d numeric, %d categorical columns, %d missing values",
            len(df),
            len(numeric),
            len(categorical),
            int(missing.sum()),
        )
        return self

    def result(self) -> ExplorationResult:
        """Return the exploration results.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        if self._result is None:
            raise ValueError("Must call fit() before result()")
        return self._result


def impute_missing(
    df: pd.DataFrame,
    strategy: Literal["mean", "ffill", "bfill", "knn"] = "mean",
    columns: list[str] | None = None,
    n_neighbors: int = 5,
) -> pd.DataFrame:
    """Fill missing numeric values with an explicitly chosen strategy.

    Never applied automatically by the workflow; call it before re-running the explorer.

    Args:
        df: Input frame (not modified).
        strategy: ``"mean"`` (column mean via ``SimpleImputer``), ``"ffill"``/``"bfill"``
            (carry neighbouring rows), or ``"knn"`` (``KNNImputer`` over the selected columns).
        columns: Numeric columns to impute (defaults to all numeric columns).
        n_neighbors: Neighbours used by the ``"knn"`` strategy.

    Returns:
        Copy of ``df`` with the selected columns imputed.
    """
    columns = columns or df.select_dtypes(include=["number"]).columns.tolist()
    missing_cols = [col for col in columns if col not in df.columns]
    if missing_cols:
        raise SchemaError(f"Columns not found: {missing_cols}", stage=_STAGE, field=missing_cols[0])

    imputed = df.copy()
    if strategy == "mean":
        imputed.loc[:, columns] = SimpleImputer(strategy="mean").fit_transform(df[columns])
    elif strategy == "knn":
        imputed.loc[:, columns] = KNNImputer(n_neighbors=n_neighbors).fit_transform(df[columns])
    elif strategy == "ffill":
        imputed.loc[:, columns] = df[columns].ffill()
    elif strategy == "bfill":
        imputed.loc[:, columns] = df[columns].bfill()
    else:
        raise ConfigurationError(
            f"Invalid strategy='{strategy}'. Use 'mean', 'ffill', 'bfill' or 'knn'.",
            stage=_STAGE,
            field="strategy",
        )
    logger.info("Imputed %d missing values with strategy '%s'", int(df[columns].isna().sum().sum()), strategy)
    return imputed
