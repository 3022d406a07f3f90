"""Column-appending preprocessing steps (z-scores and dummy indicators).

Both helpers return a new DataFrame that holds all original columns unchanged
plus the derived ones; the input frame is never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

import numpy as np
import pandas as pd
from sklearn.preprocessing import StandardScaler

from iris_tlbx.errors import DataError, SchemaError


logger = logging.getLogger(__name__)

_STAGE = "preprocess"
SCALED_SUFFIX = "_scaled"


def scaled_name(column: str, suffix: str = SCALED_SUFFIX) -> str:
    """Name of the standardized counterpart of ``column``."""
    return f"{column}{suffix}"


def dummy_name(column: str, level: object) -> str:
    """Name of the indicator column for ``level`` of ``column``."""
    return f"{column}_{level}"


def _require_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    for col in columns:
        if col not in df.columns:
            raise SchemaError(f"Column '{col}' not found in dataset.", stage=_STAGE, field=col)


def _check_overwrites(df: pd.DataFrame, derived: Mapping[str, object]) -> None:
    """Reject derived columns that would replace an existing column holding different values."""
    for name, values in derived.items():
        if name in df.columns and not np.array_equal(df[name].to_numpy(), np.asarray(values)):
            raise SchemaError(
                f"Derived column '{name}' would overwrite an existing column.",
                stage=_STAGE,
                field=name,
            )


def add_scaled_columns(
    df: pd.DataFrame,
    columns: Sequence[str],
    *,
    suffix: str = SCALED_SUFFIX,
) -> pd.DataFrame:
    r"""Append a z-scored copy of each column in ``columns``.

    Uses [sklearn's StandardScaler](https://scikit-learn.org/stable/modules/generated/sklearn.preprocessing.StandardScaler.html),
    i.e. the population mean and standard deviation (``ddof=0``) of each column on its own:
    :math:`z = (x - \bar{x}) / \sigma_x`.

    Args:
        df: Input frame (not modified).
        columns: Numeric columns to standardize.
        suffix: Suffix for the derived column names.

    Returns:
        Copy of ``df`` with one ``<col><suffix>`` column per input column.

    Raises:
        SchemaError: If a column is missing or not numeric, or a derived name would replace an existing column.
        DataError: If the frame is empty, or a column has missing values or zero variance.
    """
    columns = list(columns)
    _require_columns(df, columns)
    if df.empty:
        raise DataError("Cannot standardize an empty dataset.", stage=_STAGE)

    for col in columns:
        if not pd.api.types.is_numeric_dtype(df[col]):
            raise SchemaError(f"Column '{col}' is not numeric and cannot be standardized.", stage=_STAGE, field=col)
        if df[col].isna().any():
            raise DataError(f"Column '{col}' contains missing values.", stage=_STAGE, field=col)
        if df[col].nunique() <= 1:
            raise DataError(f"Column '{col}' has zero variance and cannot be standardized.", stage=_STAGE, field=col)

    scaler = StandardScaler()
    scaled = scaler.fit_transform(df.loc[:, columns].astype(float))
    logger.debug("Standardized %s (means=%s, scales=%s)", columns, scaler.mean_, scaler.scale_)

    derived = {scaled_name(col, suffix): scaled[:, idx] for idx, col in enumerate(columns)}
    _check_overwrites(df, derived)
    return df.assign(**derived)


def add_dummy_columns(
    df: pd.DataFrame,
    column: str,
    levels: Sequence[object] | None = None,
) -> pd.DataFrame:
    """Append one 0/1 indicator column per level of a categorical column.

    Indicator columns are named ``<column>_<level>``; every row has exactly one 1
    among them.

    Args:
        df: Input frame (not modified).
        column: Categorical source column.
        levels: Fixed level set (and column order). Defaults to the sorted observed levels.
            Levels are compared by their string form, so ``[1, 2]`` matches integer values.

    Returns:
        Copy of ``df`` with the indicator columns appended.

    Raises:
        SchemaError: If ``column`` is missing or an indicator name would replace an existing column.
        DataError: If values are missing or fall outside ``levels``.
    """
    _require_columns(df, [column])
    values = df[column]
    if values.isna().any():
        raise DataError(f"Column '{column}' contains missing values.", stage=_STAGE, field=column)

    if levels is None:
        levels = sorted(values.astype(str).unique())
    levels = [str(level) for level in levels]

    unknown = set(values.astype(str)) - set(levels)
    if unknown:
        raise DataError(
            f"Column '{column}' has values outside the declared levels {levels}: {sorted(unknown)}",
            stage=_STAGE,
            field=column,
        )

    dummies = pd.get_dummies(
        pd.Categorical(values.astype(str), categories=levels),
        prefix=column,
        prefix_sep="_",
        dtype=int,
    ).set_axis(df.index, axis=0)

    derived = {str(col): dummies[col] for col in dummies.columns}
    _check_overwrites(df, derived)
    return df.assign(**derived)
