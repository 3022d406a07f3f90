"""Tests for DatasetView."""

import pandas as pd
import pytest

from iris_tlbx.data.views import DatasetView


def _view() -> DatasetView:
    df = pd.DataFrame({"a": [1.0, 2.0], "b": [3.0, 4.0], "label": ["x", "y"]})
    return DatasetView(
        df=df,
        pretty_by_col={"a": "Alpha"},
        numeric_cols=["a", "b"],
        categorical_cols=["label"],
        target_col="label",
    )


def test_features_returns_numeric_columns() -> None:
    assert list(_view().features.columns) == ["a", "b"]


def test_features_fall_back_to_all_columns() -> None:
    view = DatasetView(df=pd.DataFrame({"a": [1], "b": [2]}), pretty_by_col={}, numeric_cols=[])
    assert list(view.features.columns) == ["a", "b"]


def test_pretty_falls_back_to_raw_name() -> None:
    view = _view()
    assert view.pretty("a") == "Alpha"
    assert view.pretty("b") == "b"


def test_view_is_frozen() -> None:
    view = _view()
    with pytest.raises(AttributeError):
        view.target_col = "a"  # type: ignore[misc]
