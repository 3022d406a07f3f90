"""Tests for z-score and indicator column helpers."""

import numpy as np
import pandas as pd
import pytest

from iris_tlbx.data import add_dummy_columns, add_scaled_columns
from iris_tlbx.errors import DataError, SchemaError


@pytest.fixture
def small_df() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "x": [1.0, 2.0, 3.0, 4.0],
            "y": [10.0, 10.0, 20.0, 40.0],
            "kind": ["a", "b", "a", "c"],
        },
    )


class TestAddScaledColumns:
    """Standardization appends ``<col>_scaled`` and keeps the originals."""

    def test_zero_mean_unit_std(self, small_df) -> None:
        out = add_scaled_columns(small_df, ["x", "y"])

        for col in ("x_scaled", "y_scaled"):
            assert np.isclose(out[col].mean(), 0.0)
            assert np.isclose(out[col].std(ddof=0), 1.0)

    def test_originals_unchanged_and_input_not_mutated(self, small_df) -> None:
        before = small_df.copy()
        out = add_scaled_columns(small_df, ["x"])

        pd.testing.assert_frame_equal(small_df, before)
        pd.testing.assert_series_equal(out["x"], before["x"])
        assert list(out.columns) == ["x", "y", "kind", "x_scaled"]

    def test_custom_suffix(self, small_df) -> None:
        assert "x_z" in add_scaled_columns(small_df, ["x"], suffix="_z").columns

    def test_iris_scaled_columns(self, prepared_dataset) -> None:
        df = prepared_dataset.df
        assert np.allclose(df.filter(like="_scaled").mean(), 0.0)
        assert np.allclose(df.filter(like="_scaled").std(ddof=0), 1.0)

    def test_missing_column(self, small_df) -> None:
        with pytest.raises(SchemaError):
            add_scaled_columns(small_df, ["nope"])

    def test_non_numeric_column(self, small_df) -> None:
        with pytest.raises(SchemaError):
            add_scaled_columns(small_df, ["kind"])

    def test_missing_values(self, small_df) -> None:
        with pytest.raises(DataError):
            add_scaled_columns(small_df.assign(x=[1.0, np.nan, 3.0, 4.0]), ["x"])

    def test_zero_variance(self, small_df) -> None:
        with pytest.raises(DataError, match="zero variance"):
            add_scaled_columns(small_df.assign(x=5.0), ["x"])

    def test_empty_frame(self) -> None:
        with pytest.raises(DataError):
            add_scaled_columns(pd.DataFrame({"x": pd.Series([], dtype=float)}), ["x"])

    def test_tiny_scale_column(self) -> None:
        """Columns with a very small spread still standardize."""
        out = add_scaled_columns(pd.DataFrame({"x": [1e-9, 2e-9, 3e-9, 4e-9]}), ["x"])
        assert np.isclose(out["x_scaled"].mean(), 0.0)
        assert np.isclose(out["x_scaled"].std(ddof=0), 1.0)

    def test_empty_suffix_would_overwrite(self, small_df) -> None:
        before = small_df.copy()
        with pytest.raises(SchemaError, match="overwrite"):
            add_scaled_columns(small_df, ["x"], suffix="")
        pd.testing.assert_frame_equal(small_df, before)


class TestAddDummyColumns:
    """One 0/1 indicator per level."""

    def test_exactly_one_indicator_per_row(self, small_df) -> None:
        out = add_dummy_columns(small_df, "kind")

        dummies = out[["kind_a", "kind_b", "kind_c"]]
        assert (dummies.sum(axis=1) == 1).all()
        assert out["kind_a"].tolist() == [1, 0, 1, 0]

    def test_declared_levels_include_unobserved(self, small_df) -> None:
        out = add_dummy_columns(small_df, "kind", levels=["a", "b", "c", "d"])
        assert out["kind_d"].sum() == 0

    def test_iris_indicators(self, prepared_dataset) -> None:
        df = prepared_dataset.df
        indicators = df[["species_setosa", "species_versicolor", "species_virginica"]]
        assert (indicators.sum(axis=1) == 1).all()
        assert indicators.sum().tolist() == [50, 50, 50]

    def test_reapplying_keeps_column_count(self, small_df) -> None:
        once = add_dummy_columns(small_df, "kind")
        twice = add_dummy_columns(once, "kind")
        pd.testing.assert_frame_equal(once, twice)

    def test_unknown_level(self, small_df) -> None:
        with pytest.raises(DataError):
            add_dummy_columns(small_df, "kind", levels=["a", "b"])

    def test_missing_values(self, small_df) -> None:
        with pytest.raises(DataError):
            add_dummy_columns(small_df.assign(kind=["a", None, "b", "c"]), "kind")

    def test_missing_column(self, small_df) -> None:
        with pytest.raises(SchemaError):
            add_dummy_columns(small_df, "nope")

    def test_integer_levels(self) -> None:
        out = add_dummy_columns(pd.DataFrame({"grade": [1, 2, 1, 2]}), "grade", levels=[1, 2])
        assert out["grade_1"].tolist() == [1, 0, 1, 0]
        assert out["grade_2"].tolist() == [0, 1, 0, 1]

    def test_indicator_name_collision(self, small_df) -> None:
        df = small_df.assign(kind_a=[7, 7, 7, 7])
        with pytest.raises(SchemaError, match="kind_a"):
            add_dummy_columns(df, "kind")
