"""Tests for the dataset explorer and explicit imputation."""

import numpy as np
import pytest

from iris_tlbx.analysis import DatasetExplorer, impute_missing
from iris_tlbx.data import IrisCol, IrisDataset
from iris_tlbx.errors import ConfigurationError, SchemaError


@pytest.fixture(scope="module")
def exploration(iris_dataset):
    return iris_dataset.make_explorer(bins=8).fit().result()


@pytest.fixture
def iris_with_gaps(iris_dataset):
    df = iris_dataset.df.copy()
    df.loc[[3, 70], IrisCol.PETAL_WIDTH] = np.nan
    return df


class TestExploration:
    """Summary statistics, counts and histograms on the complete dataset."""

    def test_summary_statistics(self, exploration) -> None:
        summary = exploration.summary
        assert list(summary.columns) == IrisCol.numeric_columns()
        assert summary.loc["count", "sepal_length"] == 150
        assert summary.loc["mean", "petal_length"] == pytest.approx(3.758, abs=1e-3)
        assert summary.loc["min", "sepal_length"] == pytest.approx(4.3)
        assert summary.loc["max", "sepal_length"] == pytest.approx(7.9)

    def test_category_counts(self, exploration) -> None:
        assert exploration.category_counts["species"].to_dict() == {
            "setosa": 50,
            "versicolor": 50,
            "virginica": 50,
        }

    def test_group_means(self, exploration) -> None:
        means = exploration.group_means["species"]
        assert means.loc["setosa", "petal_length"] < means.loc["virginica", "petal_length"]

    def test_histograms(self, exploration) -> None:
        for col in IrisCol.numeric_columns():
            hist = exploration.histograms[col]
            assert len(hist.counts) == 8
            assert len(hist.bin_edges) == 9
            assert hist.counts.sum() == 150
        assert len(exploration.histograms["petal_width"].to_frame()) == 8

    def test_no_missing_values(self, exploration) -> None:
        assert exploration.n_missing == 0
        assert exploration.is_complete
        exploration.require_complete()

    def test_pretty_names(self, exploration) -> None:
        assert exploration.pretty_by_col["sepal_width"] == "Sepal Width (cm)"


class TestExplorerContract:
    """Explorer configuration and missing-value handling."""

    def test_result_before_fit(self, iris_dataset) -> None:
        with pytest.raises(ValueError, match="fit"):
            iris_dataset.make_explorer().result()

    def test_invalid_bins(self, iris_dataset) -> None:
        with pytest.raises(ConfigurationError):
            DatasetExplorer(iris_dataset.view(), bins=0)

    def test_missing_values_are_reported(self, iris_with_gaps) -> None:
        result = IrisDataset(df=iris_with_gaps).make_explorer().fit().result()

        assert result.missing["petal_width"] == 2
        assert not result.is_complete
        assert result.histograms["petal_width"].counts.sum() == 148
        with pytest.raises(ConfigurationError, match="petal_width"):
            result.require_complete()


class TestImputeMissing:
    """Explicit imputation strategies."""

    @pytest.mark.parametrize("strategy", ["mean", "ffill", "bfill", "knn"])
    def test_strategies_fill_gaps(self, iris_with_gaps, strategy) -> None:
        filled = impute_missing(iris_with_gaps, strategy=strategy)

        assert filled[IrisCol.PETAL_WIDTH].isna().sum() == 0
        assert iris_with_gaps[IrisCol.PETAL_WIDTH].isna().sum() == 2

    def test_mean_strategy_value(self, iris_with_gaps) -> None:
        filled = impute_missing(iris_with_gaps, strategy="mean", columns=[IrisCol.PETAL_WIDTH])
        expected = iris_with_gaps[IrisCol.PETAL_WIDTH].mean()
        assert filled.loc[3, IrisCol.PETAL_WIDTH] == pytest.approx(expected)

    def test_invalid_strategy(self, iris_with_gaps) -> None:
        with pytest.raises(ConfigurationError):
            impute_missing(iris_with_gaps, strategy="median")  # type: ignore[arg-type]

    def test_unknown_column(self, iris_with_gaps) -> None:
        with pytest.raises(SchemaError):
            impute_missing(iris_with_gaps, columns=["nope"])
