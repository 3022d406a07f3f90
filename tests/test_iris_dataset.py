"""Tests for loading, cleaning and deriving columns on the Iris dataset."""

import pandas as pd
import pytest

from iris_tlbx.data import IrisCol, IrisDataset
from iris_tlbx.errors import ConfigurationError, DataError, SchemaError


class TestLoad:
    """Loading the bundled dataset."""

    def test_shape_and_columns(self, iris_dataset) -> None:
        assert iris_dataset.df.shape == (150, 5)
        assert set(iris_dataset.df.columns) == {str(col) for col in IrisCol}
        assert len(iris_dataset) == 150

    def test_dtypes(self, iris_dataset) -> None:
        df = iris_dataset.df
        for col in IrisCol.numeric_columns():
            assert pd.api.types.is_float_dtype(df[col])
        assert isinstance(df[IrisCol.SPECIES].dtype, pd.CategoricalDtype)
        assert list(df[IrisCol.SPECIES].cat.categories) == ["setosa", "versicolor", "virginica"]

    def test_balanced_species(self, iris_dataset) -> None:
        counts = iris_dataset.df[IrisCol.SPECIES].value_counts()
        assert counts.to_dict() == {"setosa": 50, "versicolor": 50, "virginica": 50}

    def test_numeric_and_categorical_cols(self, iris_dataset) -> None:
        assert set(iris_dataset.numeric_cols) == set(IrisCol.numeric_columns())
        assert list(iris_dataset.categorical_cols) == ["species"]

    def test_unloaded_dataset_raises(self) -> None:
        with pytest.raises(DataError):
            _ = IrisDataset().df


class TestFromCsv:
    """Loading from CSV files with non-canonical headers."""

    def test_r_style_headers_and_labels(self, tmp_path) -> None:
        """``Sepal.Length`` style headers and ``Iris-setosa`` labels are normalized."""
        path = tmp_path / "iris.csv"
        pd.DataFrame(
            {
                "Sepal.Length": [5.1, 7.0, 6.3],
                "Sepal.Width": [3.5, 3.2, 3.3],
                "Petal.Length": [1.4, 4.7, 6.0],
                "Petal.Width": [0.2, 1.4, 2.5],
                "Species": ["Iris-setosa", "versicolor", "Virginica"],
            },
        ).to_csv(path, index=False)

        ds = IrisDataset.from_csv(path)

        assert set(ds.df.columns) == {str(col) for col in IrisCol}
        assert ds.df[IrisCol.SPECIES].tolist() == ["setosa", "versicolor", "virginica"]
        assert ds.df[IrisCol.PETAL_LENGTH].tolist() == [1.4, 4.7, 6.0]

    def test_sklearn_style_headers(self, tmp_path) -> None:
        path = tmp_path / "iris.csv"
        pd.DataFrame(
            {
                "sepal length (cm)": [5.1],
                "sepal width (cm)": [3.5],
                "petal length (cm)": [1.4],
                "petal width (cm)": [0.2],
                "species": ["setosa"],
            },
        ).to_csv(path, index=False)

        assert IrisDataset.from_csv(path).df.shape == (1, 5)

    def test_missing_column_raises_schema_error(self, tmp_path) -> None:
        path = tmp_path / "iris.csv"
        pd.DataFrame({"sepal_length": [5.1], "species": ["setosa"]}).to_csv(path, index=False)
        with pytest.raises(SchemaError):
            IrisDataset.from_csv(path)

    def test_unparseable_values_become_missing(self, tmp_path) -> None:
        path = tmp_path / "iris.csv"
        pd.DataFrame(
            {
                "sepal_length": ["5.1", "n/a"],
                "sepal_width": [3.5, 3.0],
                "petal_length": [1.4, 1.3],
                "petal_width": [0.2, 0.2],
                "species": ["setosa", "setosa"],
            },
        ).to_csv(path, index=False)

        ds = IrisDataset.from_csv(path)
        assert ds.df[IrisCol.SEPAL_LENGTH].isna().sum() == 1

    def test_missing_file_raises_configuration_error(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read"):
            IrisDataset.from_csv(tmp_path / "missing.csv")

    def test_empty_file_raises_configuration_error(self, tmp_path) -> None:
        path = tmp_path / "empty.csv"
        path.write_text("")
        with pytest.raises(ConfigurationError) as excinfo:
            IrisDataset.from_csv(path)
        assert excinfo.value.field == "csv_path"


class TestDerivedColumns:
    """Dataset-level preprocessing helpers return new instances."""

    def test_with_scaled_columns_returns_new_dataset(self, iris_dataset) -> None:
        scaled = iris_dataset.with_scaled_columns()

        assert scaled is not iris_dataset
        assert "petal_length_scaled" in scaled.df.columns
        assert "petal_length_scaled" not in iris_dataset.df.columns
        assert scaled.df.shape == (150, 9)

    def test_prepared_dataset_columns(self, prepared_dataset) -> None:
        assert prepared_dataset.df.shape == (150, 12)
        for level in ("setosa", "versicolor", "virginica"):
            assert f"species_{level}" in prepared_dataset.df.columns

    def test_pretty_name_of_scaled_column(self, prepared_dataset) -> None:
        assert prepared_dataset.get_pretty_name("petal_length_scaled") == "Petal Length (cm) [z]"
        assert prepared_dataset.get_pretty_name("species_setosa") == "Species Setosa"
        assert prepared_dataset.get_pretty_name(IrisCol.SPECIES) == "Species"

    def test_scaled_suffix_cannot_replace_originals(self, iris_dataset) -> None:
        with pytest.raises(SchemaError, match="overwrite"):
            iris_dataset.with_scaled_columns(suffix="")
        assert iris_dataset.df[IrisCol.SEPAL_LENGTH].iloc[0] == pytest.approx(5.1)

    def test_standardize_replaces_values(self, iris_dataset) -> None:
        standardized = iris_dataset.standardize()
        assert list(standardized.columns) == list(iris_dataset.numeric_cols)
        assert standardized.mean().abs().max() < 1e-9


class TestView:
    """Immutable views handed to analyzers."""

    def test_view_selects_columns(self, iris_dataset) -> None:
        view = iris_dataset.view(columns=[IrisCol.PETAL_LENGTH, IrisCol.SPECIES])

        assert list(view.df.columns) == ["petal_length", "species"]
        assert view.numeric_cols == ["petal_length"]
        assert view.categorical_cols == ["species"]
        assert view.target_col == IrisCol.TARGET

    def test_view_without_target(self, iris_dataset) -> None:
        view = iris_dataset.view(columns=[IrisCol.PETAL_LENGTH])
        assert view.target_col is None

    def test_view_is_a_copy(self, iris_dataset) -> None:
        view = iris_dataset.view()
        view.df.loc[0, IrisCol.PETAL_LENGTH] = -1.0
        assert iris_dataset.df.loc[0, IrisCol.PETAL_LENGTH] > 0

    def test_unknown_column_raises(self, iris_dataset) -> None:
        with pytest.raises(SchemaError):
            iris_dataset.view(columns=["does_not_exist"])
