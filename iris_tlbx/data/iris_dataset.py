"""Loading and cleaning of the Iris dataset."""

import logging
from pathlib import Path

import pandas as pd
from sklearn.datasets import load_iris

from iris_tlbx.errors import ConfigurationError, DataError, SchemaError

from .base_dataset import BaseDataset
from .iris_columns import SPECIES_LEVELS
from .iris_columns import IrisColumn as Col


logger = logging.getLogger(__name__)


class IrisDataset(BaseDataset):
    """Loading and preprocessing for [Fisher's Iris dataset](https://en.wikipedia.org/wiki/Iris_flower_data_set).

    150 rows, four numeric measurements and the ``species`` label with three levels.

    **Example workflow**:
    >>> from iris_tlbx.data import IrisDataset, IrisCol
    >>> ds = IrisDataset.load()
    >>> exploration = ds.make_explorer().fit().result()
    >>> exploration.require_complete()
    >>> prepared = ds.with_scaled_columns().with_dummy_columns(IrisCol.SPECIES)
    >>> split = prepared.split(seed=123, train_fraction=0.8)
    >>> split.train.shape, split.test.shape
    ((120, 12), (30, 12))
    """

    Col = Col

    @classmethod
    def load(cls) -> "IrisDataset":
        """Materialize the fixed 150-row dataset from the copy bundled with scikit-learn."""
        bunch = load_iris(as_frame=True)
        frame = bunch.frame.drop(columns=["target"]).assign(
            species=pd.Categorical.from_codes(bunch.target, categories=list(bunch.target_names)),
        )
        iris_df = frame.pipe(cls._normalize_col_names).pipe(cls._convert_data_types)
        logger.info("Loaded Iris dataset with %d rows and %d columns", *iris_df.shape)
        return cls(df=iris_df)

    @classmethod
    def from_csv(cls, csv_path: str | Path, **read_csv_kwargs: object) -> "IrisDataset":
        """Load and clean the dataset from a CSV file.

        - Normalize column names (``Sepal.Length``, ``sepal length (cm)`` -> ``sepal_length``)
        - Convert data types (measurements to float, species to a categorical)

        Args:
            csv_path: Path to the CSV file
            **read_csv_kwargs: Forwarded to :func:`pandas.read_csv`

        Returns:
            IrisDataset instance with loaded and cleaned data

        Raises:
            ConfigurationError: If the file is missing, unreadable or not parseable as CSV.
            SchemaError: If an Iris column is absent after name normalization.
        """
        try:
            raw = pd.read_csv(Path(csv_path), **read_csv_kwargs)
        except (OSError, UnicodeDecodeError, pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
            raise ConfigurationError(
                f"Cannot read CSV file '{csv_path}': {exc}",
                stage="load",
                field="csv_path",
            ) from exc

        iris_df = raw.pipe(cls._normalize_col_names).pipe(cls._convert_data_types)
        logger.info("Loaded %d rows from %s", len(iris_df), csv_path)
        return cls(df=iris_df)

    @staticmethod
    def _normalize_col_names(df: pd.DataFrame) -> pd.DataFrame:
        """Standardize column names to match the IrisColumn enum.

        Strip units in parentheses and whitespace, convert to lowercase, replace
        spaces/dots/slashes/hyphens with underscores, collapse multiple underscores.
        """
        return df.set_axis(
            df.columns.str.replace(r"\(.*?\)", "", regex=True)
            .str.strip()
            .str.lower()
            .str.replace(r"[\s./\-]+", "_", regex=True)
            .str.replace(r"_+", "_", regex=True)
            .str.strip("_"),
            axis=1,
        )

    @staticmethod
    def _convert_data_types(df: pd.DataFrame) -> pd.DataFrame:
        """Set appropriate data types for each column.

        Species labels such as ``Iris-setosa`` are reduced to the bare level name.
        Unparseable measurements become NaN and are reported by the explorer.
        """
        missing = [col for col in Col if col not in df.columns]
        if missing:
            raise SchemaError(
                f"Expected Iris columns not found: {[str(c) for c in missing]}",
                stage="load",
                field=missing[0],
            )
        if df.empty:
            raise DataError("Iris source contains no rows.", stage="load")

        species = df[Col.SPECIES].astype("string").str.strip().str.lower().str.removeprefix("iris-")
        return df.loc[:, [str(col) for col in Col]].assign(
            **{col: pd.to_numeric(df[col], errors="coerce").astype(float) for col in Col.numeric_columns()},
            species=pd.Categorical(species, categories=list(SPECIES_LEVELS)),
        )
