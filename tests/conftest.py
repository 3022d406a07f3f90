"""Test configuration for the Iris toolbox."""

import matplotlib
import numpy as np
import pytest


matplotlib.use("Agg")


@pytest.fixture(scope="session")
def iris_dataset():
    """Load the bundled Iris dataset once per test session."""
    from iris_tlbx.data import IrisDataset

    return IrisDataset.load()


@pytest.fixture(scope="session")
def prepared_dataset(iris_dataset):
    """Iris dataset with z-scored measurements and species indicators appended."""
    from iris_tlbx.data import IrisCol

    return iris_dataset.with_scaled_columns().with_dummy_columns(IrisCol.SPECIES)


@pytest.fixture(scope="session")
def iris_split(prepared_dataset):
    """80/20 split with the default seed."""
    return prepared_dataset.split(seed=123, train_fraction=0.8)


@pytest.fixture(scope="session")
def setosa_model(iris_split):
    """Ridge logit of ``species_setosa`` on the scaled petal length."""
    from iris_tlbx.analysis import fit_logit

    return fit_logit(iris_split.train, ["petal_length_scaled"], "species_setosa", folds=10, random_state=123)


@pytest.fixture(scope="session")
def versicolor_virginica_df(prepared_dataset):
    """Non-separable two-class subset (versicolor vs. virginica) with an added noise column."""
    df = prepared_dataset.df
    subset = df.loc[df["species"] != "setosa"].copy()
    rng = np.random.default_rng(0)
    return subset.assign(noise=rng.normal(size=len(subset)))
