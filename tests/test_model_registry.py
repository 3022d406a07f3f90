"""Tests for the candidate-model registry."""

import pytest

from iris_tlbx.analysis import ModelEntry, ModelRegistry


TARGET = "species_virginica"
PREDICTORS = ["petal_width_scaled", "noise"]


@pytest.fixture
def registry(versicolor_virginica_df) -> ModelRegistry:
    reg = ModelRegistry(folds=5, random_state=0)
    reg.fit(versicolor_virginica_df, predictors=PREDICTORS, target=TARGET, name="full")
    return reg


def test_fit_caches_by_name(registry, versicolor_virginica_df) -> None:
    cached = registry.get("full").model
    again = registry.fit(versicolor_virginica_df, predictors=["petal_width_scaled"], target=TARGET, name="full")

    assert again is cached
    assert len(registry) == 1


def test_refit_replaces_entry(registry, versicolor_virginica_df) -> None:
    refit = registry.fit(
        versicolor_virginica_df,
        predictors=["petal_width_scaled"],
        target=TARGET,
        name="full",
        refit=True,
    )
    assert registry.get("full").model is refit
    assert refit.predictors == ("petal_width_scaled",)


def test_drop_registers_reduced_model(registry) -> None:
    shift = registry.drop("full", "noise")

    assert shift >= 0
    assert registry.get("full-noise").predictors == ("petal_width_scaled",)
    assert [entry.name for entry in registry] == ["full", "full-noise"]


def test_compare_includes_evaluation(registry, versicolor_virginica_df) -> None:
    registry.drop("full", "noise", name="reduced")
    cm = registry.evaluate_on("reduced", versicolor_virginica_df, label="all")
    table = registry.compare()

    assert set(table.index) == {"full", "reduced"}
    assert {"aic", "loglik", "cv_mean", "cv_std", "n_predictors"} <= set(table.columns)
    assert table.loc["reduced", "all_accuracy"] == pytest.approx(cm.accuracy)
    assert table["aic"].is_monotonic_increasing


def test_duplicate_and_unknown_names(registry) -> None:
    with pytest.raises(KeyError):
        registry.add(ModelEntry(name="full", model=registry.get("full").model))
    with pytest.raises(KeyError):
        registry.get("missing")
