from collections.abc import Sequence
from dataclasses import dataclass, field

import pandas as pd

from .evaluation import ConfusionMatrix, evaluate
from .logit_helper import DEFAULT_C, LogitModel, Penalty, drop_and_refit, fit_logit


@dataclass
class ModelEntry:
    """Typed model registry entry for reporting workflows."""

    name: str
    model: LogitModel
    eval_metrics: ConfusionMatrix | None = None
    eval_label: str | None = None

    @property
    def predictors(self) -> tuple[str, ...]:
        return self.model.predictors


@dataclass
class ModelRegistry:
    """Registry to cache fitted candidate models and compare their diagnostics.

    Replaces hand-written sequences of "full model, minus X, minus X and Y, ..."
    with named entries that can be compared side by side.
    """

    folds: int | None = 10
    penalty: Penalty = "l2"
    C: float = DEFAULT_C
    random_state: int | None = None
    models: dict[str, ModelEntry] = field(default_factory=dict)

    def add(self, entry: ModelEntry, *, overwrite: bool = False) -> None:
        """Add an entry to the registry (optionally overwriting by name)."""
        name = entry.name
        if name in self.models and not overwrite:
            raise KeyError(f"Model '{name}' already exists in registry.")
        self.models[name] = entry

    def get(self, name: str) -> ModelEntry:
        """Retrieve a model entry by name."""
        if name not in self.models:
            raise KeyError(f"Unknown model '{name}'.")
        return self.models[name]

    def fit(
        self,
        df: pd.DataFrame,
        *,
        predictors: Sequence[str],
        target: str,
        name: str | None = None,
        refit: bool = False,
    ) -> LogitModel:
        """Fit a logistic regression with the registry's settings and cache it by name.

        Args:
            df: DataFrame with training data including all predictors and target.
            predictors: Ordered predictor columns.
            target: Binary target column.
            name: Unique name for the model in the registry.
            refit: If True, refit even if a model with ``name`` exists.
        """
        name = name or f"model_{len(self.models) + 1}"
        if name in self.models and not refit:
            return self.models[name].model

        model = fit_logit(
            df,
            predictors,
            target,
            folds=self.folds,
            penalty=self.penalty,
            C=self.C,
            random_state=self.random_state,
        )
        self.add(ModelEntry(name=name, model=model), overwrite=True)
        return model

    def drop(self, base: str, predictors_to_drop: str | Sequence[str], *, name: str | None = None) -> float:
        """Register ``base`` refit without some predictors; returns the max coefficient shift."""
        reduced, shift = drop_and_refit(self.get(base).model, predictors_to_drop)
        dropped = [predictors_to_drop] if isinstance(predictors_to_drop, str) else list(predictors_to_drop)
        name = name or f"{base}-{'-'.join(dropped)}"
        self.add(ModelEntry(name=name, model=reduced), overwrite=True)
        return shift

    def evaluate_on(self, name: str, df: pd.DataFrame, *, label: str = "test") -> ConfusionMatrix:
        """Evaluate a registered model on new data and cache the confusion matrix."""
        entry = self.get(name)
        entry.eval_metrics = evaluate(entry.model, df)
        entry.eval_label = label
        return entry.eval_metrics

    def compare(self, *, sort_by: str = "aic") -> pd.DataFrame:
        """Return a comparison table for all cached models."""
        rows = []
        for entry in self.models.values():
            model = entry.model
            row = {
                "model": entry.name,
                "predictors": " + ".join(model.predictors),
                "n_predictors": len(model.predictors),
                "aic": model.aic,
                "loglik": model.llf,
                "cv_mean": model.cv.mean if model.cv is not None else None,
                "cv_std": model.cv.std if model.cv is not None else None,
            }
            if entry.eval_metrics is not None:
                prefix = entry.eval_label or "eval"
                row.update(
                    {
                        f"{prefix}_accuracy": entry.eval_metrics.accuracy,
                        f"{prefix}_sensitivity": entry.eval_metrics.sensitivity,
                        f"{prefix}_specificity": entry.eval_metrics.specificity,
                    },
                )
            rows.append(row)
        df = pd.DataFrame(rows).set_index("model")
        if sort_by in df.columns:
            return df.sort_values(sort_by)
        return df

    def __iter__(self):
        return iter(self.models.values())

    def __len__(self) -> int:
        return len(self.models)
