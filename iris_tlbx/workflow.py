"""End-to-end modelling workflow: load, explore, preprocess, split, model, evaluate.

Each stage consumes the previous stage's output and produces its own artifact;
no stage mutates another stage's data. All randomness (train/test sampling and
CV fold shuffling) derives from the explicit ``WorkflowConfig.seed``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from iris_tlbx.analysis.evaluation import ConfusionMatrix, evaluate
from iris_tlbx.analysis.explorer import ExplorationResult
from iris_tlbx.analysis.logit_helper import (
    DEFAULT_C,
    EliminationPathResult,
    LogitModel,
    Penalty,
    backward_elimination,
    fit_logit,
)
from iris_tlbx.analysis.splitter import Split
from iris_tlbx.data import IrisCol, IrisDataset
from iris_tlbx.data.base_dataset import BaseDataset
from iris_tlbx.data.preprocessing import dummy_name
from iris_tlbx.errors import ConfigurationError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowConfig:
    """Parameters of a workflow run.

    Attributes:
        seed: Seed for the train/test split and the CV fold shuffling.
        train_fraction: Share of rows sampled into the training set.
        folds: Number of cross-validation folds.
        category_column: Categorical column expanded into indicator columns.
        target_level: Level of ``category_column`` modelled as the positive class.
        predictors: Predictor columns of the initial model (raw or ``*_scaled``).
        penalty: ``"l2"`` (ridge) or ``None`` (plain maximum likelihood).
        C: Inverse ridge strength.
        eliminate: Run backward elimination after the initial fit.
        alpha: Significance level for elimination candidates.
        shift_threshold: Relative coefficient drift above which a dropped predictor is retained.
        protected: Predictors never considered for elimination.
        histogram_bins: Bins per numeric histogram.
        n_jobs: Parallel workers for the CV folds.
    """

    seed: int = 123
    train_fraction: float = 0.8
    folds: int = 10
    category_column: str = IrisCol.SPECIES.value
    target_level: str = "setosa"
    predictors: tuple[str, ...] = ("petal_length_scaled",)
    penalty: Penalty = "l2"
    C: float = DEFAULT_C
    eliminate: bool = False
    alpha: float = 0.05
    shift_threshold: float = 0.10
    protected: tuple[str, ...] = ()
    histogram_bins: int = 10
    n_jobs: int | None = None

    def __post_init__(self) -> None:
        checks = [
            (0.0 < self.train_fraction < 1.0, "train_fraction", "must lie strictly between 0 and 1"),
            (self.folds >= 2, "folds", "must be at least 2"),
            (len(self.predictors) > 0, "predictors", "must name at least one column"),
            (self.penalty in ("l2", None), "penalty", "must be 'l2' or None"),
            (self.C > 0, "C", "must be positive"),
            (0.0 < self.alpha < 1.0, "alpha", "must lie strictly between 0 and 1"),
            (self.shift_threshold >= 0.0, "shift_threshold", "must be non-negative"),
            (self.histogram_bins >= 1, "histogram_bins", "must be positive"),
        ]
        for ok, name, requirement in checks:
            if not ok:
                raise ConfigurationError(f"{name}={getattr(self, name)!r} {requirement}.", stage="config", field=name)

    @property
    def target(self) -> str:
        """Indicator column modelled as the binary target."""
        return dummy_name(self.category_column, self.target_level)


@dataclass(frozen=True)
class WorkflowResult:
    """Artifacts of every workflow stage."""

    config: WorkflowConfig
    exploration: ExplorationResult
    dataset: BaseDataset
    split: Split
    model: LogitModel
    elimination: EliminationPathResult | None
    train_metrics: ConfusionMatrix
    test_metrics: ConfusionMatrix

    @property
    def final_model(self) -> LogitModel:
        """Model after elimination (the initial model when elimination is disabled)."""
        return self.elimination.final_model if self.elimination is not None else self.model

    def report(self) -> str:
        """Plain-text report of all stages."""
        final = self.final_model
        metrics = pd.DataFrame(
            {"train": self.train_metrics.metrics(), "test": self.test_metrics.metrics()},
        )
        sections = [
            ("Summary statistics", self.exploration.summary.round(3).to_string()),
            (
                "Category counts",
                "\n".join(f"{col}: {counts.to_dict()}" for col, counts in self.exploration.category_counts.items()),
            ),
            ("Missing values", self.exploration.missing.to_string()),
            ("Train/test split", self.split.summary().round(3).to_string()),
        ]
        if final.cv is not None:
            sections.append(
                (
                    f"{final.cv.n_folds}-fold cross-validation",
                    f"{final.cv.to_frame().round(4).to_string()}\n"
                    f"mean={final.cv.mean:.4f} std={final.cv.std:.4f} variance={final.cv.variance:.6f}",
                ),
            )
        fmt = "{:.4f}".format
        sections.append(
            (
                f"Coefficients: {final.target} ~ {' + '.join(final.predictors)}",
                final.coefficient_table().to_string(float_format=fmt),
            ),
        )
        if self.elimination is not None:
            sections.append(("Backward elimination", self.elimination.summary_table().to_string(float_format=fmt)))
        sections.extend(
            [
                ("Confusion matrix (test)", self.test_metrics.as_frame().to_string()),
                ("Evaluation metrics", metrics.round(4).to_string()),
            ],
        )
        return "\n\n".join(f"== {title} ==\n{body}" for title, body in sections)


def run_workflow(config: WorkflowConfig | None = None, dataset: BaseDataset | None = None) -> WorkflowResult:
    """Run the full pipeline.

    Args:
        config: Run parameters (defaults to :class:`WorkflowConfig`).
        dataset: Source dataset (defaults to the bundled Iris data).

    Returns:
        WorkflowResult with the artifacts of each stage.

    Raises:
        ConfigurationError: If missing values are present or the configuration is inconsistent with the data.
        SchemaError: If configured columns do not exist.
        DataError: If the data violates a stage contract.
    """
    config = config or WorkflowConfig()

    logger.info("[1/6] load")
    dataset = dataset if dataset is not None else IrisDataset.load()

    logger.info("[2/6] explore")
    exploration = dataset.make_explorer(bins=config.histogram_bins).fit().result()
    exploration.require_complete()

    logger.info("[3/6] preprocess")
    prepared = dataset.with_scaled_columns(list(dataset.numeric_cols)).with_dummy_columns(config.category_column)
    if config.target not in prepared.df.columns:
        raise ConfigurationError(
            f"Level '{config.target_level}' does not occur in column '{config.category_column}'.",
            stage="preprocess",
            field="target_level",
        )

    logger.info("[4/6] split")
    split = prepared.split(seed=config.seed, train_fraction=config.train_fraction)

    logger.info("[5/6] model")
    model = fit_logit(
        split.train,
        config.predictors,
        config.target,
        folds=config.folds,
        penalty=config.penalty,
        C=config.C,
        random_state=config.seed,
        n_jobs=config.n_jobs,
    )
    elimination = (
        backward_elimination(
            model,
            alpha=config.alpha,
            shift_threshold=config.shift_threshold,
            protected=config.protected,
        )
        if config.eliminate
        else None
    )
    final = elimination.final_model if elimination is not None else model

    logger.info("[6/6] evaluate")
    train_metrics = evaluate(final, split.train)
    test_metrics = evaluate(final, split.test)

    return WorkflowResult(
        config=config,
        exploration=exploration,
        dataset=prepared,
        split=split,
        model=model,
        elimination=elimination,
        train_metrics=train_metrics,
        test_metrics=test_metrics,
    )
