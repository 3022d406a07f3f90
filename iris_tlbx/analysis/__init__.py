"""Analysis modules: exploration, splitting, logistic modelling and evaluation."""

from .evaluation import ConfusionMatrix, confusion_matrix, evaluate
from .explorer import DatasetExplorer, ExplorationResult, HistogramData, impute_missing
from .logit_helper import (
    CrossValidationReport,
    EliminationPathResult,
    EliminationStep,
    LogitModel,
    backward_elimination,
    coefficient_shift,
    coefficients,
    drop_and_refit,
    fit_logit,
    odds_ratios,
    predict,
    predict_proba,
    significance,
)
from .model_registry import ModelEntry, ModelRegistry
from .splitter import Split, split_dataset


__all__ = [
    "ConfusionMatrix",
    "CrossValidationReport",
    "DatasetExplorer",
    "EliminationPathResult",
    "EliminationStep",
    "ExplorationResult",
    "HistogramData",
    "LogitModel",
    "ModelEntry",
    "ModelRegistry",
    "Split",
    "backward_elimination",
    "coefficient_shift",
    "coefficients",
    "confusion_matrix",
    "drop_and_refit",
    "evaluate",
    "fit_logit",
    "impute_missing",
    "odds_ratios",
    "predict",
    "predict_proba",
    "significance",
    "split_dataset",
]
