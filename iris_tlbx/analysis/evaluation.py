"""Confusion-matrix evaluation of binary predictions."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.metrics import confusion_matrix as sk_confusion_matrix

from iris_tlbx.errors import DataError, SchemaError

from .logit_helper import LogitModel, predict


logger = logging.getLogger(__name__)

_STAGE = "evaluate"


def _ratio(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator`` or NaN when the denominator is zero."""
    return float(numerator) / float(denominator) if denominator else float("nan")


@dataclass(frozen=True)
class ConfusionMatrix:
    r"""2x2 tally of predicted vs. actual binary outcomes.

    All derived metrics are pure functions of the four counts and evaluate to
    NaN instead of raising when their denominator is zero:

    - accuracy :math:`= (TP + TN) / n`
    - sensitivity (recall) :math:`= TP / (TP + FN)`
    - specificity :math:`= TN / (TN + FP)`
    - precision (PPV) :math:`= TP / (TP + FP)`, NPV :math:`= TN / (TN + FN)`
    - Cohen's :math:`\kappa = (p_o - p_e) / (1 - p_e)`
    """

    tp: int
    tn: int
    fp: int
    fn: int

    @property
    def n(self) -> int:
        return self.tp + self.tn + self.fp + self.fn

    @property
    def accuracy(self) -> float:
        return _ratio(self.tp + self.tn, self.n)

    @property
    def sensitivity(self) -> float:
        return _ratio(self.tp, self.tp + self.fn)

    @property
    def specificity(self) -> float:
        return _ratio(self.tn, self.tn + self.fp)

    @property
    def precision(self) -> float:
        return _ratio(self.tp, self.tp + self.fp)

    @property
    def npv(self) -> float:
        return _ratio(self.tn, self.tn + self.fn)

    @property
    def prevalence(self) -> float:
        """Share of actual positives."""
        return _ratio(self.tp + self.fn, self.n)

    @property
    def balanced_accuracy(self) -> float:
        return (self.sensitivity + self.specificity) / 2.0

    @property
    def kappa(self) -> float:
        """Cohen's kappa: agreement beyond chance."""
        if self.n == 0:
            return float("nan")
        expected = ((self.tp + self.fp) * (self.tp + self.fn) + (self.fn + self.tn) * (self.fp + self.tn)) / self.n**2
        return _ratio(self.accuracy - expected, 1.0 - expected)

    def metrics(self) -> pd.Series:
        """All derived metrics as a Series."""
        return pd.Series(
            {
                "accuracy": self.accuracy,
                "sensitivity": self.sensitivity,
                "specificity": self.specificity,
                "precision": self.precision,
                "npv": self.npv,
                "prevalence": self.prevalence,
                "balanced_accuracy": self.balanced_accuracy,
                "kappa": self.kappa,
            },
        )

    def as_frame(self) -> pd.DataFrame:
        """Counts as a 2x2 table (rows: predicted, columns: actual)."""
        return pd.DataFrame(
            [[self.tn, self.fn], [self.fp, self.tp]],
            index=pd.Index([0, 1], name="predicted"),
            columns=pd.Index([0, 1], name="actual"),
        )

    def __repr__(self) -> str:
        return (
            f"ConfusionMatrix(tp={self.tp}, tn={self.tn}, fp={self.fp}, fn={self.fn}; "
            f"accuracy={self.accuracy:.3f}, sensitivity={self.sensitivity:.3f}, specificity={self.specificity:.3f})"
        )

    # ------------------------------------------------------------------ plotting shortcuts
    def plot(self, **kwargs: object):
        """Plot the matrix as an annotated heatmap."""
        from iris_tlbx.plotting.model_plots import plot_confusion_matrix  # noqa: PLC0415

        return plot_confusion_matrix(self, **kwargs)


def _as_binary(values: Sequence[int] | np.ndarray | pd.Series, name: str) -> np.ndarray:
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise DataError(f"'{name}' must be one-dimensional.", stage=_STAGE, field=name)
    if not np.isin(arr, [0, 1]).all():
        raise DataError(f"'{name}' must only contain 0/1 labels.", stage=_STAGE, field=name)
    return arr.astype(int)


def confusion_matrix(
    predicted: Sequence[int] | np.ndarray | pd.Series,
    actual: Sequence[int] | np.ndarray | pd.Series,
) -> ConfusionMatrix:
    """Tabulate predicted vs. actual 0/1 labels.

    Args:
        predicted: Predicted labels.
        actual: True labels, aligned by position with ``predicted``.

    Raises:
        DataError: If the sequences differ in length or contain labels other than 0/1.
    """
    pred = _as_binary(predicted, "predicted")
    true = _as_binary(actual, "actual")
    if len(pred) != len(true):
        raise DataError(
            f"predicted and actual differ in length ({len(pred)} vs {len(true)}).",
            stage=_STAGE,
        )
    if len(pred) == 0:
        return ConfusionMatrix(tp=0, tn=0, fp=0, fn=0)

    tn, fp, fn, tp = sk_confusion_matrix(true, pred, labels=[0, 1]).ravel()
    return ConfusionMatrix(tp=int(tp), tn=int(tn), fp=int(fp), fn=int(fn))


def encode_target(model: LogitModel, rows: pd.DataFrame) -> pd.Series:
    """Encode the model's target column in ``rows`` as 0/1 using the classes seen at fit time."""
    if model.target not in rows.columns:
        raise SchemaError(f"Target column '{model.target}' not found.", stage=_STAGE, field=model.target)
    values = rows[model.target]
    unknown = set(pd.unique(values)) - set(model.classes)
    if unknown:
        raise DataError(
            f"Target '{model.target}' has values {sorted(map(str, unknown))} unseen during fitting.",
            stage=_STAGE,
            field=model.target,
        )
    return (values == model.classes[1]).astype(int)


def evaluate(model: LogitModel, rows: pd.DataFrame, *, threshold: float = 0.5) -> ConfusionMatrix:
    """Predict ``rows`` with ``model`` and tabulate against their target values."""
    design = rows.loc[:, [col for col in rows.columns if col in model.predictors]]
    cm = confusion_matrix(predict(model, design, threshold=threshold), encode_target(model, rows))
    logger.info("Evaluated %d rows: %r", cm.n, cm)
    return cm
