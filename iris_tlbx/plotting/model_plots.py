"""Visualizations for fitted logistic models and their evaluation."""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from iris_tlbx.analysis.evaluation import ConfusionMatrix
from iris_tlbx.analysis.logit_helper import CrossValidationReport, LogitModel


def plot_cv_scores(report: CrossValidationReport, ax: Axes | None = None, **kwargs: object) -> Axes:
    """Bar chart of per-fold scores with the mean as a dashed reference line.

    Args:
        report: Cross-validation report of a fitted model
        ax: Existing axes to draw on
        **kwargs: Forwarded to :func:`seaborn.barplot`
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 4))
    frame = report.to_frame().reset_index()
    sns.barplot(data=frame, x="fold", y=report.scoring, ax=ax, color="tab:blue", **kwargs)
    ax.axhline(report.mean, color="tab:red", linestyle="--", label=f"mean = {report.mean:.3f}")
    ax.set_ylim(0, 1.05)
    ax.set_title(f"{report.n_folds}-fold CV {report.scoring}")
    ax.legend(loc="lower right")
    return ax


def plot_odds_ratios(model: LogitModel, alpha: float = 0.05, ax: Axes | None = None) -> Axes:
    """Forest plot of odds ratios with Wald confidence intervals (log scale)."""
    if ax is None:
        _, ax = plt.subplots(figsize=(7, 1 + 0.6 * len(model.predictors)))
    table = model.coefficient_table(alpha=alpha).drop(index="const")
    lower, upper = np.exp(table.iloc[:, -2]), np.exp(table.iloc[:, -1])
    positions = np.arange(len(table))

    ax.errorbar(
        table["odds_ratio"],
        positions,
        xerr=[table["odds_ratio"] - lower, upper - table["odds_ratio"]],
        fmt="o",
        capsize=4,
    )
    ax.axvline(1.0, color="grey", linestyle=":")
    ax.set_xscale("log")
    ax.set_yticks(positions, labels=table.index)
    ax.set_xlabel("Odds ratio")
    ax.set_title(f"Odds ratios for {model.target}")
    return ax


def plot_confusion_matrix(
    cm: ConfusionMatrix,
    ax: Axes | None = None,
    cmap: str = "Blues",
    title: str | None = None,
) -> Figure:
    """Annotated heatmap of the confusion matrix (rows: predicted, columns: actual)."""
    if ax is None:
        fig, ax = plt.subplots(figsize=(4.5, 4))
    else:
        fig = ax.figure
    sns.heatmap(cm.as_frame(), annot=True, fmt="d", cmap=cmap, cbar=False, ax=ax)
    ax.set_title(title or f"Accuracy {cm.accuracy:.3f}")
    fig.tight_layout()
    return fig
