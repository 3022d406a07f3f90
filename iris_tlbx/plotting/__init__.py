"""Plotting utilities for data visualization."""

from .dataset_plots import plot_histograms, plot_standardization_comparison
from .model_plots import plot_confusion_matrix, plot_cv_scores, plot_odds_ratios


__all__ = [
    "plot_confusion_matrix",
    "plot_cv_scores",
    "plot_histograms",
    "plot_odds_ratios",
    "plot_standardization_comparison",
]
