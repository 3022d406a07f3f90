"""Dataset visualization functions."""

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from matplotlib.figure import Figure

from iris_tlbx.analysis.explorer import ExplorationResult
from iris_tlbx.data.base_dataset import BaseDataset
from iris_tlbx.utils.plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


def plot_histograms(
    result: ExplorationResult,
    columns: list[str] | None = None,
    max_cols: int = 2,
    figsize: tuple[int, int] | None = None,
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Plot the precomputed histogram of each numeric column.

    Args:
        result: Exploration results from DatasetExplorer.fit().result()
        columns: Subset of numeric columns to plot (defaults to all)
        max_cols: Number of subplot columns
        figsize: Figure size (width, height); derived from the grid when omitted
        cfg: Plot styling

    Returns:
        matplotlib Figure object
    """
    columns = columns or list(result.histograms)
    n_cols = max(1, min(max_cols, len(columns)))
    n_rows = int(np.ceil(len(columns) / n_cols))
    figsize = figsize or (5 * n_cols, 3.5 * n_rows)

    with cfg.apply():
        fig, axes = plt.subplots(n_rows, n_cols, figsize=figsize, squeeze=False)
        axes_list = axes.ravel()
        for ax, col in zip(axes_list, columns, strict=False):
            hist = result.histograms[col]
            ax.stairs(hist.counts, hist.bin_edges, fill=True, alpha=0.8)
            ax.set_title(result.pretty_by_col.get(col, col))
            ax.set_ylabel("Count")
        for ax in axes_list[len(columns) :]:
            ax.set_visible(False)
        fig.tight_layout()

    return fig


def plot_standardization_comparison(
    dataset: BaseDataset,
    columns: list[str] | None = None,
    figsize: tuple[int, int] = (12, 8),
) -> Figure:
    """Plot boxplots comparing raw vs standardized numeric columns.

    Args:
        dataset: Dataset instance with data to visualize
        columns: Numeric columns to compare (defaults to the source numeric columns)
        figsize: Figure size (width, height)

    Returns:
        matplotlib Figure object
    """
    columns = columns or dataset.Col.numeric_columns()

    fig, axs = plt.subplots(2, 1, figsize=figsize)

    sns.boxplot(data=dataset.df[columns], ax=axs[0])
    axs[0].set_title("Non-Standardized")

    sns.boxplot(data=dataset.standardize(dataset.df[columns]), ax=axs[1])
    axs[1].set_title("Standardized")

    plt.tight_layout()

    return fig
