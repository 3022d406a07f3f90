"""Command-line entry point running the modelling workflow and printing its report."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from iris_tlbx.data import IrisDataset
from iris_tlbx.errors import WorkflowError
from iris_tlbx.workflow import WorkflowConfig, WorkflowResult, run_workflow


logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    defaults = WorkflowConfig()
    parser = argparse.ArgumentParser(
        prog="iris-workflow",
        description="Explore, split, fit and evaluate a logistic regression on the Iris dataset.",
    )
    parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Load the dataset from a CSV file instead of the bundled copy.",
    )
    parser.add_argument("--seed", type=int, default=defaults.seed, help="Seed for the split and CV folds.")
    parser.add_argument("--train-fraction", type=float, default=defaults.train_fraction)
    parser.add_argument("--folds", type=int, default=defaults.folds)
    parser.add_argument("--category-column", default=defaults.category_column)
    parser.add_argument("--target-level", default=defaults.target_level, help="Level modelled as the positive class.")
    parser.add_argument("--predictors", nargs="+", default=list(defaults.predictors))
    parser.add_argument("--penalty", choices=["l2", "none"], default="l2")
    parser.add_argument("--C", dest="C", type=float, default=defaults.C, help="Inverse ridge strength.")
    parser.add_argument("--eliminate", action="store_true", help="Run backward elimination after the first fit.")
    parser.add_argument("--alpha", type=float, default=defaults.alpha)
    parser.add_argument("--shift-threshold", type=float, default=defaults.shift_threshold)
    parser.add_argument("--protect", nargs="*", default=[], help="Predictors never eliminated.")
    parser.add_argument("--bins", type=int, default=defaults.histogram_bins)
    parser.add_argument("--n-jobs", type=int, default=None)
    parser.add_argument("--plots-dir", type=Path, default=None, help="Write PNG figures to this directory.")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def config_from_args(args: argparse.Namespace) -> WorkflowConfig:
    return WorkflowConfig(
        seed=args.seed,
        train_fraction=args.train_fraction,
        folds=args.folds,
        category_column=args.category_column,
        target_level=args.target_level,
        predictors=tuple(args.predictors),
        penalty=None if args.penalty == "none" else "l2",
        C=args.C,
        eliminate=args.eliminate,
        alpha=args.alpha,
        shift_threshold=args.shift_threshold,
        protected=tuple(args.protect),
        histogram_bins=args.bins,
        n_jobs=args.n_jobs,
    )


def save_figures(result: WorkflowResult, out_dir: Path) -> list[Path]:
    """Render the standard figures of a run into ``out_dir``."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from iris_tlbx.plotting import plot_confusion_matrix, plot_cv_scores, plot_histograms, plot_odds_ratios

    out_dir.mkdir(parents=True, exist_ok=True)
    final = result.final_model
    figures = {
        "histograms.png": plot_histograms(result.exploration),
        "confusion_matrix_test.png": plot_confusion_matrix(result.test_metrics, title="Test set"),
        "odds_ratios.png": plot_odds_ratios(final).figure,
    }
    if final.cv is not None:
        figures["cv_scores.png"] = plot_cv_scores(final.cv).figure

    paths = []
    for name, fig in figures.items():
        path = out_dir / name
        fig.savefig(path, bbox_inches="tight")
        plt.close(fig)
        paths.append(path)
    logger.info("Wrote %d figures to %s", len(paths), out_dir)
    return paths


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = config_from_args(args)
        dataset = IrisDataset.from_csv(args.csv) if args.csv is not None else None
        result = run_workflow(config, dataset=dataset)
    except WorkflowError as exc:
        logger.error("%s", exc)
        return 2

    print(result.report())
    if args.plots_dir is not None:
        save_figures(result, args.plots_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
