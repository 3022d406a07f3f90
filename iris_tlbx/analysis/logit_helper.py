r"""Logistic-regression fitting, inference and backward-elimination helpers.

Two estimators are supported:

- ``penalty="l2"`` (default): ridge-penalized logistic regression via
  scikit-learn's :class:`~sklearn.linear_model.LogisticRegression` with an
  unpenalized intercept. The penalty keeps coefficients finite on (quasi-)
  separable data. Standard errors come from the inverse of the penalized Fisher
  information :math:`(X^\top W X + P/C)^{-1}` and p-values from Wald z-tests.
- ``penalty=None``: classical maximum-likelihood fit (binomial GLM with logit
  link) via :class:`statsmodels.discrete.discrete_model.Logit`. Diverges on
  perfectly separable data.

In both cases k-fold cross-validation is a *reporting* signal only: the final
coefficients are refit on the full training frame, never averaged over folds.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Literal

import numpy as np
import pandas as pd
import statsmodels.api as sm
from scipy import stats
from scipy.special import expit
from sklearn.linear_model import LogisticRegression
from sklearn.metrics import log_loss
from sklearn.model_selection import StratifiedKFold, cross_val_score

from iris_tlbx.errors import ConfigurationError, DataError, SchemaError


logger = logging.getLogger(__name__)

_STAGE = "model"
INTERCEPT = "const"
DEFAULT_C = 100.0

Penalty = Literal["l2"] | None


@dataclass(frozen=True)
class CrossValidationReport:
    """Per-fold validation accuracy of a k-fold cross-validation run.

    Fold assignment is fixed (stratified, seeded) before any fitting, so the
    scores do not depend on execution order or ``n_jobs``.
    """

    fold_scores: tuple[float, ...]
    scoring: str = "accuracy"

    @property
    def n_folds(self) -> int:
        return len(self.fold_scores)

    @property
    def mean(self) -> float:
        """Mean fold score."""
        return float(np.mean(self.fold_scores))

    @property
    def std(self) -> float:
        """Sample standard deviation (``ddof=1``) of the fold scores."""
        return float(np.std(self.fold_scores, ddof=1)) if self.n_folds > 1 else float("nan")

    @property
    def variance(self) -> float:
        """Sample variance (``ddof=1``) of the fold scores."""
        return float(np.var(self.fold_scores, ddof=1)) if self.n_folds > 1 else float("nan")

    def to_frame(self) -> pd.DataFrame:
        """One row per fold."""
        return pd.DataFrame(
            {self.scoring: list(self.fold_scores)},
            index=pd.RangeIndex(1, self.n_folds + 1, name="fold"),
        )

    def __repr__(self) -> str:
        return f"CrossValidationReport({self.scoring}: mean={self.mean:.3f}, std={self.std:.3f}, folds={self.n_folds})"


@dataclass(frozen=True)
class LogitModel:
    """Fitted binary logistic-regression model.

    Immutable once fit. ``params``, ``std_errors`` and ``pvalues`` are indexed by
    ``"const"`` followed by the predictors in order. The training design is kept
    so that :func:`drop_and_refit` can refit reduced models on identical data.
    """

    predictors: tuple[str, ...]
    target: str
    classes: tuple[object, object]
    """(negative, positive) target values; the positive class is encoded as 1."""
    params: pd.Series
    std_errors: pd.Series
    pvalues: pd.Series
    llf: float
    n_obs: int
    penalty: str | None
    C: float
    folds: int | None
    random_state: int | None
    cv: CrossValidationReport | None
    X: pd.DataFrame = field(repr=False)
    y: pd.Series = field(repr=False)
    n_jobs: int | None = field(default=None, repr=False)
    sm_result: object | None = field(default=None, repr=False)
    """Underlying statsmodels results for ``penalty=None`` fits."""

    @property
    def intercept(self) -> float:
        return float(self.params[INTERCEPT])

    @property
    def coefficients(self) -> pd.Series:
        """Predictor coefficients (intercept excluded), in predictor order."""
        return self.params.drop(INTERCEPT)

    @property
    def n_params(self) -> int:
        return len(self.params)

    @property
    def aic(self) -> float:
        r""":math:`\text{AIC} = 2k - 2\log L` with :math:`k` = predictors + intercept."""
        return 2.0 * self.n_params - 2.0 * self.llf

    def coefficient_table(self, alpha: float = 0.05) -> pd.DataFrame:
        """Coefficient, standard error, Wald z, p-value, odds ratio and confidence interval per term."""
        z_crit = stats.norm.ppf(1.0 - alpha / 2.0)
        lower = self.params - z_crit * self.std_errors
        upper = self.params + z_crit * self.std_errors
        return pd.DataFrame(
            {
                "coef": self.params,
                "std_err": self.std_errors,
                "z": self.params / self.std_errors,
                "p_value": self.pvalues,
                "odds_ratio": np.exp(self.params),
                f"ci_{alpha / 2:.3f}": lower,
                f"ci_{1 - alpha / 2:.3f}": upper,
            },
        )

    def print_summary(self) -> None:
        """Print the statsmodels summary (unpenalized fits) or the coefficient table."""
        if self.sm_result is not None:
            print(self.sm_result.summary())
        else:
            print(self.coefficient_table().to_string(float_format="{:.4f}".format))


def _prepare_xy(
    df: pd.DataFrame,
    predictors: Sequence[str],
    target: str,
) -> tuple[pd.DataFrame, pd.Series, tuple[object, object]]:
    """Validate inputs and return (float design, 0/1 target, classes)."""
    predictors = list(predictors)
    if not predictors:
        raise ConfigurationError("At least one predictor is required.", stage=_STAGE, field="predictors")
    if len(set(predictors)) != len(predictors):
        raise ConfigurationError(f"Duplicate predictors in {predictors}.", stage=_STAGE, field="predictors")
    if target in predictors:
        raise ConfigurationError(f"Target '{target}' is also listed as a predictor.", stage=_STAGE, field=target)

    for col in [*predictors, target]:
        if col not in df.columns:
            raise SchemaError(f"Column '{col}' not found in dataset.", stage=_STAGE, field=col)
    for col in predictors:
        if not pd.api.types.is_numeric_dtype(df[col]):
            raise SchemaError(f"Predictor '{col}' is not numeric (dtype {df[col].dtype}).", stage=_STAGE, field=col)

    if df.empty:
        raise DataError("Cannot fit a model on an empty dataset.", stage=_STAGE)
    subset = df.loc[:, [*predictors, target]]
    if subset.isna().any().any():
        raise DataError("Predictors or target contain missing values.", stage=_STAGE)

    classes = sorted(pd.unique(df[target]).tolist())
    if len(classes) != 2:
        raise DataError(
            f"Target '{target}' must be binary, found {len(classes)} distinct values: {classes[:10]}",
            stage=_STAGE,
            field=target,
        )

    y = (df[target] == classes[1]).astype(int).rename(target)
    return df.loc[:, predictors].astype(float), y, (classes[0], classes[1])


def _check_folds(folds: int | None, y: pd.Series) -> None:
    if folds is None:
        return
    if folds < 2:
        raise ConfigurationError(f"folds must be >= 2, got {folds}.", stage=_STAGE, field="folds")
    smallest_class = int(y.value_counts().min())
    if folds > smallest_class:
        raise ConfigurationError(
            f"folds={folds} exceeds the size of the smaller class ({smallest_class}).",
            stage=_STAGE,
            field="folds",
        )


def compute_cv_scores(
    X: pd.DataFrame,
    y: pd.Series,
    *,
    folds: int,
    penalty: Penalty = "l2",
    C: float = DEFAULT_C,
    random_state: int | None = None,
    n_jobs: int | None = None,
) -> CrossValidationReport:
    """Stratified k-fold cross-validated accuracy of a logistic-regression baseline.

    Folds are shuffled only when ``random_state`` is given, so the assignment is
    always reproducible.
    """
    estimator = (
        LogisticRegression(C=C, max_iter=5000) if penalty == "l2" else LogisticRegression(penalty=None, max_iter=5000)
    )
    splitter = StratifiedKFold(
        n_splits=folds,
        shuffle=random_state is not None,
        random_state=random_state,
    )
    scores = cross_val_score(
        estimator,
        X,
        y,
        cv=splitter,
        scoring="accuracy",
        n_jobs=n_jobs,
        error_score="raise",
    )
    report = CrossValidationReport(fold_scores=tuple(float(s) for s in scores))
    logger.debug("CV fold scores: %s", report.fold_scores)
    return report


def _fit_l2(X: pd.DataFrame, y: pd.Series, C: float) -> tuple[pd.Series, pd.Series, float]:
    estimator = LogisticRegression(C=C, max_iter=5000).fit(X, y)
    names = [INTERCEPT, *X.columns]
    params = pd.Series(np.r_[estimator.intercept_, estimator.coef_.ravel()], index=names)

    design = sm.add_constant(X, has_constant="add").to_numpy()
    prob = expit(design @ params.to_numpy())
    weights = prob * (1.0 - prob)
    penalty = np.eye(design.shape[1]) / C
    penalty[0, 0] = 0.0  # intercept is not penalized
    information = design.T @ (design * weights[:, None]) + penalty
    cov = np.linalg.pinv(information)
    std_errors = pd.Series(np.sqrt(np.clip(np.diag(cov), 0.0, None)), index=names)

    llf = -float(log_loss(y, prob, normalize=False, labels=[0, 1]))
    return params, std_errors, llf


def _fit_mle(X: pd.DataFrame, y: pd.Series) -> tuple[pd.Series, pd.Series, float, object]:
    design = sm.add_constant(X, has_constant="add")
    result = sm.Logit(y.astype(float), design).fit(disp=0, maxiter=200)
    return result.params.copy(), result.bse.copy(), float(result.llf), result


def _fit_prepared(
    X: pd.DataFrame,
    y: pd.Series,
    *,
    target: str,
    classes: tuple[object, object],
    folds: int | None,
    penalty: Penalty,
    C: float,
    random_state: int | None,
    n_jobs: int | None,
) -> LogitModel:
    if penalty not in ("l2", None):
        raise ConfigurationError(f"penalty must be 'l2' or None, got {penalty!r}.", stage=_STAGE, field="penalty")
    if C <= 0:
        raise ConfigurationError(f"C must be positive, got {C}.", stage=_STAGE, field="C")
    _check_folds(folds, y)

    cv = (
        compute_cv_scores(X, y, folds=folds, penalty=penalty, C=C, random_state=random_state, n_jobs=n_jobs)
        if folds is not None
        else None
    )

    sm_result = None
    if penalty == "l2":
        params, std_errors, llf = _fit_l2(X, y, C)
    else:
        params, std_errors, llf, sm_result = _fit_mle(X, y)
    params.index = [INTERCEPT, *X.columns]
    std_errors.index = params.index
    pvalues = pd.Series(2.0 * stats.norm.sf(np.abs(params / std_errors)), index=params.index)

    model = LogitModel(
        predictors=tuple(X.columns),
        target=target,
        classes=classes,
        params=params,
        std_errors=std_errors,
        pvalues=pvalues,
        llf=llf,
        n_obs=len(y),
        penalty=penalty,
        C=C,
        folds=folds,
        random_state=random_state,
        cv=cv,
        X=X,
        y=y,
        n_jobs=n_jobs,
        sm_result=sm_result,
    )
    logger.info(
        "Fitted logit(%s ~ %s) on %d rows%s",
        target,
        " + ".join(model.predictors),
        model.n_obs,
        f", CV accuracy {cv.mean:.3f} ± {cv.std:.3f}" if cv is not None else "",
    )
    return model


def fit_logit(
    df: pd.DataFrame,
    predictors: Sequence[str],
    target: str,
    *,
    folds: int | None = 10,
    penalty: Penalty = "l2",
    C: float = DEFAULT_C,
    random_state: int | None = None,
    n_jobs: int | None = None,
) -> LogitModel:
    """Fit a binary logistic regression with k-fold cross-validation.

    Args:
        df: Training frame containing predictors and target.
        predictors: Ordered numeric predictor columns.
        target: Binary target column (exactly two distinct values; the larger one is the positive class).
        folds: Number of CV folds (``None`` skips cross-validation).
        penalty: ``"l2"`` for ridge-penalized fitting, ``None`` for plain maximum likelihood.
        C: Inverse ridge strength (``penalty="l2"`` only). The default is a weak penalty.
        random_state: Seed for shuffling the CV folds.
        n_jobs: Parallel workers for the CV folds.

    Returns:
        The fitted :class:`LogitModel` (coefficients from the full ``df``) with its CV report.

    Raises:
        SchemaError: If a column is missing or a predictor is not numeric.
        DataError: If ``df`` is empty, has missing values, or the target is not binary.
        ConfigurationError: For invalid ``folds``, ``penalty``, ``C`` or predictor lists.
    """
    X, y, classes = _prepare_xy(df, predictors, target)
    return _fit_prepared(
        X,
        y,
        target=target,
        classes=classes,
        folds=folds,
        penalty=penalty,
        C=C,
        random_state=random_state,
        n_jobs=n_jobs,
    )


def coefficients(model: LogitModel) -> pd.Series:
    """Mapping predictor -> coefficient."""
    return model.coefficients


def odds_ratios(model: LogitModel) -> pd.Series:
    """Mapping predictor -> ``exp(coefficient)``: multiplicative change in odds per unit increase."""
    return np.exp(model.coefficients)


def significance(model: LogitModel) -> pd.Series:
    """Mapping predictor -> two-sided Wald p-value."""
    return model.pvalues.drop(INTERCEPT)


def _design_for(model: LogitModel, rows: pd.DataFrame, *, strict: bool) -> pd.DataFrame:
    """Select the predictor columns of ``rows`` in model order.

    With ``strict`` the column set of ``rows`` must equal the model's predictor set.
    """
    missing = [col for col in model.predictors if col not in rows.columns]
    if missing:
        raise SchemaError(
            f"Rows are missing predictor columns {missing} required by the model.",
            stage="predict",
            field=missing[0],
        )
    if strict:
        extra = [col for col in rows.columns if col not in model.predictors]
        if extra:
            raise SchemaError(f"Rows contain columns {extra} the model does not use.", stage="predict", field=extra[0])
    design = rows.loc[:, list(model.predictors)]
    for col in design.columns:
        if not pd.api.types.is_numeric_dtype(design[col]):
            raise SchemaError(f"Predictor '{col}' is not numeric.", stage="predict", field=col)
    if design.isna().any().any():
        raise DataError("Rows contain missing predictor values.", stage="predict")
    return design.astype(float)


def predict_proba(model: LogitModel, rows: pd.DataFrame, *, strict: bool = True) -> pd.Series:
    """Probability of the positive class for each row."""
    design = _design_for(model, rows, strict=strict)
    eta = model.intercept + design.to_numpy() @ model.coefficients.to_numpy()
    return pd.Series(expit(eta), index=rows.index, name=f"p_{model.target}")


def predict(model: LogitModel, rows: pd.DataFrame, *, threshold: float = 0.5, strict: bool = True) -> pd.Series:
    """0/1 class predictions (1 when the positive-class probability is at least ``threshold``).

    Raises:
        SchemaError: If the columns of ``rows`` differ from the model's predictors. Pass
            ``strict=False`` to select the predictors from a wider frame.
    """
    return (predict_proba(model, rows, strict=strict) >= threshold).astype(int).rename(model.target)


def coefficient_shift(before: LogitModel, after: LogitModel) -> float:
    r"""Largest relative change of a shared coefficient between two models.

    :math:`\max_j |\beta_j^{after} - \beta_j^{before}| / |\beta_j^{before}|` over
    predictors present in both models. A prior coefficient of exactly zero counts
    as an infinite shift unless it stays zero.
    """
    shared = [p for p in after.predictors if p in before.predictors]
    shifts = []
    for pred in shared:
        old, new = float(before.params[pred]), float(after.params[pred])
        if old == 0.0:
            shifts.append(0.0 if new == 0.0 else float("inf"))
        else:
            shifts.append(abs(new - old) / abs(old))
    return max(shifts, default=0.0)


def drop_and_refit(model: LogitModel, predictors_to_drop: str | Iterable[str]) -> tuple[LogitModel, float]:
    """Refit ``model`` without some predictors and report the coefficient drift.

    The reduced model uses the same training rows and fitting configuration.

    Args:
        model: Fitted model.
        predictors_to_drop: One predictor name or several.

    Returns:
        ``(reduced_model, max_coefficient_shift)`` where the shift is computed by
        :func:`coefficient_shift` over the remaining predictors.

    Raises:
        SchemaError: If a predictor to drop is not part of the model.
        ConfigurationError: If no predictors would remain.
    """
    drop = [predictors_to_drop] if isinstance(predictors_to_drop, str) else list(predictors_to_drop)
    unknown = [p for p in drop if p not in model.predictors]
    if unknown:
        raise SchemaError(f"Predictors {unknown} are not part of the model.", stage=_STAGE, field=unknown[0])
    remaining = [p for p in model.predictors if p not in drop]
    if not remaining:
        raise ConfigurationError("Cannot drop every predictor from the model.", stage=_STAGE, field="predictors")

    reduced = _fit_prepared(
        model.X.loc[:, remaining],
        model.y,
        target=model.target,
        classes=model.classes,
        folds=model.folds,
        penalty=model.penalty,
        C=model.C,
        random_state=model.random_state,
        n_jobs=model.n_jobs,
    )
    shift = coefficient_shift(model, reduced)
    logger.debug("Dropped %s: max coefficient shift %.3f", drop, shift)
    return reduced, shift


@dataclass(frozen=True)
class EliminationStep:
    """Single decision in a backward-elimination path.

    ``action`` is ``"start"`` for the initial model, ``"dropped"`` when the
    reduced model was accepted and ``"retained"`` when the coefficient drift
    exceeded the threshold and the predictor was kept as a confounder.
    ``model`` is the current model *after* the decision.
    """

    step: int
    action: Literal["start", "dropped", "retained"]
    predictor: str | None
    p_value: float | None
    max_shift: float | None
    model: LogitModel


@dataclass(frozen=True)
class EliminationPathResult:
    """Results from p-value guided backward elimination with a drift retention rule."""

    steps: list[EliminationStep]
    alpha: float
    shift_threshold: float

    @property
    def final_model(self) -> LogitModel:
        return self.steps[-1].model

    @property
    def dropped(self) -> list[str]:
        return [s.predictor for s in self.steps if s.action == "dropped"]

    @property
    def retained(self) -> list[str]:
        return [s.predictor for s in self.steps if s.action == "retained"]

    def summary_table(self) -> pd.DataFrame:
        """Return a tidy summary table for reporting."""
        rows = [
            {
                "step": s.step,
                "action": s.action,
                "predictor": s.predictor,
                "p_value": s.p_value,
                "max_shift": s.max_shift,
                "n_predictors": len(s.model.predictors),
                "aic": s.model.aic,
                "cv_mean": s.model.cv.mean if s.model.cv is not None else None,
            }
            for s in self.steps
        ]
        return pd.DataFrame(rows).set_index("step")


def backward_elimination(
    model: LogitModel,
    *,
    alpha: float = 0.05,
    shift_threshold: float = 0.10,
    protected: Iterable[str] = (),
) -> EliminationPathResult:
    """Iteratively drop the least significant predictor unless removing it shifts other coefficients.

    At each step the non-protected predictor with the largest p-value above
    ``alpha`` is dropped via :func:`drop_and_refit`. If any remaining
    coefficient moves by more than ``shift_threshold`` (relative), the reduced
    model is discarded and the predictor is retained; it is not considered
    again. Stops when no candidate is left or one predictor remains.

    Notes:
        This automates the manual procedure; each decision is recorded so it can
        be reviewed and overridden by calling :func:`drop_and_refit` directly.
    """
    if not 0.0 < alpha < 1.0:
        raise ConfigurationError(f"alpha must lie in (0, 1), got {alpha}.", stage=_STAGE, field="alpha")
    if shift_threshold < 0.0:
        raise ConfigurationError("shift_threshold must be non-negative.", stage=_STAGE, field="shift_threshold")

    keep = set(protected)
    current = model
    steps = [EliminationStep(step=0, action="start", predictor=None, p_value=None, max_shift=None, model=model)]

    while len(current.predictors) > 1:
        pvals = significance(current)
        candidates = pvals[(pvals > alpha) & ~pvals.index.isin(list(keep))]
        if candidates.empty:
            break
        worst = str(candidates.idxmax())
        reduced, shift = drop_and_refit(current, [worst])
        if shift > shift_threshold:
            logger.warning(
                "Keeping '%s' (p=%.3f): dropping it shifts a coefficient by %.1f%%",
                worst,
                candidates[worst],
                100 * shift,
            )
            keep.add(worst)
            steps.append(EliminationStep(len(steps), "retained", worst, float(candidates[worst]), shift, current))
        else:
            logger.info("Dropped '%s' (p=%.3f, max shift %.1f%%)", worst, candidates[worst], 100 * shift)
            current = reduced
            steps.append(EliminationStep(len(steps), "dropped", worst, float(candidates[worst]), shift, current))

    return EliminationPathResult(steps=steps, alpha=alpha, shift_threshold=shift_threshold)
