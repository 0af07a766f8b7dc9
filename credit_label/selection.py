from __future__ import annotations

"""
Best-subset selection over the design matrix.

Candidate subsets are ranked by residual sum of squares of a linear fit of the
label; the winner for each model size is refitted with statsmodels OLS to get
AIC, BIC and adjusted R-squared. select_features then picks one size by the
chosen criterion.
"""

from itertools import combinations

import numpy as np
import pandas as pd
import statsmodels.api as sm

from .constants import CRITERIA, SCORE_COLUMNS
from .errors import EmptyInputError, InvalidParameterError, SchemaError

SUBSET_METHODS = ("exhaustive", "forward", "backward")


def _rss(X_arr: np.ndarray, y_arr: np.ndarray, cols) -> float:
    design = np.column_stack([np.ones(len(y_arr)), X_arr[:, list(cols)]])
    coef, *_ = np.linalg.lstsq(design, y_arr, rcond=None)
    resid = y_arr - design @ coef
    return float(resid @ resid)


def _exhaustive(X_arr, y_arr, max_size):
    best = {}
    for k in range(1, max_size + 1):
        best[k] = min(
            combinations(range(X_arr.shape[1]), k),
            key=lambda cols: _rss(X_arr, y_arr, cols),
        )
    return best


def _forward(X_arr, y_arr, max_size):
    best, chosen = {}, []
    remaining = list(range(X_arr.shape[1]))
    for k in range(1, max_size + 1):
        add = min(remaining, key=lambda j: _rss(X_arr, y_arr, chosen + [j]))
        chosen.append(add)
        remaining.remove(add)
        best[k] = tuple(chosen)
    return best


def _backward(X_arr, y_arr, max_size):
    chosen = list(range(X_arr.shape[1]))
    best = {len(chosen): tuple(chosen)}
    while len(chosen) > 1:
        drop = min(
            chosen,
            key=lambda j: _rss(X_arr, y_arr, [c for c in chosen if c != j]),
        )
        chosen.remove(drop)
        best[len(chosen)] = tuple(chosen)
    return {k: cols for k, cols in best.items() if k <= max_size}


def best_subset_table(
    X: pd.DataFrame,
    y: pd.Series,
    max_size: int | None = None,
    method: str = "exhaustive",
) -> pd.DataFrame:
    """
    One row per model size with rss/aic/bic/adjr2 and a boolean inclusion
    column per predictor (regsubsets-style summary).
    """
    if method not in SUBSET_METHODS:
        raise InvalidParameterError(
            f"Unknown subset method: {method} (expected one of {SUBSET_METHODS})"
        )
    if X.shape[0] == 0 or X.shape[1] == 0:
        raise EmptyInputError("Best-subset selection needs at least one row and one predictor")
    if len(X) != len(y):
        raise InvalidParameterError(
            f"X has {len(X)} rows but y has {len(y)}"
        )
    n_features = X.shape[1]
    max_size = n_features if max_size is None else max_size
    if not 1 <= max_size <= n_features:
        raise InvalidParameterError(
            f"max_size must be between 1 and {n_features}, got {max_size}"
        )

    X_arr = X.to_numpy(dtype=float)
    y_arr = np.asarray(y, dtype=float)
    search = {"exhaustive": _exhaustive, "forward": _forward, "backward": _backward}[method]
    best = search(X_arr, y_arr, max_size)

    rows = []
    for k in sorted(best):
        names = [X.columns[j] for j in best[k]]
        fit = sm.OLS(y_arr, sm.add_constant(X[names], has_constant="add")).fit()
        row = {"rss": fit.ssr, "aic": fit.aic, "bic": fit.bic, "adjr2": fit.rsquared_adj}
        row.update({col: col in names for col in X.columns})
        rows.append(row)

    table = pd.DataFrame(rows, index=pd.Index(sorted(best), name="size"))
    return table[SCORE_COLUMNS + list(X.columns)]


def select_features(criterion_table: pd.DataFrame, criterion: str = "BIC") -> list[str]:
    """
    Feature names of the best row: lowest AIC/BIC or highest adjusted R-squared.
    Ties go to the smaller model.
    """
    key = CRITERIA.get(str(criterion).lower().replace("_", "").replace("-", ""))
    if key is None:
        raise InvalidParameterError(
            f"Unknown selection criterion: {criterion} (expected AIC, BIC or adjustedR2)"
        )
    if criterion_table.empty:
        raise EmptyInputError("Criterion table is empty")
    if key not in criterion_table.columns:
        raise SchemaError(f"Criterion table has no '{key}' column")

    scores = criterion_table[key]
    best = scores.idxmax() if key == "adjr2" else scores.idxmin()
    inclusion_cols = [c for c in criterion_table.columns if c not in SCORE_COLUMNS]
    return [c for c in inclusion_cols if bool(criterion_table.at[best, c])]
