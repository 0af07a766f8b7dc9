from __future__ import annotations

"""
Evaluation helpers: threshold metrics, probability error, ROC and coef dumps.
"""

from dataclasses import asdict, dataclass, field

import numpy as np
import pandas as pd
from sklearn import metrics

from .constants import DECISION_THRESHOLD
from .errors import DegenerateLabelError, InvalidParameterError
from .models import roc_auc


@dataclass(frozen=True)
class ClassificationMetrics:
    accuracy: float
    error_rate: float
    sensitivity: float
    specificity: float
    precision: float
    mse: float
    roc_auc: float
    threshold: float
    n: int
    confusion_matrix: np.ndarray = field(compare=False)  # [[TN, FP], [FN, TP]]

    def as_dict(self) -> dict:
        return asdict(self)


def _validate(y_true, scores) -> tuple[np.ndarray, np.ndarray]:
    y_arr = np.asarray(y_true)
    s_arr = np.asarray(scores, dtype=float)
    if y_arr.ndim != 1 or s_arr.ndim != 1:
        raise InvalidParameterError("Labels and scores must be one-dimensional")
    if len(y_arr) == 0:
        raise InvalidParameterError("Cannot evaluate an empty prediction set")
    if len(y_arr) != len(s_arr):
        raise InvalidParameterError(
            f"Got {len(y_arr)} labels but {len(s_arr)} scores"
        )
    if not np.isin(y_arr, [0, 1]).all():
        raise InvalidParameterError("Labels must be binary (0/1)")
    y_arr = y_arr.astype(int)
    if np.unique(y_arr).size < 2:
        raise DegenerateLabelError(
            f"Labels contain only class {y_arr[0]}; sensitivity/specificity are undefined"
        )
    return y_arr, s_arr


def evaluate_predictions(
    y_true: np.ndarray | pd.Series,
    scores: np.ndarray | pd.Series,
    threshold: float = DECISION_THRESHOLD,
) -> ClassificationMetrics:
    """
    Score continuous predictions against 0/1 labels.

    A row is predicted positive when its score is strictly above the
    threshold. The squared error uses the raw scores, not the classes.
    """
    y_arr, s_arr = _validate(y_true, scores)
    preds = (s_arr > threshold).astype(int)

    cm = metrics.confusion_matrix(y_arr, preds, labels=[0, 1])
    tn, fp, fn, tp = (int(v) for v in cm.ravel())
    accuracy = float(np.mean(preds == y_arr))

    return ClassificationMetrics(
        accuracy=accuracy,
        error_rate=1.0 - accuracy,
        sensitivity=tp / (tp + fn),
        specificity=tn / (tn + fp),
        precision=tp / (tp + fp) if tp + fp else float("nan"),
        mse=float(np.mean((s_arr - y_arr) ** 2)),
        roc_auc=roc_auc(y_arr, s_arr),
        threshold=threshold,
        n=len(y_arr),
        confusion_matrix=cm,
    )


def roc_curve_frame(y_true: np.ndarray | pd.Series, scores: np.ndarray | pd.Series) -> pd.DataFrame:
    """ROC points (fpr, tpr, threshold) for plotting or tabulating elsewhere."""
    y_arr, s_arr = _validate(y_true, scores)
    fpr, tpr, thresholds = metrics.roc_curve(y_arr, s_arr)
    return pd.DataFrame({"fpr": fpr, "tpr": tpr, "threshold": thresholds})


def majority_baseline(y_train: np.ndarray | pd.Series, y_test: np.ndarray | pd.Series):
    """
    Predicts the positive rate learned from the training set for every test row.
    """
    prob = float(np.mean(y_train))
    probs = np.full(len(y_test), prob, dtype=float)
    return evaluate_predictions(y_test, probs)


def summarize_coefficients(
    coef: np.ndarray | pd.Series, feature_names: list[str] | None = None, top_k: int = 8
) -> dict[str, pd.Series]:
    if isinstance(coef, pd.Series):
        coef_series = coef.drop(labels="(Intercept)", errors="ignore")
    else:
        coef_series = pd.Series(coef, index=feature_names)
    coef_sorted = coef_series.sort_values()
    return {
        "positive": coef_sorted.tail(top_k)[::-1],
        "negative": coef_sorted.head(top_k),
    }
