from __future__ import annotations

"""
Thin wrappers around scikit-learn for the two model branches of the report:
an unpenalized logistic regression on the selected subset and a ridge
logistic regression with the penalty picked by cross-validation.
"""

from typing import Protocol, Sequence

import numpy as np
import pandas as pd
from sklearn import metrics
from sklearn.linear_model import LogisticRegression, LogisticRegressionCV
from sklearn.model_selection import StratifiedKFold, cross_val_score
from sklearn.pipeline import Pipeline, make_pipeline
from sklearn.preprocessing import StandardScaler

from .constants import CV_FOLDS, DEFAULT_LAMBDA_GRID, RANDOM_STATE
from .errors import InvalidParameterError, SchemaError


def fold_score_matrix(scores, n_cs: int) -> np.ndarray:
    """
    CV scores of a fitted LogisticRegressionCV as a (folds, Cs) array.

    Older scikit-learn keys ``scores_`` by class label with one (folds, Cs)
    array per class; newer releases store a plain (folds, l1_ratios, Cs) array.
    """
    if isinstance(scores, dict):
        scores = next(iter(scores.values()))
    arr = np.asarray(scores, dtype=float)
    return arr.reshape(arr.shape[0], n_cs)


class StatModel(Protocol):
    def fit(self, X: pd.DataFrame, y: pd.Series) -> "StatModel": ...

    def predict_proba(self, X: pd.DataFrame) -> np.ndarray: ...


def unscale_coefficients(pipeline: Pipeline) -> tuple[float, np.ndarray]:
    """
    Convert coefficients from standardized space back to original units.
    """
    scaler: StandardScaler = pipeline.named_steps["standardscaler"]
    estimator = pipeline.steps[-1][1]

    scaled_coef = estimator.coef_[0]
    raw_coef = scaled_coef / scaler.scale_
    intercept = estimator.intercept_[0] - np.sum((scaler.mean_ / scaler.scale_) * scaled_coef)
    return float(intercept), raw_coef


class SubsetLogisticModel:
    """
    Plain logistic regression restricted to a fixed list of columns.
    Features are standardized inside the pipeline; C=inf turns the penalty off.
    """

    def __init__(self, features: Sequence[str], max_iter: int = 5000):
        if not features:
            raise InvalidParameterError("SubsetLogisticModel needs at least one feature")
        self.features = list(features)
        self.max_iter = max_iter
        self.pipeline_: Pipeline | None = None

    def _project(self, X: pd.DataFrame) -> pd.DataFrame:
        missing = [f for f in self.features if f not in X.columns]
        if missing:
            raise SchemaError(f"Design matrix lacks selected features: {missing}")
        return X[self.features]

    def make_estimator(self) -> Pipeline:
        """Unfitted scikit-learn pipeline, usable with cross_validated_accuracy."""
        return make_pipeline(
            StandardScaler(), LogisticRegression(C=np.inf, max_iter=self.max_iter)
        )

    def fit(self, X: pd.DataFrame, y: pd.Series):
        self.pipeline_ = self.make_estimator()
        self.pipeline_.fit(self._project(X), y)
        return self

    def predict_proba(self, X: pd.DataFrame) -> np.ndarray:
        """Return P(y=1) for each row in X."""
        if self.pipeline_ is None:
            raise RuntimeError("Model is not fitted.")
        return self.pipeline_.predict_proba(self._project(X))[:, 1]

    def coefficients(self) -> pd.Series:
        """Intercept and coefficients in raw feature units."""
        if self.pipeline_ is None:
            raise RuntimeError("Model is not fitted.")
        intercept, coef = unscale_coefficients(self.pipeline_)
        return pd.Series([intercept, *coef], index=["(Intercept)", *self.features])


class RidgeLogisticCV:
    """
    L2-penalized logistic regression over every column of the design matrix.

    ``lambdas`` is a grid of penalty strengths; scikit-learn is driven with
    C = 1 / lambda and the winner is chosen by stratified k-fold log-loss.
    """

    def __init__(
        self,
        lambdas: Sequence[float] = DEFAULT_LAMBDA_GRID,
        cv: int = CV_FOLDS,
        max_iter: int = 5000,
        random_state: int = RANDOM_STATE,
    ):
        lambdas = np.asarray(lambdas, dtype=float)
        if lambdas.size == 0 or np.any(lambdas <= 0):
            raise InvalidParameterError("lambdas must be a non-empty grid of positive values")
        if cv < 2:
            raise InvalidParameterError(f"cv must be at least 2, got {cv}")
        self.lambdas = lambdas
        self.cv = cv
        self.max_iter = max_iter
        self.random_state = random_state
        self.pipeline_: Pipeline | None = None
        self.feature_names_: list[str] = []
        self.best_lambda_: float | None = None
        self.cv_results_: pd.DataFrame | None = None

    def fit(self, X: pd.DataFrame, y: pd.Series):
        folds = StratifiedKFold(n_splits=self.cv, shuffle=True, random_state=self.random_state)
        estimator = LogisticRegressionCV(
            Cs=1.0 / self.lambdas,
            cv=folds,
            scoring="neg_log_loss",
            max_iter=self.max_iter,
        )
        self.pipeline_ = make_pipeline(StandardScaler(), estimator)
        self.pipeline_.fit(X, y)
        self.feature_names_ = list(X.columns)

        lambdas = 1.0 / np.ravel(estimator.Cs_)
        fold_scores = fold_score_matrix(estimator.scores_, len(lambdas))
        self.cv_results_ = pd.DataFrame(
            {
                "lambda": lambdas,
                "mean_log_loss": -fold_scores.mean(axis=0),
                "std_log_loss": fold_scores.std(axis=0),
            }
        )
        self.best_lambda_ = float(1.0 / np.ravel(estimator.C_)[0])
        return self

    def predict_proba(self, X: pd.DataFrame) -> np.ndarray:
        """Return P(y=1) for each row in X."""
        if self.pipeline_ is None:
            raise RuntimeError("Model is not fitted.")
        return self.pipeline_.predict_proba(X[self.feature_names_])[:, 1]

    def coefficients(self) -> pd.Series:
        if self.pipeline_ is None:
            raise RuntimeError("Model is not fitted.")
        intercept, coef = unscale_coefficients(self.pipeline_)
        return pd.Series([intercept, *coef], index=["(Intercept)", *self.feature_names_])


def roc_auc(labels, scores) -> float:
    return float(metrics.roc_auc_score(labels, scores))


def cross_validated_accuracy(
    model,
    X: pd.DataFrame,
    y: pd.Series,
    cv: int = CV_FOLDS,
    random_state: int = RANDOM_STATE,
) -> np.ndarray:
    """Per-fold accuracy of an unfitted scikit-learn estimator."""
    folds = StratifiedKFold(n_splits=cv, shuffle=True, random_state=random_state)
    return cross_val_score(model, X, y, cv=folds, scoring="accuracy")
