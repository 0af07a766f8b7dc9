from __future__ import annotations

"""
End-to-end run of the report: label, split, cap, select, fit both branches and
evaluate them on the untouched test split.
"""

from typing import Sequence

import pandas as pd

from .constants import (
    CV_FOLDS,
    DECISION_THRESHOLD,
    DEFAULT_LAMBDA_GRID,
    IQR_FACTOR,
    LABEL_COLUMN,
    RANDOM_STATE,
    THRESHOLD_COLUMNS,
    TRAIN_FRACTION,
)
from .data_prep import (
    build_design_matrix,
    cap_features,
    compute_label_thresholds,
    describe_dataset,
    make_train_test_split,
    synthesize_label,
)
from .metrics import evaluate_predictions, majority_baseline
from .models import (
    RidgeLogisticCV,
    StatModel,
    SubsetLogisticModel,
    cross_validated_accuracy,
)
from .selection import best_subset_table, select_features


def run_report(
    df: pd.DataFrame,
    train_fraction: float = TRAIN_FRACTION,
    random_state: int = RANDOM_STATE,
    criterion: str = "BIC",
    subset_method: str = "exhaustive",
    max_subset_size: int | None = None,
    cv_folds: int = CV_FOLDS,
    lambdas: Sequence[float] = DEFAULT_LAMBDA_GRID,
    threshold: float = DECISION_THRESHOLD,
    iqr_factor: float = IQR_FACTOR,
    cap: bool = True,
) -> dict:
    """
    Run the whole report on a raw Credit table.

    Medians are taken from the full table before splitting, and only the
    train split is capped; the test split keeps its extreme values.
    """
    thresholds = compute_label_thresholds(df)
    labelled = synthesize_label(df, thresholds)
    meta = describe_dataset(labelled, thresholds)

    train, test = make_train_test_split(
        labelled, train_fraction=train_fraction, random_state=random_state
    )
    if cap:
        train, cap_bounds = cap_features(train, THRESHOLD_COLUMNS, factor=iqr_factor)
    else:
        cap_bounds = {}

    X_train, y_train = build_design_matrix(train, LABEL_COLUMN)
    X_test, y_test = build_design_matrix(test, LABEL_COLUMN, columns=X_train.columns)

    criterion_table = best_subset_table(
        X_train, y_train, max_size=max_subset_size, method=subset_method
    )
    selected = select_features(criterion_table, criterion)

    subset_model = SubsetLogisticModel(selected).fit(X_train, y_train)
    ridge_model = RidgeLogisticCV(
        lambdas=lambdas, cv=cv_folds, random_state=random_state
    ).fit(X_train, y_train)
    models: dict[str, StatModel] = {
        "subset_logistic": subset_model,
        "ridge_logistic": ridge_model,
    }

    subset_cv = cross_validated_accuracy(
        subset_model.make_estimator(),
        X_train[selected],
        y_train,
        cv=cv_folds,
        random_state=random_state,
    )

    results = {
        name: evaluate_predictions(y_test, model.predict_proba(X_test), threshold=threshold)
        for name, model in models.items()
    }
    results["majority_baseline"] = majority_baseline(y_train, y_test)

    summary = {
        "train_size": len(train),
        "test_size": len(test),
        "train_positive_rate": float(y_train.mean()),
        "test_positive_rate": float(y_test.mean()),
        "criterion": criterion,
        "num_selected": len(selected),
        "subset_cv_accuracy": float(subset_cv.mean()),
        "ridge_best_lambda": ridge_model.best_lambda_,
    }

    return {
        "meta": meta,
        "thresholds": thresholds,
        "cap_bounds": cap_bounds,
        "train": train,
        "test": test,
        "criterion_table": criterion_table,
        "selected_features": selected,
        "models": models,
        "metrics": results,
        "summary": summary,
    }
