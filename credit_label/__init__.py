"""
Utilities for the credit label report: predicting whether a customer sits
above the median on Income, Limit and Rating at once.

This package contains data preparation helpers, best-subset selection, thin
scikit-learn model wrappers and evaluation utilities used by main.py.
"""

from .constants import LABEL_COLUMN, THRESHOLD_COLUMNS
from .data_prep import (
    CapBounds,
    LabelThresholds,
    build_design_matrix,
    cap_features,
    cap_outliers,
    compute_label_thresholds,
    describe_dataset,
    iqr_bounds,
    load_credit_dataset,
    make_train_test_split,
    synthesize_label,
)
from .errors import (
    CreditLabelError,
    DegenerateLabelError,
    EmptyInputError,
    InvalidParameterError,
    SchemaError,
)
from .metrics import ClassificationMetrics, evaluate_predictions, summarize_coefficients
from .models import RidgeLogisticCV, StatModel, SubsetLogisticModel, roc_auc
from .pipeline import run_report
from .selection import best_subset_table, select_features
from .synthetic import generate_credit_dataset

__all__ = [
    "LABEL_COLUMN",
    "THRESHOLD_COLUMNS",
    "CapBounds",
    "LabelThresholds",
    "build_design_matrix",
    "cap_features",
    "cap_outliers",
    "compute_label_thresholds",
    "describe_dataset",
    "iqr_bounds",
    "load_credit_dataset",
    "make_train_test_split",
    "synthesize_label",
    "CreditLabelError",
    "DegenerateLabelError",
    "EmptyInputError",
    "InvalidParameterError",
    "SchemaError",
    "ClassificationMetrics",
    "evaluate_predictions",
    "summarize_coefficients",
    "RidgeLogisticCV",
    "StatModel",
    "SubsetLogisticModel",
    "roc_auc",
    "run_report",
    "best_subset_table",
    "select_features",
    "generate_credit_dataset",
]
