from __future__ import annotations

"""
Data preparation for the credit label report: loading, label synthesis from
global medians, the seeded train/test split, IQR capping and design matrices.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from .constants import (
    INCOME,
    IQR_FACTOR,
    LABEL_COLUMN,
    LIMIT,
    RANDOM_STATE,
    RATING,
    THRESHOLD_COLUMNS,
    TRAIN_FRACTION,
)
from .errors import EmptyInputError, InvalidParameterError, SchemaError


@dataclass(frozen=True)
class LabelThresholds:
    """Medians of the full dataset; computed once, before any split."""

    median_income: float
    median_limit: float
    median_rating: float


@dataclass(frozen=True)
class CapBounds:
    feature: str
    lower: float
    upper: float


def _is_numeric(series: pd.Series) -> bool:
    return is_numeric_dtype(series) and not is_bool_dtype(series)


def _require_numeric(df: pd.DataFrame, columns: Iterable[str]):
    """Raise SchemaError unless every column exists and holds numbers."""
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaError(f"Missing required columns: {missing}")
    non_numeric = [c for c in columns if not _is_numeric(df[c])]
    if non_numeric:
        raise SchemaError(f"Columns must be numeric: {non_numeric}")


def _require_rows(df: pd.DataFrame, what: str):
    if len(df) == 0:
        raise EmptyInputError(f"{what} has no rows")


def load_credit_dataset(csv_path: Path) -> pd.DataFrame:
    """
    Read the Credit table from CSV.

    Exports from R carry a leading unnamed row-number column; it is dropped.
    """
    df = pd.read_csv(csv_path)
    unnamed = [c for c in df.columns if str(c).startswith("Unnamed")]
    if unnamed:
        df = df.drop(columns=unnamed)
    _require_numeric(df, THRESHOLD_COLUMNS)
    return df


def compute_label_thresholds(df: pd.DataFrame) -> LabelThresholds:
    _require_numeric(df, THRESHOLD_COLUMNS)
    _require_rows(df, "Dataset")
    return LabelThresholds(
        median_income=float(df[INCOME].median()),
        median_limit=float(df[LIMIT].median()),
        median_rating=float(df[RATING].median()),
    )


def synthesize_label(
    df: pd.DataFrame,
    thresholds: LabelThresholds | None = None,
    label_column: str = LABEL_COLUMN,
) -> pd.DataFrame:
    """
    Add the binary label: 1 when Income, Limit and Rating are all strictly
    above their medians, else 0.

    Pass thresholds computed on the full dataset; when omitted they are
    computed from ``df`` itself.
    """
    _require_numeric(df, THRESHOLD_COLUMNS)
    if thresholds is None:
        thresholds = compute_label_thresholds(df)

    above = (
        (df[INCOME] > thresholds.median_income)
        & (df[LIMIT] > thresholds.median_limit)
        & (df[RATING] > thresholds.median_rating)
    )
    out = df.copy()
    out[label_column] = above.astype(int)
    return out


def make_train_test_split(
    df: pd.DataFrame,
    train_fraction: float = TRAIN_FRACTION,
    random_state: int = RANDOM_STATE,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Seeded random split: the first floor(train_fraction * n) positions of a
    permutation go to train, the rest to test. Index labels are kept.
    """
    if not 0 < train_fraction < 1:
        raise InvalidParameterError(
            f"train_fraction must be in (0, 1), got {train_fraction}"
        )
    _require_rows(df, "Dataset")

    rng = np.random.default_rng(random_state)
    order = rng.permutation(len(df))
    n_train = int(np.floor(train_fraction * len(df)))
    return df.iloc[order[:n_train]], df.iloc[order[n_train:]]


def iqr_bounds(train: pd.DataFrame, feature: str, factor: float = IQR_FACTOR) -> CapBounds:
    """Tukey fences Q1 - factor*IQR and Q3 + factor*IQR on the train values."""
    _require_numeric(train, [feature])
    _require_rows(train, "Train set")
    q1 = float(train[feature].quantile(0.25))
    q3 = float(train[feature].quantile(0.75))
    iqr = q3 - q1
    return CapBounds(feature=feature, lower=q1 - factor * iqr, upper=q3 + factor * iqr)


def cap_outliers(
    train: pd.DataFrame, feature: str, factor: float = IQR_FACTOR
) -> pd.DataFrame:
    """Winsorize one column to its IQR fences. Rows are never dropped."""
    bounds = iqr_bounds(train, feature, factor=factor)
    out = train.copy()
    out[feature] = out[feature].clip(lower=bounds.lower, upper=bounds.upper)
    return out


def cap_features(
    train: pd.DataFrame,
    features: Sequence[str] = THRESHOLD_COLUMNS,
    factor: float = IQR_FACTOR,
) -> tuple[pd.DataFrame, dict[str, CapBounds]]:
    """
    Cap each feature in turn, every call working on the previous result.
    Only meant for the train split; test values are left untouched.
    """
    bounds = {}
    capped = train
    for feature in features:
        bounds[feature] = iqr_bounds(capped, feature, factor=factor)
        capped = cap_outliers(capped, feature, factor=factor)
    return capped, bounds


def build_design_matrix(
    df: pd.DataFrame,
    label_column: str = LABEL_COLUMN,
    columns: Sequence[str] | None = None,
):
    """
    One-hot encode categorical columns and separate the label.

    Without ``columns`` this is the train encoding: the first level of each
    categorical is the baseline and zero-variance columns are dropped. With
    ``columns`` (the train design columns) the frame is encoded against that
    layout, so levels unseen in train are ignored and missing ones are zero.
    """
    y = df[label_column].astype(int) if label_column in df.columns else None
    features = df.drop(columns=[label_column], errors="ignore")
    categorical = [c for c in features.columns if not _is_numeric(features[c])]

    if columns is None:
        X = pd.get_dummies(features, columns=categorical, drop_first=True, dtype=float)
        zero_var_cols = list(X.columns[X.nunique() <= 1])
        if zero_var_cols:
            X = X.drop(columns=zero_var_cols)
    else:
        X = pd.get_dummies(features, columns=categorical, dtype=float)
        X = X.reindex(columns=list(columns), fill_value=0.0)

    return X.astype(float), y


def describe_dataset(
    df: pd.DataFrame,
    thresholds: LabelThresholds | None = None,
    label_column: str = LABEL_COLUMN,
) -> dict:
    """Summary numbers for the exploratory part of the report."""
    numeric_cols = [c for c in df.columns if _is_numeric(df[c]) and c != label_column]
    meta = {
        "num_rows": len(df),
        "numeric_columns": numeric_cols,
        "categorical_columns": [
            c for c in df.columns if c not in numeric_cols and c != label_column
        ],
        "numeric_summary": df[numeric_cols].describe().T,
        "thresholds": thresholds,
    }
    if label_column in df.columns:
        meta["positive_rate"] = float(df[label_column].mean())
        meta["label_correlation"] = (
            df[numeric_cols].corrwith(df[label_column]).sort_values(ascending=False)
        )
    return meta
