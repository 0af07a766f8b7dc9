from __future__ import annotations

"""
CLI entrypoint for the credit label report. Reads the Credit CSV (or generates
a synthetic one with --synthetic), then prints the exploratory summary, the
best-subset table and test metrics for the subset and ridge logistic models.
"""

import argparse
import sys
from pathlib import Path

import pandas as pd

from credit_label import (
    LABEL_COLUMN,
    CreditLabelError,
    generate_credit_dataset,
    load_credit_dataset,
    run_report,
    summarize_coefficients,
)
from credit_label.constants import (
    CV_FOLDS,
    DECISION_THRESHOLD,
    IQR_FACTOR,
    RANDOM_STATE,
    TRAIN_FRACTION,
)


def describe_features(meta: dict):
    """Print a short summary of dataset size, label balance and medians."""
    thresholds = meta["thresholds"]
    print(f"Rows: {meta['num_rows']}, positive rate for {LABEL_COLUMN}: {meta['positive_rate']:.3f}")
    print(
        f"Medians -> Income {thresholds.median_income:.3f}, "
        f"Limit {thresholds.median_limit:.1f}, Rating {thresholds.median_rating:.1f}"
    )
    print(f"Categorical columns: {meta['categorical_columns']}")
    print("\nNumeric summary:")
    print(meta["numeric_summary"][["mean", "std", "min", "50%", "max"]].round(2))
    print(f"\nCorrelation with {LABEL_COLUMN}:")
    print(meta["label_correlation"].round(3))


def print_metrics(label: str, metrics):
    """Nicely format a ClassificationMetrics record."""
    cm = metrics.confusion_matrix
    print(
        f"[{label}] Acc {metrics.accuracy:.3f} | Err {metrics.error_rate:.3f} | "
        f"Sens {metrics.sensitivity:.3f} | Spec {metrics.specificity:.3f} | "
        f"MSE {metrics.mse:.4f} | ROC-AUC {metrics.roc_auc:.3f}"
    )
    print(f"    Confusion matrix [[TN, FP], [FN, TP]]: {cm.tolist()}")


def build_arg_parser():
    """CLI parser with knobs for the split, capping, selection and models."""
    parser = argparse.ArgumentParser(
        description="Predict whether a customer is above median income, limit and rating."
    )
    parser.add_argument("--csv-path", type=Path, default=Path("data/Credit.csv"))
    parser.add_argument(
        "--synthetic",
        action="store_true",
        help="Use a generated Credit-like table instead of --csv-path.",
    )
    parser.add_argument("--n-samples", type=int, default=400, help="Rows for --synthetic.")
    parser.add_argument("--train-fraction", type=float, default=TRAIN_FRACTION)
    parser.add_argument(
        "--random-state",
        type=int,
        default=RANDOM_STATE,
        help="Seed for the split, CV folds and synthetic data.",
    )
    parser.add_argument(
        "--criterion",
        choices=["AIC", "BIC", "adjustedR2"],
        default="BIC",
        help="Criterion used to pick the best subset size.",
    )
    parser.add_argument(
        "--subset-method",
        choices=["exhaustive", "forward", "backward"],
        default="exhaustive",
    )
    parser.add_argument(
        "--max-subset-size", type=int, default=None, help="Largest subset considered."
    )
    parser.add_argument("--cv-folds", type=int, default=CV_FOLDS, help="Folds for ridge CV.")
    parser.add_argument(
        "--threshold",
        type=float,
        default=DECISION_THRESHOLD,
        help="Probability above which a row is classed positive.",
    )
    parser.add_argument("--iqr-factor", type=float, default=IQR_FACTOR)
    parser.add_argument(
        "--skip-capping", action="store_true", help="Do not winsorize the train split."
    )
    return parser


def load_data(args: argparse.Namespace) -> pd.DataFrame:
    if args.synthetic:
        return generate_credit_dataset(n_samples=args.n_samples, random_state=args.random_state)
    return load_credit_dataset(args.csv_path)


def run(args: argparse.Namespace):
    df = load_data(args)
    report = run_report(
        df,
        train_fraction=args.train_fraction,
        random_state=args.random_state,
        criterion=args.criterion,
        subset_method=args.subset_method,
        max_subset_size=args.max_subset_size,
        cv_folds=args.cv_folds,
        threshold=args.threshold,
        iqr_factor=args.iqr_factor,
        cap=not args.skip_capping,
    )
    summary = report["summary"]

    describe_features(report["meta"])
    print(f"\nTrain size: {summary['train_size']}, Test size: {summary['test_size']}")

    if report["cap_bounds"]:
        print("\nIQR caps applied to the train split:")
        for feature, bounds in report["cap_bounds"].items():
            print(f"  {feature}: [{bounds.lower:.3f}, {bounds.upper:.3f}]")

    print(f"\nBest subset per size ({args.subset_method}):")
    print(report["criterion_table"][["rss", "aic", "bic", "adjr2"]].round(3))
    print(f"Selected by {args.criterion}: {report['selected_features']}")
    print(f"Subset model CV accuracy (train): {summary['subset_cv_accuracy']:.3f}")
    print(f"Ridge best lambda: {summary['ridge_best_lambda']:.4g}\n")

    for name, metrics in report["metrics"].items():
        print_metrics(name, metrics)

    for name, model in report["models"].items():
        top = summarize_coefficients(model.coefficients(), top_k=5)
        print(f"\nTop positive coefficients ({name}):")
        print(top["positive"])
        print(f"\nTop negative coefficients ({name}):")
        print(top["negative"])


def main(args: argparse.Namespace | None = None):
    args = args or build_arg_parser().parse_args()
    try:
        run(args)
    except (CreditLabelError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
