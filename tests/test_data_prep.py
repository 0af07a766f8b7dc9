import numpy as np
import pandas as pd
import pytest

from credit_label import (
    EmptyInputError,
    InvalidParameterError,
    SchemaError,
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


class TestLabelSynthesis:
    def test_thresholds_are_full_dataset_medians(self, hundred_rows):
        thresholds = compute_label_thresholds(hundred_rows)
        assert thresholds.median_income == pytest.approx(59.5)
        assert thresholds.median_limit == pytest.approx(3475.0)
        assert thresholds.median_rating == pytest.approx(347.5)

    def test_label_requires_all_three_above_median(self, hundred_rows):
        labelled = synthesize_label(hundred_rows)
        idx = np.arange(100)
        expected = ((idx >= 50) & ((idx * 37) % 100 >= 50)).astype(int)
        assert labelled["Premium"].tolist() == expected.tolist()

    def test_values_equal_to_median_are_negative(self):
        df = pd.DataFrame({"Income": [40.0] * 5, "Limit": [3000] * 5, "Rating": [350] * 5})
        labelled = synthesize_label(df)
        assert (labelled["Premium"] == 0).all()

    def test_explicit_thresholds_are_used(self, hundred_rows):
        thresholds = compute_label_thresholds(hundred_rows)
        subset = hundred_rows.iloc[:10]
        labelled = synthesize_label(subset, thresholds)
        # the first ten rows are all below the global income median
        assert labelled["Premium"].sum() == 0

    def test_input_not_mutated(self, hundred_rows):
        synthesize_label(hundred_rows)
        assert "Premium" not in hundred_rows.columns

    def test_missing_column_raises(self, hundred_rows):
        with pytest.raises(SchemaError):
            synthesize_label(hundred_rows.drop(columns=["Rating"]))

    def test_non_numeric_column_raises(self, hundred_rows):
        bad = hundred_rows.assign(Limit=hundred_rows["Limit"].astype(str))
        with pytest.raises(SchemaError):
            compute_label_thresholds(bad)

    def test_empty_dataset_raises(self, hundred_rows):
        with pytest.raises(EmptyInputError):
            synthesize_label(hundred_rows.iloc[0:0])


class TestTrainTestSplit:
    def test_same_seed_same_partition(self, hundred_rows):
        train_a, test_a = make_train_test_split(hundred_rows, 0.8, random_state=7)
        train_b, test_b = make_train_test_split(hundred_rows, 0.8, random_state=7)
        assert train_a.index.tolist() == train_b.index.tolist()
        assert test_a.index.tolist() == test_b.index.tolist()

    def test_different_seed_different_partition(self, hundred_rows):
        train_a, _ = make_train_test_split(hundred_rows, 0.8, random_state=7)
        train_b, _ = make_train_test_split(hundred_rows, 0.8, random_state=8)
        assert set(train_a.index) != set(train_b.index)

    def test_partition_covers_all_rows_once(self, hundred_rows):
        train, test = make_train_test_split(hundred_rows, 0.8, random_state=7)
        assert set(train.index) | set(test.index) == set(hundred_rows.index)
        assert set(train.index) & set(test.index) == set()
        assert len(train) + len(test) == len(hundred_rows)

    def test_train_size_is_floored(self, hundred_rows):
        train, test = make_train_test_split(hundred_rows.iloc[:33], 0.7, random_state=1)
        assert len(train) == 23
        assert len(test) == 10

    @pytest.mark.parametrize("fraction", [0.0, 1.0, -0.2, 1.5])
    def test_fraction_out_of_range(self, hundred_rows, fraction):
        with pytest.raises(InvalidParameterError):
            make_train_test_split(hundred_rows, fraction)

    def test_empty_dataset_raises(self, hundred_rows):
        with pytest.raises(EmptyInputError):
            make_train_test_split(hundred_rows.iloc[0:0])


class TestOutlierCapping:
    def test_bounds_use_tukey_fences(self):
        df = pd.DataFrame({"Income": [1.0, 2.0, 3.0, 4.0, 100.0]})
        bounds = iqr_bounds(df, "Income")
        assert bounds.lower == pytest.approx(-1.0)
        assert bounds.upper == pytest.approx(7.0)

    def test_values_clamped_not_removed(self):
        df = pd.DataFrame({"Income": [1.0, 2.0, 3.0, 4.0, 100.0]})
        capped = cap_outliers(df, "Income")
        assert len(capped) == len(df)
        assert capped["Income"].tolist() == [1.0, 2.0, 3.0, 4.0, 7.0]
        assert df["Income"].iloc[-1] == 100.0

    def test_all_capped_values_within_bounds(self, credit_df):
        capped, bounds = cap_features(credit_df)
        assert len(capped) == len(credit_df)
        for feature, b in bounds.items():
            assert capped[feature].between(b.lower, b.upper).all()

    def test_features_capped_in_order(self, credit_df):
        capped, bounds = cap_features(credit_df, ["Income", "Limit"])
        assert list(bounds) == ["Income", "Limit"]
        assert bounds["Income"] == iqr_bounds(credit_df, "Income")
        after_income = cap_outliers(credit_df, "Income")
        assert bounds["Limit"] == iqr_bounds(after_income, "Limit")
        pd.testing.assert_series_equal(capped["Income"], after_income["Income"])
        assert "Rating" in capped.columns
        pd.testing.assert_series_equal(capped["Rating"], credit_df["Rating"])

    def test_missing_feature_raises(self, credit_df):
        with pytest.raises(SchemaError):
            cap_outliers(credit_df, "Salary")

    def test_categorical_feature_raises(self, credit_df):
        with pytest.raises(SchemaError):
            cap_outliers(credit_df, "Region")

    def test_empty_train_raises(self, credit_df):
        with pytest.raises(EmptyInputError):
            cap_outliers(credit_df.iloc[0:0], "Income")


class TestDesignMatrix:
    def test_dummies_and_label(self, credit_df):
        labelled = synthesize_label(credit_df)
        X, y = build_design_matrix(labelled)
        assert "Premium" not in X.columns
        assert y.tolist() == labelled["Premium"].tolist()
        assert "Student_Yes" in X.columns
        assert "Student_No" not in X.columns
        assert {"Region_South", "Region_West"} <= set(X.columns)
        assert (X.dtypes == float).all()

    def test_test_split_aligned_to_train_columns(self):
        train = pd.DataFrame(
            {"Income": [1.0, 2.0, 3.0], "Region": ["East", "South", "West"], "Premium": [0, 1, 0]}
        )
        test = pd.DataFrame({"Income": [4.0, 5.0], "Region": ["West", "North"], "Premium": [1, 0]})
        X_train, _ = build_design_matrix(train)
        X_test, y_test = build_design_matrix(test, columns=X_train.columns)
        assert list(X_test.columns) == list(X_train.columns)
        assert X_test["Region_West"].tolist() == [1.0, 0.0]
        assert X_test["Region_South"].tolist() == [0.0, 0.0]
        assert y_test.tolist() == [1, 0]

    def test_zero_variance_columns_dropped(self):
        df = pd.DataFrame({"Income": [1.0, 2.0, 3.0], "Cards": [2, 2, 2], "Premium": [0, 1, 0]})
        X, _ = build_design_matrix(df)
        assert list(X.columns) == ["Income"]


class TestLoadAndDescribe:
    def test_load_drops_row_number_column(self, credit_df, tmp_path):
        path = tmp_path / "Credit.csv"
        credit_df.to_csv(path)
        loaded = load_credit_dataset(path)
        assert list(loaded.columns) == list(credit_df.columns)
        assert len(loaded) == len(credit_df)

    def test_load_rejects_missing_columns(self, credit_df, tmp_path):
        path = tmp_path / "Credit.csv"
        credit_df.drop(columns=["Limit"]).to_csv(path, index=False)
        with pytest.raises(SchemaError):
            load_credit_dataset(path)

    def test_describe_dataset(self, credit_df):
        thresholds = compute_label_thresholds(credit_df)
        meta = describe_dataset(synthesize_label(credit_df, thresholds), thresholds)
        assert meta["num_rows"] == len(credit_df)
        assert meta["thresholds"] == thresholds
        assert 0 < meta["positive_rate"] < 1
        assert set(meta["categorical_columns"]) == {"Gender", "Student", "Married", "Region"}
        assert meta["label_correlation"].index[0] in {"Income", "Limit", "Rating"}
