"""
Column names and defaults shared by the data preparation, model and CLI code.
"""

import numpy as np

INCOME = "Income"
LIMIT = "Limit"
RATING = "Rating"
LABEL_COLUMN = "Premium"

# Columns the label is derived from; also the columns capped on the train split.
THRESHOLD_COLUMNS = (INCOME, LIMIT, RATING)

NUMERIC_COLUMNS = [INCOME, LIMIT, RATING, "Cards", "Age", "Education", "Balance"]
CATEGORICAL_COLUMNS = ["Gender", "Student", "Married", "Region"]

TRAIN_FRACTION = 0.8
RANDOM_STATE = 42
IQR_FACTOR = 1.5
DECISION_THRESHOLD = 0.5
CV_FOLDS = 10

CRITERIA = {
    "aic": "aic",
    "bic": "bic",
    "adjr2": "adjr2",
    "adjustedr2": "adjr2",
}
SCORE_COLUMNS = ["rss", "aic", "bic", "adjr2"]

# Penalty strengths tried by the ridge model, largest first (glmnet style).
DEFAULT_LAMBDA_GRID = np.logspace(3, -3, 40)
