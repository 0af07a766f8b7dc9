from __future__ import annotations

"""
Reproducible Credit-like data for demos and tests when no CSV is at hand.
"""

import numpy as np
import pandas as pd

from .constants import RANDOM_STATE


def generate_credit_dataset(
    n_samples: int = 400, random_state: int = RANDOM_STATE
) -> pd.DataFrame:
    """
    Generate a table with the Credit schema.

    Income is in thousands of dollars; Limit follows income and Rating follows
    Limit closely, so the three label columns are strongly correlated as in the
    real data. A handful of incomes are pushed far out to give the IQR capping
    something to do.
    """
    rng = np.random.default_rng(random_state)

    income = np.round(rng.lognormal(mean=3.6, sigma=0.55, size=n_samples), 3)
    n_extreme = max(1, n_samples // 50)
    extreme_idx = rng.choice(n_samples, size=n_extreme, replace=False)
    income[extreme_idx] *= rng.uniform(3.0, 5.0, size=n_extreme)

    limit = np.round(
        np.clip(1500 + 55 * income + rng.normal(0, 900, n_samples), 850, None)
    ).astype(int)
    rating = np.round(limit / 14.8 + 30 + rng.normal(0, 20, n_samples)).astype(int)
    cards = rng.integers(1, 10, size=n_samples)
    age = rng.integers(23, 99, size=n_samples)
    education = rng.integers(5, 21, size=n_samples)

    gender = rng.choice(["Male", "Female"], size=n_samples)
    student = rng.choice(["No", "Yes"], size=n_samples, p=[0.9, 0.1])
    married = rng.choice(["No", "Yes"], size=n_samples, p=[0.39, 0.61])
    region = rng.choice(["East", "South", "West"], size=n_samples, p=[0.25, 0.5, 0.25])

    balance = (
        0.25 * limit
        - 7.5 * income
        + 400 * (student == "Yes")
        + rng.normal(0, 120, n_samples)
        - 450
    )
    balance = np.round(np.clip(balance, 0, None)).astype(int)

    return pd.DataFrame(
        {
            "Income": income,
            "Limit": limit,
            "Rating": rating,
            "Cards": cards,
            "Age": age,
            "Education": education,
            "Gender": gender,
            "Student": student,
            "Married": married,
            "Region": region,
            "Balance": balance,
        }
    )
