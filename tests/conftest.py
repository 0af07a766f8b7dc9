import numpy as np
import pandas as pd
import pytest

from credit_label import generate_credit_dataset


@pytest.fixture
def credit_df():
    return generate_credit_dataset(n_samples=200, random_state=3)


@pytest.fixture
def hundred_rows():
    """100 rows with known, distinct Income/Limit/Rating values."""
    idx = np.arange(100)
    return pd.DataFrame(
        {
            "Income": 10.0 + idx,
            "Limit": 1000 + 50 * idx,
            "Rating": 100 + 5 * ((idx * 37) % 100),
            "Cards": idx % 5 + 1,
            "Student": np.where(idx % 7 == 0, "Yes", "No"),
        }
    )
