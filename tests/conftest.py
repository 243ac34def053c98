"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pysimstudy.dgp import Sample


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_regression_data(rng):
    """Simple regression dataset with an intercept column."""
    n = 100
    X = np.column_stack([np.ones(n), rng.standard_normal((n, 2))])
    beta_true = np.array([1.0, -2.0, 0.5])
    y = X @ beta_true + rng.standard_normal(n) * 0.5
    return X, y, beta_true


@pytest.fixture
def collinear_data(rng):
    """Dataset with perfect collinearity (should fail)."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    x3 = x1 + x2  # Perfect collinearity
    X = np.column_stack([np.ones(n), x1, x2, x3])
    y = rng.standard_normal(n)
    return X, y


@pytest.fixture
def univariate_sample(rng):
    """Fixed univariate sample of 30 normal draws."""
    return Sample.from_arrays(rng.normal(1.0, 2.0, size=30))


@pytest.fixture
def regression_sample(simple_regression_data):
    X, y, _ = simple_regression_data
    return Sample.from_arrays(y, X)
