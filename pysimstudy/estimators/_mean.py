"""
Mean test: t-statistic for H0: E[y] = mu0.

Scalar and batched versions. The batched version treats each row of a
matrix as one sample and is what the vectorized Monte Carlo backend and
the nested bootstrap use.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pysimstudy.core.exceptions import InvalidParameterError
from pysimstudy.estimators._common import StatisticValue, t_ratio, t_ratio_batch


def mean_t(y: NDArray[np.floating[Any]], center: float) -> StatisticValue:
    """One-sample t-statistic. Zero standard error gives +-inf (or 0.0)."""
    n = y.shape[0]
    if n < 2:
        raise InvalidParameterError(
            f"mean test requires at least 2 observations, got {n}",
            parameter='n', value=n,
        )
    mean_y = float(np.mean(y))
    se = float(np.sqrt(np.var(y, ddof=1) / n))
    t_stat = t_ratio(mean_y - center, se)
    return StatisticValue(
        estimate=mean_y,
        std_error=se,
        t_stat=float(t_stat),
        df=float(n - 1),
    )


def mean_t_batch(
    Y: NDArray[np.floating[Any]],
    center: float | NDArray[np.floating[Any]],
) -> tuple[NDArray, NDArray, NDArray]:
    """
    Row-wise one-sample t-statistics.

    Args:
        Y: (m, n) matrix, one sample per row.
        center: Scalar or (m,) array of hypothesized means.

    Returns:
        (estimates, std_errors, t_stats), each of shape (m,).
    """
    m, n = Y.shape
    if n < 2:
        raise InvalidParameterError(
            f"mean test requires at least 2 observations, got {n}",
            parameter='n', value=n,
        )
    means = np.mean(Y, axis=1)
    ses = np.sqrt(np.var(Y, axis=1, ddof=1) / n)
    t = t_ratio_batch(means - center, ses)
    return means, ses, t
