"""
OLS coefficient t-statistic.

Coefficients come from the normal equations; the standard error of the
coefficient of interest uses either the classical homoskedastic formula
or a heteroskedasticity-robust sandwich (HC0 / HC1).
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pysimstudy.core.compute.linalg import normal_equations_solve
from pysimstudy.estimators._common import StatisticValue, t_ratio


def ols_t(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    coef_index: int,
    center: float,
    variance: str,
) -> StatisticValue:
    """
    t-statistic for H0: beta[coef_index] = center.

    Raises:
        SingularDesignError: If X'X cannot be inverted reliably
    """
    n, p = X.shape
    ne = normal_equations_solve(X, y)
    beta = ne.coefficients
    resid = y - X @ beta
    df_resid = n - p

    if variance == "homoskedastic":
        sigma_sq = float(resid @ resid) / df_resid
        var_j = sigma_sq * ne.xtx_inv[coef_index, coef_index]
    else:
        # Row coef_index of (X'X)^-1 X' gives the sandwich for one coefficient
        a = X @ ne.xtx_inv[coef_index]
        var_j = float(np.sum((a * resid) ** 2))
        if variance == "hc1":
            var_j *= n / df_resid

    se = float(np.sqrt(var_j))
    estimate = float(beta[coef_index])
    t_stat = t_ratio(estimate - center, se)
    return StatisticValue(
        estimate=estimate,
        std_error=se,
        t_stat=float(t_stat),
        df=float(df_resid),
    )
