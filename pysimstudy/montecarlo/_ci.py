"""
Bootstrap confidence intervals.

- normal: bias-corrected normal approximation
- basic: basic (pivotal) bootstrap interval
- perc: percentile method
- stud: studentized (bootstrap-t), from the centered resample t-statistics
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from scipy import stats as sp_stats

from pysimstudy.core.exceptions import ValidationError

if TYPE_CHECKING:
    from pysimstudy.montecarlo._common import BootParams

CI_TYPES = ("normal", "basic", "perc", "stud")


def compute_ci(
    params: 'BootParams',
    types: tuple[str, ...] | list[str],
    conf_level: float,
) -> dict[str, tuple[float, float]]:
    """
    Compute bootstrap confidence intervals.

    Args:
        params: Bootstrap payload.
        types: CI types to compute.
        conf_level: Confidence level (e.g., 0.95).

    Returns:
        Dict mapping CI type name to (lower, upper).
    """
    alpha = 1.0 - conf_level
    ci: dict[str, tuple[float, float]] = {}

    for ci_type in types:
        if ci_type == "normal":
            ci["normal"] = _ci_normal(params, alpha)
        elif ci_type == "basic":
            ci["basic"] = _ci_basic(params, alpha)
        elif ci_type == "perc":
            ci["perc"] = _ci_percentile(params, alpha)
        elif ci_type == "stud":
            ci["stud"] = _ci_studentized(params, alpha)
        else:
            raise ValidationError(
                f"Unknown CI type: {ci_type!r}; expected one of {CI_TYPES}"
            )

    return ci


def _ci_normal(params: 'BootParams', alpha: float) -> tuple[float, float]:
    """
    Normal approximation CI with bias correction.

    Centered at 2*t0 - mean(t*), not at t0.
    """
    z = sp_stats.norm.ppf(1.0 - alpha / 2.0)
    center = params.t0 - params.bias
    return (center - z * params.se, center + z * params.se)


def _ci_basic(params: 'BootParams', alpha: float) -> tuple[float, float]:
    """
    Basic (pivotal) bootstrap CI.

    CI = [2*t0 - Q(1-alpha/2), 2*t0 - Q(alpha/2)]
    """
    q_lo = np.quantile(params.estimates, alpha / 2.0)
    q_hi = np.quantile(params.estimates, 1.0 - alpha / 2.0)
    return (float(2.0 * params.t0 - q_hi), float(2.0 * params.t0 - q_lo))


def _ci_percentile(params: 'BootParams', alpha: float) -> tuple[float, float]:
    """Percentile CI: [Q(alpha/2), Q(1-alpha/2)]."""
    return (
        float(np.quantile(params.estimates, alpha / 2.0)),
        float(np.quantile(params.estimates, 1.0 - alpha / 2.0)),
    )


def _ci_studentized(params: 'BootParams', alpha: float) -> tuple[float, float]:
    """
    Studentized (bootstrap-t) CI.

    CI = [t0 - q*(1-alpha/2) * se0, t0 - q*(alpha/2) * se0], where q* are
    quantiles of the resample t-statistics centered at t0.
    """
    if not np.isfinite(params.std_error0):
        raise ValidationError(
            "Studentized CI requires a statistic with a standard error"
        )
    q_lo = np.quantile(params.statistics, alpha / 2.0)
    q_hi = np.quantile(params.statistics, 1.0 - alpha / 2.0)
    # Upper quantile gives the lower bound
    return (
        float(params.t0 - q_hi * params.std_error0),
        float(params.t0 - q_lo * params.std_error0),
    )
