"""
Resampling primitives.

Index draws for the nonparametric bootstrap and the order-statistic rule
that turns bootstrap statistics into a critical value.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pysimstudy.core.exceptions import NumericalError, ResamplingFault
from pysimstudy.dgp.sample import Sample
from pysimstudy.estimators import StatisticConfig


def resample_indices(
    rng: np.random.Generator,
    n: int,
    size: int | None = None,
) -> NDArray[np.integer[Any]]:
    """
    Draw bootstrap indices uniformly from [0, n) with replacement.

    Args:
        rng: Generator owned by the calling trial.
        n: Source sample size.
        size: Number of resamples. None returns a single (n,) vector,
            otherwise a (size, n) matrix.

    Raises:
        ResamplingFault: If any index falls outside [0, n) or the resample
            length differs from n. Never expected; signals a driver bug.
    """
    shape = (n,) if size is None else (size, n)
    indices = rng.integers(0, n, size=shape)
    check_indices(indices, n)
    return indices


def check_indices(indices: NDArray[np.integer[Any]], n: int) -> None:
    """Enforce the resampling invariant: length n, every index in [0, n)."""
    if indices.shape[-1] != n:
        raise ResamplingFault(
            f"resample length {indices.shape[-1]} differs from sample size {n}",
            n=n,
        )
    if indices.size and (indices.min() < 0 or indices.max() >= n):
        bad = indices[(indices < 0) | (indices >= n)]
        raise ResamplingFault(
            f"resample index out of range [0, {n}): {bad[:5].tolist()}",
            n=n,
            bad_indices=bad[:5],
        )


def order_statistic_rank(replications: int, alpha: float) -> int:
    """
    1-based rank k = ceil((B + 1)(1 - alpha)), clamped to [1, B].

    For B = 199 and alpha = 0.05 this is the 190th smallest value.
    """
    k = math.ceil((replications + 1) * (1.0 - alpha) - 1e-9)
    return min(max(k, 1), replications)


def is_exact_level(replications: int, alpha: float) -> bool:
    """True if (B + 1) * alpha is an integer, so the test level is exact."""
    x = (replications + 1) * alpha
    return abs(x - round(x)) < 1e-9


def bootstrap_critical_value(
    statistics: NDArray[np.floating[Any]],
    alpha: float,
    alternative: str = "two.sided",
) -> float:
    """
    Critical value from bootstrap t-statistics.

    Returned as a magnitude c whatever the alternative, so that
    two.sided rejects when |t| > c, greater when t > c and less when
    t < -c.

    two.sided: k-th order statistic of |t*|; greater: k-th order statistic
    of t*; less: minus the (B + 1 - k)-th order statistic of t*.
    """
    B = statistics.shape[0]
    k = order_statistic_rank(B, alpha)
    if alternative == "two.sided":
        return float(np.partition(np.abs(statistics), k - 1)[k - 1])
    if alternative == "greater":
        return float(np.partition(statistics, k - 1)[k - 1])
    j = B + 1 - k
    return -float(np.partition(statistics, j - 1)[j - 1])


def nested_bootstrap_statistics(
    sample: Sample,
    statistic: StatisticConfig,
    estimate: float,
    replications: int,
    rng: np.random.Generator,
) -> NDArray[np.floating[Any]]:
    """
    Bootstrap t-statistics for one Monte Carlo trial.

    All resamples come from the trial's own generator and are centered at
    the trial's estimate. Vectorized when the statistic allows it. A
    constant resample has zero standard error and gives an infinite (or
    zero) statistic, which the order-statistic rule handles.

    Raises:
        NumericalError: If any resample yields an undefined (NaN) statistic.
    """
    n = sample.n
    indices = resample_indices(rng, n, size=replications)

    if statistic.supports_batch:
        _, _, t = statistic.compute_batch(sample.y[indices], center=estimate)
    else:
        t = np.empty(replications, dtype=np.float64)
        for b in range(replications):
            t[b] = statistic.compute(sample.take(indices[b]), center=estimate).t_stat

    if np.isnan(t).any():
        bad = int(np.flatnonzero(np.isnan(t))[0])
        raise NumericalError(
            f"bootstrap resample {bad} produced an undefined (NaN) statistic (n={n})"
        )
    return t
