"""
Common data structures for statistics and estimators.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class StatisticValue:
    """
    Output of one statistic evaluation.

    - estimate: point estimate (sample mean, coefficient of interest)
    - std_error: its estimated standard error (nan if not available)
    - t_stat: (estimate - center) / std_error
    - df: degrees of freedom of the exact reference t distribution, if any
    """
    estimate: float
    std_error: float
    t_stat: float
    df: float | None = None


def t_ratio(diff: float, se: float) -> float:
    """
    diff / se, with the zero-se limit.

    A zero standard error (a constant sample or resample) gives +-inf in
    the direction of ``diff``, or 0.0 when ``diff`` is zero as well. NaN
    only comes out of NaN inputs.
    """
    if se > 0.0:
        return diff / se
    if diff == 0.0:
        return 0.0
    return math.copysign(math.inf, diff)


def t_ratio_batch(diff: NDArray, se: NDArray) -> NDArray:
    """Element-wise ``t_ratio``."""
    with np.errstate(divide='ignore', invalid='ignore'):
        limit = np.where(diff == 0.0, 0.0, np.copysign(np.inf, diff))
        return np.where(se > 0.0, diff / se, limit)
