"""
Common data structures for the Monte Carlo and bootstrap drivers.

MonteCarloParams and BootParams are the parameter payloads wrapped by
Result[P] and exposed through Solution classes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class MonteCarloParams:
    """
    Parameter payload for a Monte Carlo run.

    - statistics: test statistic of each trial, in trial order
    - estimates: point estimate of each trial
    - bootstrap_critical_values: per-trial bootstrap critical value, or
      None if no nested bootstrap was requested
    - reference_df: degrees of freedom of the exact reference t
      distribution, None if there is none
    """
    statistics: NDArray[np.floating[Any]]                  # shape (R,)
    estimates: NDArray[np.floating[Any]]                   # shape (R,)
    bootstrap_critical_values: NDArray[np.floating[Any]] | None
    reference_df: float | None
    sample_size: int
    replications: int


@dataclass(frozen=True)
class BootParams:
    """
    Parameter payload for a bootstrap run.

    - t0: estimate on the original sample
    - statistic0: t-statistic of the original sample against the null
    - std_error0: standard error on the original sample
    - estimates: estimate on each resample
    - statistics: t-statistic of each resample, centered at t0
    - bias: mean(estimates) - t0
    - se: sd(estimates), ddof=1
    - indices: (B, n) resample indices if requested
    """
    t0: float
    statistic0: float
    std_error0: float
    estimates: NDArray[np.floating[Any]]         # shape (B,)
    statistics: NDArray[np.floating[Any]]        # shape (B,)
    bias: float
    se: float
    replications: int
    indices: NDArray[np.integer[Any]] | None = None
