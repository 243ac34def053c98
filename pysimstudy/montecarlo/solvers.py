"""
Solver dispatch for Monte Carlo experiments and the bootstrap.

This module provides run_monte_carlo() and run_bootstrap() (public API)
and backend selection.
"""

from __future__ import annotations

import dataclasses
import warnings
from typing import Literal

import numpy as np
from numpy.typing import ArrayLike

from pysimstudy.dgp import Sample
from pysimstudy.estimators import StatisticConfig
from pysimstudy.montecarlo._resample import is_exact_level
from pysimstudy.montecarlo.backends.cpu import (
    CPUBootstrapBackend,
    CPUMonteCarloBackend,
    CPUVectorizedMonteCarloBackend,
)
from pysimstudy.montecarlo.design import DGP, BootstrapDesign, MonteCarloDesign
from pysimstudy.montecarlo.solution import BootstrapSolution, MonteCarloSolution

BackendChoice = Literal['auto', 'cpu', 'cpu_loop', 'cpu_vectorized']

# auto never builds an (R, n) matrix larger than this.
_VECTORIZED_MAX_CELLS = 50_000_000


def run_monte_carlo(
    sample_size: int,
    replications: int,
    dgp_config: DGP,
    statistic_config: StatisticConfig,
    seed: int | np.random.SeedSequence | None = None,
    *,
    bootstrap_replications: int | None = None,
    alpha: float = 0.05,
    n_jobs: int = 1,
    backend: BackendChoice = 'auto',
) -> MonteCarloSolution:
    """
    Run a Monte Carlo experiment.

    Each of the R trials draws a sample of ``sample_size`` observations
    from ``dgp_config`` using its own random stream (child r of
    SeedSequence(seed)) and computes ``statistic_config`` on it.

    Args:
        sample_size: Observations per trial.
        replications: Number of trials R.
        dgp_config: DGPConfig or RegressionDGP.
        statistic_config: Statistic computed per trial.
        seed: Top-level seed. Fixed seed -> bit-identical results for any
            n_jobs. None draws fresh entropy (recorded in ``entropy``).
        bootstrap_replications: If set, each trial also runs a bootstrap
            of B resamples of its own sample and records the bootstrap
            critical value at level ``alpha``.
        alpha: Level for the nested bootstrap critical value.
        n_jobs: Worker threads.
        backend:
            - 'auto': vectorized when eligible and n_jobs == 1, else loop
            - 'cpu' / 'cpu_loop': one trial at a time
            - 'cpu_vectorized': all samples in one matrix (mean test only)

    Returns:
        MonteCarloSolution with the collected statistics in trial order.

    Raises:
        InvalidParameterError: Invalid parameters.
        InsufficientReplicationsError: R < 1 or B < 2.
        SingularDesignError: A trial's regression design is singular.
        NumericalError: A trial produced an undefined (NaN) statistic. A
            zero standard error is not an error: its statistic is +-inf.

    Example:
        >>> from pysimstudy.dgp import DGPConfig
        >>> from pysimstudy.estimators import StatisticConfig
        >>> res = run_monte_carlo(20, 2000, DGPConfig.normal(),
        ...                       StatisticConfig.mean_test(), seed=1)
        >>> res.statistics.shape
        (2000,)
    """
    design = MonteCarloDesign.for_experiment(
        sample_size,
        replications,
        dgp_config,
        statistic_config,
        seed,
        bootstrap_replications=bootstrap_replications,
        alpha=alpha,
        n_jobs=n_jobs,
    )

    backend_impl = _get_backend(backend, design)
    result = backend_impl.solve(design)

    B = design.bootstrap_replications
    if B is not None and not is_exact_level(B, design.alpha):
        msg = (
            f"(B + 1) * alpha = {(B + 1) * design.alpha:g} is not an integer; "
            f"the bootstrap test is not exact at level {design.alpha:g} "
            f"(B = {B})"
        )
        warnings.warn(msg, UserWarning, stacklevel=2)
        result = dataclasses.replace(result, warnings=result.warnings + (msg,))

    return MonteCarloSolution(_result=result, _design=design)


def run_bootstrap(
    sample: Sample | ArrayLike,
    replications: int,
    statistic_config: StatisticConfig,
    seed: int | np.random.SeedSequence | None = None,
    *,
    n_jobs: int = 1,
    return_indices: bool = False,
) -> BootstrapSolution:
    """
    Nonparametric bootstrap of one realized sample.

    Draws B resamples of size n with replacement, each from its own
    random stream, and recomputes the statistic on each. Resample
    t-statistics are centered at the original-sample estimate.

    Args:
        sample: A Sample, or array-like univariate data.
        replications: Number of resamples B (>= 2).
        statistic_config: Statistic recomputed on each resample.
        seed: Top-level seed.
        n_jobs: Worker threads.
        return_indices: Keep the (B, n) index matrix.

    Returns:
        BootstrapSolution

    Raises:
        InsufficientReplicationsError: If replications < 2.

    Example:
        >>> res = run_bootstrap(data, 999, StatisticConfig.mean_test(), seed=42)
        >>> res.se, res.critical_value(0.05)
    """
    design = BootstrapDesign.for_bootstrap(
        sample,
        replications,
        statistic_config,
        seed,
        n_jobs=n_jobs,
        return_indices=return_indices,
    )
    result = CPUBootstrapBackend().solve(design)
    return BootstrapSolution(_result=result, _design=design)


def _get_backend(choice: BackendChoice, design: MonteCarloDesign):
    """
    Select and instantiate the Monte Carlo backend.

    Raises:
        ValueError: Unknown backend, or cpu_vectorized on an ineligible design
    """
    if choice == 'auto':
        eligible = CPUVectorizedMonteCarloBackend.supports(design)
        small = design.replications * design.sample_size <= _VECTORIZED_MAX_CELLS
        if eligible and small and design.n_jobs == 1:
            return CPUVectorizedMonteCarloBackend()
        return CPUMonteCarloBackend()

    elif choice in ('cpu', 'cpu_loop'):
        return CPUMonteCarloBackend()

    elif choice == 'cpu_vectorized':
        if not CPUVectorizedMonteCarloBackend.supports(design):
            raise ValueError(
                "cpu_vectorized backend needs a univariate DGP, a statistic "
                "with a vectorized form and no nested bootstrap"
            )
        return CPUVectorizedMonteCarloBackend()

    else:
        raise ValueError(f"Unknown backend: {choice!r}")
