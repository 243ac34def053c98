"""
CPU backends for Monte Carlo experiments and the bootstrap.

CPUMonteCarloBackend: one trial at a time, inline or on a thread pool.
CPUVectorizedMonteCarloBackend: all samples in one matrix, one
    vectorized statistic pass (mean test only).
CPUBootstrapBackend: nonparametric bootstrap of a fixed sample.

Every backend writes into result buffers sized once before the first
trial; each trial owns its slot and its own random stream.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pysimstudy.core.compute.parallel import map_trials
from pysimstudy.core.compute.rng import make_generator, trial_sequences
from pysimstudy.core.compute.timing import Timer
from pysimstudy.core.exceptions import NumericalError
from pysimstudy.core.result import Result
from pysimstudy.dgp import DGPConfig
from pysimstudy.montecarlo._common import BootParams, MonteCarloParams
from pysimstudy.montecarlo._resample import (
    bootstrap_critical_value,
    nested_bootstrap_statistics,
    resample_indices,
)
from pysimstudy.montecarlo.design import BootstrapDesign, MonteCarloDesign


class CPUMonteCarloBackend:
    """
    Per-trial Monte Carlo backend.

    Trial r: generator from child seed r -> draw sample -> statistic ->
    optional nested bootstrap critical value. With n_jobs > 1 the trials
    run on a thread pool; results are identical to the inline run.
    """

    @property
    def name(self) -> str:
        return 'cpu_loop'

    def solve(self, design: MonteCarloDesign) -> Result[MonteCarloParams]:
        """Run all trials and return Result[MonteCarloParams]."""
        timer = Timer()
        timer.start()

        n = design.sample_size
        R = design.replications
        B = design.bootstrap_replications
        dgp = design.dgp
        statistic = design.statistic
        alpha = design.alpha

        with timer.section('seeding'):
            children = trial_sequences(design.seed_sequence, R)

        statistics = np.empty(R, dtype=np.float64)
        estimates = np.empty(R, dtype=np.float64)
        crit = np.empty(R, dtype=np.float64) if B is not None else None

        def run_trial(r: int) -> None:
            rng = make_generator(children[r])
            sample = dgp.sample(n, rng)
            value = statistic.compute(sample)
            estimates[r] = value.estimate
            statistics[r] = value.t_stat
            if crit is not None:
                t_star = nested_bootstrap_statistics(
                    sample, statistic, value.estimate, B, rng,
                )
                crit[r] = bootstrap_critical_value(t_star, alpha)

        with timer.section('trials'):
            map_trials(run_trial, R, design.n_jobs)

        with timer.section('checks'):
            _check_defined(statistics, 'statistic')

        timer.stop()

        params = MonteCarloParams(
            statistics=statistics,
            estimates=estimates,
            bootstrap_critical_values=crit,
            reference_df=design.reference_df,
            sample_size=n,
            replications=R,
        )

        return Result(
            params=params,
            info=_run_info(design),
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )


class CPUVectorizedMonteCarloBackend:
    """
    Vectorized Monte Carlo backend for row-wise statistics.

    Each trial's sample is still drawn from its own generator, into row r
    of a pre-sized (R, n) matrix; the statistic is then computed for all
    rows at once. Draws are bit-identical to CPUMonteCarloBackend.
    """

    @property
    def name(self) -> str:
        return 'cpu_vectorized'

    @staticmethod
    def supports(design: MonteCarloDesign) -> bool:
        """True if the design can run on this backend."""
        return (
            isinstance(design.dgp, DGPConfig)
            and design.statistic.supports_batch
            and design.bootstrap_replications is None
        )

    def solve(self, design: MonteCarloDesign) -> Result[MonteCarloParams]:
        if not self.supports(design):
            raise ValueError(
                "cpu_vectorized backend needs a univariate DGP, a statistic "
                "with a vectorized form and no nested bootstrap"
            )

        timer = Timer()
        timer.start()

        n = design.sample_size
        R = design.replications
        dgp = design.dgp

        with timer.section('seeding'):
            children = trial_sequences(design.seed_sequence, R)

        Y = np.empty((R, n), dtype=np.float64)
        with timer.section('draws'):
            for r in range(R):
                Y[r] = dgp.draw(n, make_generator(children[r]))

        with timer.section('statistics'):
            estimates, _, statistics = design.statistic.compute_batch(Y)

        with timer.section('checks'):
            _check_defined(statistics, 'statistic')

        timer.stop()

        params = MonteCarloParams(
            statistics=statistics,
            estimates=estimates,
            bootstrap_critical_values=None,
            reference_df=design.reference_df,
            sample_size=n,
            replications=R,
        )

        return Result(
            params=params,
            info=_run_info(design),
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )


class CPUBootstrapBackend:
    """
    CPU backend for the nonparametric bootstrap.

    Resample b draws n indices with replacement from its own generator,
    recomputes the statistic centered at the original estimate, and writes
    into slot b of the result buffers.
    """

    @property
    def name(self) -> str:
        return 'cpu_bootstrap'

    def solve(self, design: BootstrapDesign) -> Result[BootParams]:
        """Run the bootstrap and return Result[BootParams]."""
        timer = Timer()
        timer.start()

        sample = design.sample
        statistic = design.statistic
        B = design.replications
        n = sample.n

        with timer.section('t0_computation'):
            original = statistic.compute(sample)
        t0 = original.estimate

        with timer.section('seeding'):
            children = trial_sequences(design.seed_sequence, B)

        estimates = np.empty(B, dtype=np.float64)
        statistics = np.empty(B, dtype=np.float64)
        indices = np.empty((B, n), dtype=np.int64) if design.return_indices else None

        def run_resample(b: int) -> None:
            rng = make_generator(children[b])
            idx = resample_indices(rng, n)
            if indices is not None:
                indices[b] = idx
            value = statistic.compute(sample.take(idx), center=t0)
            estimates[b] = value.estimate
            statistics[b] = value.t_stat

        with timer.section('bootstrap_replicates'):
            map_trials(run_resample, B, design.n_jobs)

        with timer.section('checks'):
            _check_finite(estimates, 'bootstrap estimate')
            _check_defined(statistics, 'bootstrap statistic')

        with timer.section('summary_statistics'):
            bias = float(np.mean(estimates) - t0)
            se = float(np.std(estimates, ddof=1))

        timer.stop()

        params = BootParams(
            t0=t0,
            statistic0=original.t_stat,
            std_error0=original.std_error,
            estimates=estimates,
            statistics=statistics,
            bias=bias,
            se=se,
            replications=B,
            indices=indices,
        )

        return Result(
            params=params,
            info={
                'n': n,
                'statistic': statistic.name,
                'entropy': design.seed_sequence.entropy,
                'n_jobs': design.n_jobs,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )


def _check_defined(values: NDArray[np.floating[Any]], what: str) -> None:
    """
    Fail the whole run if any trial produced an undefined (NaN) value.

    Infinite statistics are legitimate: a constant draw has zero standard
    error and its t-statistic is +-inf.
    """
    bad = np.flatnonzero(np.isnan(values))
    if bad.size:
        raise NumericalError(
            f"{bad.size} trial(s) produced an undefined (NaN) {what}; "
            f"first is trial {int(bad[0])}"
        )


def _check_finite(values: NDArray[np.floating[Any]], what: str) -> None:
    """Fail the whole run if any trial produced a non-finite value."""
    bad = np.flatnonzero(~np.isfinite(values))
    if bad.size:
        raise NumericalError(
            f"{bad.size} trial(s) produced a non-finite {what}; "
            f"first is trial {int(bad[0])}"
        )


def _run_info(design: MonteCarloDesign) -> dict[str, Any]:
    return {
        'n': design.sample_size,
        'dgp': design.dgp.label,
        'statistic': design.statistic.name,
        'bootstrap_replications': design.bootstrap_replications,
        'alpha': design.alpha,
        'entropy': design.seed_sequence.entropy,
        'n_jobs': design.n_jobs,
    }
