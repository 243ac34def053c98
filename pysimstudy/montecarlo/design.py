"""
Design classes for the Monte Carlo and bootstrap drivers.

MonteCarloDesign and BootstrapDesign encapsulate all inputs needed by
backends to run trials. Immutable, validated at construction. The
top-level SeedSequence is fixed here, so a design built with seed=None
still records the entropy that reproduces it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy.typing import ArrayLike

from pysimstudy.core.compute.rng import root_sequence
from pysimstudy.core.exceptions import InvalidParameterError, ValidationError
from pysimstudy.core.validation import (
    check_count,
    check_probability,
    check_replications,
)
from pysimstudy.dgp import DGPConfig, RegressionDGP, Sample
from pysimstudy.estimators import StatisticConfig, StatisticKind

DGP = Union[DGPConfig, RegressionDGP]

# Smallest replication count for which a bootstrap quantile means anything.
MIN_BOOTSTRAP_REPLICATIONS = 2


@dataclass(frozen=True)
class MonteCarloDesign:
    """
    Frozen design for a Monte Carlo experiment.

    Attributes:
        sample_size: Observations per trial.
        replications: Number of trials R.
        dgp: Data-generating process.
        statistic: Statistic computed on each sample.
        seed_sequence: Root of all per-trial random streams.
        seed: The seed as supplied by the caller (None for fresh entropy).
        bootstrap_replications: B for a nested bootstrap per trial, or None.
        alpha: Nominal level for the nested bootstrap critical value.
        n_jobs: Worker threads.
    """
    sample_size: int
    replications: int
    dgp: DGP
    statistic: StatisticConfig
    seed_sequence: np.random.SeedSequence
    seed: int | None
    bootstrap_replications: int | None
    alpha: float
    n_jobs: int

    @classmethod
    def for_experiment(
        cls,
        sample_size: int,
        replications: int,
        dgp: DGP,
        statistic: StatisticConfig,
        seed: int | np.random.SeedSequence | None = None,
        *,
        bootstrap_replications: int | None = None,
        alpha: float = 0.05,
        n_jobs: int = 1,
    ) -> MonteCarloDesign:
        """
        Create a Monte Carlo design with validation.

        Raises:
            InvalidParameterError: Bad sample size, worker count, alpha, a
                sample size too small for the statistic, or a custom
                reference_df that is not a positive number.
            InsufficientReplicationsError: R < 1 or B < 2.
            ValidationError: DGP and statistic do not fit together.
        """
        n = check_count(sample_size, 1, 'sample_size')
        R = check_replications(replications, 1, 'replications')
        jobs = check_count(n_jobs, 1, 'n_jobs')
        level = check_probability(alpha, 'alpha')

        B = None
        if bootstrap_replications is not None:
            B = check_replications(
                bootstrap_replications, MIN_BOOTSTRAP_REPLICATIONS,
                'bootstrap_replications',
            )

        if not isinstance(dgp, (DGPConfig, RegressionDGP)):
            raise ValidationError(
                f"dgp must be a DGPConfig or RegressionDGP, got {type(dgp).__name__}"
            )
        if not isinstance(statistic, StatisticConfig):
            raise ValidationError(
                f"statistic must be a StatisticConfig, got {type(statistic).__name__}"
            )
        _check_compatible(dgp, statistic, n)
        # A bad reference_df should fail before any trial runs
        statistic.reference_df_for(n, dgp.p if isinstance(dgp, RegressionDGP) else 0)

        return cls(
            sample_size=n,
            replications=R,
            dgp=dgp,
            statistic=statistic,
            seed_sequence=root_sequence(seed),
            seed=seed if isinstance(seed, (int, np.integer)) else None,
            bootstrap_replications=B,
            alpha=level,
            n_jobs=jobs,
        )

    @property
    def p(self) -> int:
        """Design matrix columns (0 for univariate DGPs)."""
        return self.dgp.p if isinstance(self.dgp, RegressionDGP) else 0

    @property
    def reference_df(self) -> float | None:
        return self.statistic.reference_df_for(self.sample_size, self.p)

    @property
    def entropy(self) -> int:
        """Entropy that reproduces this run via SeedSequence(entropy)."""
        return self.seed_sequence.entropy


@dataclass(frozen=True)
class BootstrapDesign:
    """
    Frozen design for a nonparametric bootstrap of one fixed sample.

    Attributes:
        sample: The realized sample that is resampled.
        replications: Number of resamples B.
        statistic: Statistic recomputed on each resample.
        seed_sequence: Root of the per-resample random streams.
        seed: The seed as supplied by the caller.
        n_jobs: Worker threads.
        return_indices: Keep the (B, n) index matrix in the result.
    """
    sample: Sample
    replications: int
    statistic: StatisticConfig
    seed_sequence: np.random.SeedSequence
    seed: int | None
    n_jobs: int
    return_indices: bool

    @classmethod
    def for_bootstrap(
        cls,
        sample: Sample | ArrayLike,
        replications: int,
        statistic: StatisticConfig,
        seed: int | np.random.SeedSequence | None = None,
        *,
        n_jobs: int = 1,
        return_indices: bool = False,
    ) -> BootstrapDesign:
        """
        Create a bootstrap design with validation.

        Args:
            sample: A Sample, or an array-like taken as univariate data.

        Raises:
            InsufficientReplicationsError: If replications < 2.
            ValidationError: Invalid data or statistic.
        """
        if not isinstance(sample, Sample):
            sample = Sample.from_arrays(sample)
        B = check_replications(
            replications, MIN_BOOTSTRAP_REPLICATIONS, 'replications',
        )
        jobs = check_count(n_jobs, 1, 'n_jobs')
        if not isinstance(statistic, StatisticConfig):
            raise ValidationError(
                f"statistic must be a StatisticConfig, got {type(statistic).__name__}"
            )
        if statistic.kind is StatisticKind.OLS_T and sample.X is None:
            raise ValidationError("OLS statistic requires a sample with a design matrix X")

        return cls(
            sample=sample,
            replications=B,
            statistic=statistic,
            seed_sequence=root_sequence(seed),
            seed=seed if isinstance(seed, (int, np.integer)) else None,
            n_jobs=jobs,
            return_indices=bool(return_indices),
        )


def _check_compatible(dgp: DGP, statistic: StatisticConfig, n: int) -> None:
    if statistic.kind is StatisticKind.OLS_T:
        if not isinstance(dgp, RegressionDGP):
            raise ValidationError(
                "OLS statistic requires a RegressionDGP, got a univariate DGPConfig"
            )
        if statistic.coef_index >= dgp.p:
            raise InvalidParameterError(
                f"coef_index={statistic.coef_index} out of range for p={dgp.p} regressors",
                parameter='coef_index', value=statistic.coef_index,
            )
    elif statistic.kind is StatisticKind.MEAN_T and n < 2:
        raise InvalidParameterError(
            f"mean test requires sample_size >= 2, got {n}",
            parameter='sample_size', value=n,
        )
