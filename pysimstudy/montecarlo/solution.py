"""
Solution wrappers for Monte Carlo and bootstrap results.

MonteCarloSolution and BootstrapSolution wrap Result[P] and provide
convenient accessors and text summaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pysimstudy.core.result import Result
from pysimstudy.core.validation import check_alternative, check_probability
from pysimstudy.montecarlo._ci import compute_ci
from pysimstudy.montecarlo._common import BootParams, MonteCarloParams
from pysimstudy.montecarlo._resample import bootstrap_critical_value

if TYPE_CHECKING:
    from pysimstudy.montecarlo.design import BootstrapDesign, MonteCarloDesign


@dataclass
class MonteCarloSolution:
    """
    User-facing Monte Carlo results.

    Holds the collected statistic sequence in trial order; apply
    critical-value rules with ``pysimstudy.summary.summarize``.
    """
    _result: Result[MonteCarloParams]
    _design: 'MonteCarloDesign'

    # --- Collected sequences ---

    @property
    def statistics(self) -> NDArray[np.floating[Any]]:
        """Test statistic of each trial, shape (R,)."""
        return self._result.params.statistics

    @property
    def estimates(self) -> NDArray[np.floating[Any]]:
        """Point estimate of each trial, shape (R,)."""
        return self._result.params.estimates

    @property
    def bootstrap_critical_values(self) -> NDArray[np.floating[Any]] | None:
        """Per-trial bootstrap critical values, or None."""
        return self._result.params.bootstrap_critical_values

    @property
    def reference_df(self) -> float | None:
        """Degrees of freedom of the exact reference t distribution."""
        return self._result.params.reference_df

    @property
    def sample_size(self) -> int:
        return self._result.params.sample_size

    @property
    def replications(self) -> int:
        return self._result.params.replications

    # --- Metadata ---

    @property
    def seed(self) -> int | None:
        """Seed supplied by the caller."""
        return self._design.seed

    @property
    def entropy(self) -> int:
        """Entropy that reproduces the run, also when seed was None."""
        return self._design.entropy

    @property
    def alpha(self) -> float:
        """Level used for the nested bootstrap critical values."""
        return self._design.alpha

    @property
    def design(self) -> 'MonteCarloDesign':
        return self._design

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # --- Display ---

    def summary(self) -> str:
        """
        Text summary of the collected sequence.

        Produces:
            MONTE CARLO EXPERIMENT

            DGP: N(0, 1)   statistic: mean_t   n = 20   R = 2000
            ...
        """
        t = self.statistics
        b = self.estimates
        lines = [
            "\nMONTE CARLO EXPERIMENT\n",
            f"DGP: {self.info['dgp']}   statistic: {self.info['statistic']}   "
            f"n = {self.sample_size}   R = {self.replications}",
        ]
        if self.bootstrap_critical_values is not None:
            lines.append(
                f"Nested bootstrap: B = {self.info['bootstrap_replications']}, "
                f"alpha = {self.alpha:g}"
            )
        lines.append("")
        lines.append(f"{'':>12s} {'mean':>12s} {'std. dev':>12s}")
        lines.append(f"{'estimate':>12s} {np.mean(b):12.5f} {np.std(b, ddof=1):12.5f}")
        lines.append(f"{'statistic':>12s} {np.mean(t):12.5f} {np.std(t, ddof=1):12.5f}")
        if self.timing is not None:
            lines.append("")
            lines.append(f"Elapsed: {self.timing['total_seconds']:.3f}s ({self.backend_name})")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"MonteCarloSolution(n={self.sample_size}, R={self.replications}, "
            f"backend={self.backend_name!r})"
        )


@dataclass
class BootstrapSolution:
    """
    User-facing bootstrap results.

    t0, bias and SE as in R's boot object, plus the resample t-statistics
    (centered at t0) for bootstrap critical values and bootstrap-t
    intervals.
    """
    _result: Result[BootParams]
    _design: 'BootstrapDesign'

    # --- Core fields ---

    @property
    def t0(self) -> float:
        """Estimate on the original sample."""
        return self._result.params.t0

    @property
    def statistic0(self) -> float:
        """t-statistic of the original sample against the null value."""
        return self._result.params.statistic0

    @property
    def std_error0(self) -> float:
        """Standard error on the original sample."""
        return self._result.params.std_error0

    @property
    def estimates(self) -> NDArray[np.floating[Any]]:
        """Resample estimates, shape (B,)."""
        return self._result.params.estimates

    @property
    def statistics(self) -> NDArray[np.floating[Any]]:
        """Resample t-statistics centered at t0, shape (B,)."""
        return self._result.params.statistics

    @property
    def R(self) -> int:
        """Number of bootstrap replicates."""
        return self._result.params.replications

    @property
    def bias(self) -> float:
        """Bootstrap bias estimate: mean(estimates) - t0."""
        return self._result.params.bias

    @property
    def se(self) -> float:
        """Bootstrap standard error: sd(estimates)."""
        return self._result.params.se

    @property
    def indices(self) -> NDArray[np.integer[Any]] | None:
        """(B, n) resample indices, if requested."""
        return self._result.params.indices

    # --- Inference ---

    def critical_value(self, alpha: float = 0.05, alternative: str = "two.sided") -> float:
        """
        Bootstrap critical value for the t-statistic.

        two.sided uses the ceil((B+1)(1-alpha))-th order statistic of |t*|.
        The value is a magnitude c for every alternative, matching
        ``CriticalValueRule.critical_value``: ``less`` rejects when t < -c.
        """
        check_probability(alpha, 'alpha')
        check_alternative(alternative)
        return bootstrap_critical_value(self.statistics, alpha, alternative)

    def reject(self, alpha: float = 0.05, alternative: str = "two.sided") -> bool:
        """Bootstrap decision rule for H0 at level alpha."""
        c = self.critical_value(alpha, alternative)
        if alternative == "two.sided":
            return bool(abs(self.statistic0) > c)
        if alternative == "greater":
            return bool(self.statistic0 > c)
        return bool(self.statistic0 < -c)

    def conf_int(
        self,
        types: tuple[str, ...] | list[str] = ("perc",),
        conf_level: float = 0.95,
    ) -> dict[str, tuple[float, float]]:
        """
        Bootstrap confidence intervals.

        Args:
            types: Any of "normal", "basic", "perc", "stud".
            conf_level: Confidence level.
        """
        check_probability(conf_level, 'conf_level')
        if isinstance(types, str):
            types = (types,)
        return compute_ci(self._result.params, types, conf_level)

    # --- Metadata ---

    @property
    def sample(self):
        """Original sample."""
        return self._design.sample

    @property
    def seed(self) -> int | None:
        return self._design.seed

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # --- Display ---

    def summary(self) -> str:
        """
        R-style print.boot output.

        Produces:
            ORDINARY NONPARAMETRIC BOOTSTRAP

            Bootstrap Statistics :
                    original       bias    std. error
                t1*  5.12345    0.01234     0.56789
        """
        lines = [
            "\nORDINARY NONPARAMETRIC BOOTSTRAP\n",
            f"Statistic: {self.info['statistic']}   n = {self.info['n']}   R = {self.R}",
            "",
            "Bootstrap Statistics :",
            f"{'':>8s} {'original':>14s} {'bias':>14s} {'std. error':>14s}",
            f"{'t1*':>8s} {self.t0:14.5f} {self.bias:14.5f} {self.se:14.5f}",
            "",
            f"t-statistic: {self.statistic0:.5f}   "
            f"5% bootstrap critical value: {self.critical_value(0.05):.5f}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"BootstrapSolution(R={self.R}, t0={self.t0:.4g}, "
            f"backend={self.backend_name!r})"
        )
