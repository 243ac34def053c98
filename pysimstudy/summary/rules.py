"""
Critical-value rules.

A rule turns a collected statistic sequence into rejection decisions:
an exact quantile of a named reference distribution, the asymptotic
standard normal quantile, or the per-trial bootstrap critical values of
a Monte Carlo run with a nested bootstrap. Rules are applied post hoc to
the same collected sequence; nothing is recomputed per trial.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pysimstudy.core.exceptions import InvalidParameterError, ValidationError
from pysimstudy.core.validation import (
    check_alternative,
    check_positive,
    check_probability,
)

_DISTRIBUTIONS = ("t", "normal", "chi2")


@dataclass(frozen=True)
class CriticalValueRule:
    """
    Frozen critical-value rule.

    Attributes:
        kind: "exact", "asymptotic" or "bootstrap".
        name: Label used as key in summaries.
        alpha: Nominal level.
        alternative: "two.sided", "less" or "greater".
        distribution: Reference distribution for exact rules.
        df: Degrees of freedom; None means "take it from the run".
    """
    kind: str
    name: str
    alpha: float = 0.05
    alternative: str = "two.sided"
    distribution: str = "normal"
    df: float | None = None

    @classmethod
    def exact(
        cls,
        distribution: str = "t",
        df: float | None = None,
        alpha: float = 0.05,
        alternative: str = "two.sided",
        *,
        name: str | None = None,
    ) -> CriticalValueRule:
        """
        Quantile of a named finite-sample reference distribution.

        Args:
            distribution: "t", "normal" or "chi2" (chi2 is upper-tail only).
            df: Degrees of freedom. None uses the run's reference_df.
        """
        if distribution not in _DISTRIBUTIONS:
            raise InvalidParameterError(
                f"distribution must be one of {_DISTRIBUTIONS}, got {distribution!r}",
                parameter='distribution', value=distribution,
            )
        if df is not None:
            df = check_positive(df, 'df')
        if distribution == "chi2":
            alternative = "greater"
        return cls(
            kind="exact",
            name=name or f"exact_{distribution}",
            alpha=check_probability(alpha, 'alpha'),
            alternative=check_alternative(alternative),
            distribution=distribution,
            df=df,
        )

    @classmethod
    def asymptotic(
        cls,
        alpha: float = 0.05,
        alternative: str = "two.sided",
        *,
        name: str | None = None,
    ) -> CriticalValueRule:
        """Standard normal quantile."""
        return cls(
            kind="asymptotic",
            name=name or "asymptotic",
            alpha=check_probability(alpha, 'alpha'),
            alternative=check_alternative(alternative),
            distribution="normal",
        )

    @classmethod
    def bootstrap(
        cls,
        alpha: float = 0.05,
        *,
        name: str | None = None,
    ) -> CriticalValueRule:
        """
        Per-trial bootstrap critical values (two-sided).

        alpha must equal the level the nested bootstrap was run at.
        """
        return cls(
            kind="bootstrap",
            name=name or "bootstrap",
            alpha=check_probability(alpha, 'alpha'),
            alternative="two.sided",
            distribution="bootstrap",
        )

    def critical_value(self, reference_df: float | None = None) -> float:
        """
        Scalar critical value of an exact or asymptotic rule.

        For two-sided rules the value c rejects when |t| > c; for one-sided
        rules c is the upper-tail quantile (``less`` rejects when t < -c).

        Raises:
            ValidationError: Exact t/chi2 rule with no degrees of freedom,
                or a bootstrap rule (which has no scalar value).
        """
        if self.kind == "bootstrap":
            raise ValidationError(
                "bootstrap rule has per-trial critical values, not a scalar"
            )
        q = 1.0 - self.alpha / 2.0 if self.alternative == "two.sided" else 1.0 - self.alpha
        if self.distribution == "normal":
            return float(sp_stats.norm.ppf(q))

        df = self.df if self.df is not None else reference_df
        if df is None:
            raise ValidationError(
                f"rule {self.name!r} needs degrees of freedom: pass df= or "
                f"summarize a run whose statistic has an exact reference distribution"
            )
        if self.distribution == "t":
            return float(sp_stats.t.ppf(q, df))
        return float(sp_stats.chi2.ppf(1.0 - self.alpha, df))

    def rejections(
        self,
        statistics: NDArray[np.floating[Any]],
        critical: float | NDArray[np.floating[Any]],
    ) -> NDArray[np.bool_]:
        """Per-trial rejection indicators."""
        if self.alternative == "two.sided":
            return np.abs(statistics) > critical
        if self.alternative == "greater":
            return statistics > critical
        return statistics < -critical
