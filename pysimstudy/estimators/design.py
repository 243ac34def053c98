"""
Statistic configurations.

StatisticConfig names what is computed from each sample: a mean-test
t-statistic, an OLS coefficient t-statistic, or a user-supplied black-box
statistic (for example a two-step selection estimator). Immutable and
validated at construction.
"""

from __future__ import annotations

import enum
import numbers
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray

from pysimstudy.core.exceptions import InvalidParameterError, ValidationError
from pysimstudy.core.validation import check_count, check_finite_scalar, check_positive
from pysimstudy.dgp.sample import Sample
from pysimstudy.estimators._common import StatisticValue
from pysimstudy.estimators._mean import mean_t, mean_t_batch
from pysimstudy.estimators._ols import ols_t


class StatisticKind(enum.Enum):
    """Supported statistic families."""
    MEAN_T = "mean_t"
    OLS_T = "ols_t"
    CUSTOM = "custom"


_VARIANCE_ALIASES = {
    "homoskedastic": "homoskedastic",
    "classical": "homoskedastic",
    "hc0": "hc0",
    "hc1": "hc1",
    "robust": "hc1",
}


@dataclass(frozen=True)
class StatisticConfig:
    """
    Frozen statistic configuration.

    Attributes:
        kind: Statistic family.
        null_value: Hypothesized parameter value under H0.
        coef_index: Coefficient tested (OLS only).
        variance: "homoskedastic", "hc0" or "hc1" (OLS only).
        func: Custom statistic ``func(sample, center)`` (CUSTOM only).
        name: Display name.
        reference_df: For CUSTOM, exact reference degrees of freedom as a
            number or a callable of the sample size; None if no exact
            reference distribution exists.
    """
    kind: StatisticKind
    null_value: float = 0.0
    coef_index: int = 1
    variance: str = "homoskedastic"
    func: Callable | None = None
    name: str = "mean_t"
    reference_df: Any = None

    @classmethod
    def mean_test(cls, null_value: float = 0.0) -> StatisticConfig:
        """t-statistic for H0: E[y] = null_value."""
        return cls(
            kind=StatisticKind.MEAN_T,
            null_value=check_finite_scalar(null_value, 'null_value'),
            name="mean_t",
        )

    @classmethod
    def ols_test(
        cls,
        coef_index: int = 1,
        null_value: float = 0.0,
        variance: str = "homoskedastic",
    ) -> StatisticConfig:
        """
        t-statistic for H0: beta[coef_index] = null_value.

        Args:
            coef_index: Column of the design matrix tested (0 = intercept).
            null_value: Hypothesized coefficient.
            variance: "homoskedastic" (alias "classical"), "hc0", or
                "hc1" (alias "robust").
        """
        check_count(coef_index, 0, 'coef_index')
        try:
            var_type = _VARIANCE_ALIASES[variance]
        except KeyError:
            raise InvalidParameterError(
                f"variance must be one of {sorted(_VARIANCE_ALIASES)}, got {variance!r}",
                parameter='variance', value=variance,
            ) from None
        return cls(
            kind=StatisticKind.OLS_T,
            null_value=check_finite_scalar(null_value, 'null_value'),
            coef_index=int(coef_index),
            variance=var_type,
            name=f"ols_t[{coef_index}]/{var_type}",
        )

    @classmethod
    def custom(
        cls,
        func: Callable,
        null_value: float = 0.0,
        *,
        name: str = "custom",
        reference_df: Any = None,
    ) -> StatisticConfig:
        """
        Wrap a black-box statistic.

        ``func(sample, center)`` must return a StatisticValue, an
        ``(estimate, t_stat)`` pair, or a scalar used as both.
        ``reference_df`` is a positive number, or a callable of the sample
        size returning one.

        Raises:
            InvalidParameterError: func is not callable, or reference_df is
                not a positive finite number.
        """
        if not callable(func):
            raise InvalidParameterError(
                f"func must be callable, got {type(func).__name__}",
                parameter='func', value=func,
            )
        if reference_df is not None and not callable(reference_df):
            reference_df = check_positive(reference_df, 'reference_df')
        return cls(
            kind=StatisticKind.CUSTOM,
            null_value=check_finite_scalar(null_value, 'null_value'),
            func=func,
            name=name,
            reference_df=reference_df,
        )

    @property
    def supports_batch(self) -> bool:
        """True if row-wise vectorized evaluation is available."""
        return self.kind is StatisticKind.MEAN_T

    def compute(self, sample: Sample, center: float | None = None) -> StatisticValue:
        """
        Evaluate the statistic on one sample.

        Args:
            sample: The data.
            center: Value the t-statistic is centered at. Defaults to
                ``null_value``; the bootstrap passes the original estimate.

        Raises:
            InvalidParameterError: Sample too small for the statistic.
            SingularDesignError: OLS design cannot be inverted.
            ValidationError: OLS requested on a sample without X.
        """
        c = self.null_value if center is None else center

        if self.kind is StatisticKind.MEAN_T:
            return mean_t(sample.y, c)

        if self.kind is StatisticKind.OLS_T:
            if sample.X is None:
                raise ValidationError("OLS statistic requires a sample with a design matrix X")
            p = sample.X.shape[1]
            if self.coef_index >= p:
                raise InvalidParameterError(
                    f"coef_index={self.coef_index} out of range for p={p} regressors",
                    parameter='coef_index', value=self.coef_index,
                )
            return ols_t(sample.X, sample.y, self.coef_index, c, self.variance)

        return self._compute_custom(sample, c)

    def compute_batch(
        self,
        Y: NDArray[np.floating[Any]],
        center: float | NDArray[np.floating[Any]] | None = None,
    ) -> tuple[NDArray, NDArray, NDArray]:
        """
        Row-wise evaluation on a (m, n) matrix of univariate samples.

        Returns:
            (estimates, std_errors, t_stats), each of shape (m,).

        Raises:
            ValueError: If the statistic has no vectorized form.
        """
        if not self.supports_batch:
            raise ValueError(f"statistic {self.name!r} has no vectorized form")
        c = self.null_value if center is None else center
        return mean_t_batch(Y, c)

    def reference_df_for(self, n: int, p: int = 0) -> float | None:
        """
        Degrees of freedom of the exact reference t distribution.

        Args:
            n: Sample size.
            p: Columns of the design matrix (OLS only).
        """
        if self.kind is StatisticKind.MEAN_T:
            return float(n - 1)
        if self.kind is StatisticKind.OLS_T:
            return float(n - p)
        if self.reference_df is None:
            return None
        if callable(self.reference_df):
            return check_positive(self.reference_df(n), 'reference_df')
        return self.reference_df

    def _compute_custom(self, sample: Sample, center: float) -> StatisticValue:
        out = self.func(sample, center)
        if isinstance(out, StatisticValue):
            return out
        if isinstance(out, numbers.Real) or np.ndim(out) == 0:
            value = float(out)
            return StatisticValue(
                estimate=value,
                std_error=np.nan,
                t_stat=value,
                df=self._custom_df(sample),
            )
        estimate, t_stat = out
        return StatisticValue(
            estimate=float(estimate),
            std_error=np.nan,
            t_stat=float(t_stat),
            df=self._custom_df(sample),
        )

    def _custom_df(self, sample: Sample) -> float | None:
        p = 0 if sample.X is None else sample.X.shape[1]
        return self.reference_df_for(sample.n, p)
