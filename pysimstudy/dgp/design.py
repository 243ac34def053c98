"""
Data-generating process configurations.

DGPConfig is a tagged variant: a DGPKind plus a typed parameter payload.
The draw kernel is resolved once when the config is built. RegressionDGP
combines a regressor distribution, an error distribution and a
coefficient vector into y = X beta + u. Both are immutable and validated
at construction.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

import numpy as np
from numpy.typing import NDArray

from pysimstudy.core.exceptions import InvalidParameterError
from pysimstudy.core.validation import (
    check_count,
    check_finite_scalar,
    check_positive,
)
from pysimstudy.dgp import _families as fam
from pysimstudy.dgp.sample import Sample


class DGPKind(enum.Enum):
    """Supported distribution families."""
    NORMAL = "normal"
    STUDENT_T = "student_t"
    CHI_SQUARE = "chi_square"
    PARETO = "pareto"


# kind -> (draw, mean, variance, label)
_KERNELS: dict[DGPKind, tuple[Callable, Callable, Callable, Callable]] = {
    DGPKind.NORMAL: (fam.draw_normal, fam.mean_normal, fam.var_normal, fam.label_normal),
    DGPKind.STUDENT_T: (fam.draw_student_t, fam.mean_student_t, fam.var_student_t, fam.label_student_t),
    DGPKind.CHI_SQUARE: (fam.draw_chi_square, fam.mean_chi_square, fam.var_chi_square, fam.label_chi_square),
    DGPKind.PARETO: (fam.draw_pareto, fam.mean_pareto, fam.var_pareto, fam.label_pareto),
}


@dataclass(frozen=True)
class DGPConfig:
    """
    Frozen univariate distribution configuration.

    Build through the classmethod constructors; they validate parameters
    and bind the draw kernel.

    Attributes:
        kind: Distribution family.
        params: Family-specific parameter payload.
    """
    kind: DGPKind
    params: Any
    _draw: Callable = field(repr=False, compare=False)

    @classmethod
    def _build(cls, kind: DGPKind, params: Any) -> DGPConfig:
        return cls(kind=kind, params=params, _draw=_KERNELS[kind][0])

    @classmethod
    def normal(cls, mean: float = 0.0, sd: float = 1.0) -> DGPConfig:
        """Normal(mean, sd^2)."""
        return cls._build(DGPKind.NORMAL, fam.NormalParams(
            mean=check_finite_scalar(mean, 'mean'),
            sd=check_positive(sd, 'sd'),
        ))

    @classmethod
    def student_t(cls, df: float, loc: float = 0.0) -> DGPConfig:
        """Student-t with df degrees of freedom, shifted by loc. df=1 is Cauchy."""
        return cls._build(DGPKind.STUDENT_T, fam.StudentTParams(
            df=check_positive(df, 'df'),
            loc=check_finite_scalar(loc, 'loc'),
        ))

    @classmethod
    def cauchy(cls) -> DGPConfig:
        """Standard Cauchy, i.e. Student-t with one degree of freedom."""
        return cls.student_t(1.0)

    @classmethod
    def chi_square(cls, df: float, center: bool = False) -> DGPConfig:
        """Chi-square(df); ``center=True`` subtracts df so the mean is zero."""
        return cls._build(DGPKind.CHI_SQUARE, fam.ChiSquareParams(
            df=check_positive(df, 'df'),
            center=bool(center),
        ))

    @classmethod
    def pareto(cls, shape: float, scale: float = 1.0) -> DGPConfig:
        """
        Classical Pareto on [scale, inf) with tail index ``shape``.

        For 1 < shape <= 2 the mean is finite and the variance infinite,
        the heavy-tailed regressor case.
        """
        return cls._build(DGPKind.PARETO, fam.ParetoParams(
            shape=check_positive(shape, 'shape'),
            scale=check_positive(scale, 'scale'),
        ))

    def draw(self, n: int, rng: np.random.Generator) -> NDArray[np.floating[Any]]:
        """Draw n independent observations from this distribution."""
        check_count(n, 1, 'n')
        return np.asarray(self._draw(self.params, n, rng), dtype=np.float64)

    def sample(self, n: int, rng: np.random.Generator) -> Sample:
        """Draw a univariate Sample of size n."""
        return Sample.frozen(self.draw(n, rng))

    @property
    def mean(self) -> float:
        """Population mean (nan if undefined, inf if infinite)."""
        return _KERNELS[self.kind][1](self.params)

    @property
    def variance(self) -> float:
        """Population variance (nan if undefined, inf if infinite)."""
        return _KERNELS[self.kind][2](self.params)

    @property
    def label(self) -> str:
        return _KERNELS[self.kind][3](self.params)

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class RegressionDGP:
    """
    Linear regression data-generating process.

    y = X @ coefficients + u, where X = [1, x_1, ..., x_{p-1}], each x_j
    drawn iid from ``regressor`` and u iid from ``error``. With
    ``heteroskedastic=True`` the error of observation i is scaled by
    |x_{i,1}|.

    Attributes:
        regressor: Distribution of the stochastic regressors.
        error: Distribution of the errors.
        coefficients: (intercept, slope_1, ...); its length sets p.
        heteroskedastic: Scale errors by the first regressor.
    """
    regressor: DGPConfig
    error: DGPConfig
    coefficients: tuple[float, ...]
    heteroskedastic: bool = False

    @classmethod
    def build(
        cls,
        regressor: DGPConfig,
        error: DGPConfig,
        coefficients: Sequence[float] = (1.0, 1.0),
        *,
        heteroskedastic: bool = False,
    ) -> RegressionDGP:
        """
        Create a validated regression DGP.

        Raises:
            InvalidParameterError: If coefficients are empty or non-finite,
                or heteroskedastic errors are requested without a regressor.
        """
        if not isinstance(regressor, DGPConfig) or not isinstance(error, DGPConfig):
            raise InvalidParameterError(
                "regressor and error must be DGPConfig instances",
                parameter='regressor',
            )
        coefs = tuple(
            check_finite_scalar(c, f'coefficients[{i}]')
            for i, c in enumerate(coefficients)
        )
        if len(coefs) == 0:
            raise InvalidParameterError(
                "coefficients must contain at least the intercept",
                parameter='coefficients', value=coefficients,
            )
        if heteroskedastic and len(coefs) < 2:
            raise InvalidParameterError(
                "heteroskedastic errors need at least one stochastic regressor",
                parameter='heteroskedastic', value=heteroskedastic,
            )
        return cls(
            regressor=regressor,
            error=error,
            coefficients=coefs,
            heteroskedastic=bool(heteroskedastic),
        )

    @property
    def p(self) -> int:
        """Number of columns of the design matrix, intercept included."""
        return len(self.coefficients)

    def sample(self, n: int, rng: np.random.Generator) -> Sample:
        """
        Draw one regression sample of size n.

        Regressor columns are drawn first, then the errors, all from ``rng``.
        """
        check_count(n, 1, 'n')
        p = self.p
        X = np.empty((n, p), dtype=np.float64)
        X[:, 0] = 1.0
        for j in range(1, p):
            X[:, j] = self.regressor.draw(n, rng)
        u = self.error.draw(n, rng)
        if self.heteroskedastic:
            u *= np.abs(X[:, 1])
        y = X @ np.asarray(self.coefficients, dtype=np.float64) + u
        return Sample.frozen(y, X)

    @property
    def label(self) -> str:
        het = ", heteroskedastic" if self.heteroskedastic else ""
        return f"y = Xb + u; x ~ {self.regressor.label}, u ~ {self.error.label}{het}"

    def __str__(self) -> str:
        return self.label
