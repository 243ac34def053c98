"""
Least squares via the normal equations.

Solves (X'X) b = X'y with a Cholesky factorization of X'X. The inverse
of X'X is returned as well because every variance estimator downstream
(homoskedastic and sandwich) needs it.

A design is rejected as singular when n <= p, when X'X is not positive
definite, or when its condition number exceeds
SINGULAR_CONDITION_THRESHOLD. Returning NaN/Inf coefficients is never
an option.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import cho_factor, cho_solve

from pysimstudy.core.compute.tolerances import SINGULAR_CONDITION_THRESHOLD
from pysimstudy.core.exceptions import SingularDesignError


@dataclass(frozen=True)
class NormalEquationsResult:
    """
    Result of a normal-equations solve.

    Attributes:
        coefficients: Least squares coefficients (p,)
        xtx_inv: (X'X)^-1, shape (p, p)
        condition_number: cond(X'X) from its eigenvalues
    """
    coefficients: NDArray[np.floating[Any]]
    xtx_inv: NDArray[np.floating[Any]]
    condition_number: float


def normal_equations_solve(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
) -> NormalEquationsResult:
    """
    Solve min_b ||y - Xb||^2 through the normal equations.

    Args:
        X: Design matrix (n x p)
        y: Response vector (n,)

    Returns:
        NormalEquationsResult

    Raises:
        SingularDesignError: If n <= p or X'X is (numerically) singular
    """
    n, p = X.shape
    if n <= p:
        raise SingularDesignError(
            f"Design has n={n} observations for p={p} regressors; "
            f"at least p+1 observations are required.",
            n_observations=n,
            n_regressors=p,
        )

    XtX = X.T @ X
    Xty = X.T @ y

    eigvals = np.linalg.eigvalsh(XtX)
    lo, hi = float(eigvals[0]), float(eigvals[-1])
    if not np.isfinite(hi) or lo <= 0.0 or hi / lo > SINGULAR_CONDITION_THRESHOLD:
        cond = np.inf if lo <= 0.0 or not np.isfinite(hi) else hi / lo
        rank = int(np.sum(eigvals > eigvals[-1] * max(n, p) * np.finfo(X.dtype).eps))
        raise SingularDesignError(
            f"X'X is singular or ill-conditioned (cond={cond:.3g}, "
            f"rank={rank}, expected={p}).",
            n_observations=n,
            n_regressors=p,
            condition_number=cond,
            rank=rank,
        )

    try:
        factor = cho_factor(XtX, lower=True)
    except np.linalg.LinAlgError as e:
        raise SingularDesignError(
            f"Cholesky factorization of X'X failed: {e}",
            n_observations=n,
            n_regressors=p,
            condition_number=hi / lo,
        ) from e

    coefficients = cho_solve(factor, Xty)
    xtx_inv = cho_solve(factor, np.eye(p))

    return NormalEquationsResult(
        coefficients=coefficients,
        xtx_inv=xtx_inv,
        condition_number=hi / lo,
    )
