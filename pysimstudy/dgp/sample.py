"""
Sample container shared by the DGPs, estimators and drivers.

A Sample is immutable once generated: its arrays are flagged read-only,
and resampling produces a new Sample instead of editing one in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pysimstudy.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_min_samples,
)


@dataclass(frozen=True)
class Sample:
    """
    One realized dataset.

    Attributes:
        y: Observations or regression response, shape (n,).
        X: Optional design matrix, shape (n, p). None for univariate samples.
    """
    y: NDArray[np.floating[Any]]
    X: NDArray[np.floating[Any]] | None = None

    @classmethod
    def from_arrays(cls, y: ArrayLike, X: ArrayLike | None = None) -> Sample:
        """
        Build a validated Sample from array-likes.

        Copies the inputs so later edits by the caller cannot leak in.

        Raises:
            ValidationError: If data are non-numeric, non-finite or empty
            DimensionError: If shapes are wrong or inconsistent
        """
        y_arr = check_array(y, 'y').astype(np.float64, copy=True)
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()
        check_1d(y_arr, 'y')
        check_finite(y_arr, 'y')
        check_min_samples(y_arr, 1, 'y')

        X_arr = None
        if X is not None:
            X_arr = check_array(X, 'X').astype(np.float64, copy=True)
            if X_arr.ndim == 1:
                X_arr = X_arr.reshape(-1, 1)
            check_2d(X_arr, 'X')
            check_finite(X_arr, 'X')
            check_consistent_length(X_arr, y_arr, names=('X', 'y'))

        return cls.frozen(y_arr, X_arr)

    @classmethod
    def frozen(
        cls,
        y: NDArray[np.floating[Any]],
        X: NDArray[np.floating[Any]] | None = None,
    ) -> Sample:
        """Wrap already-validated arrays, marking them read-only."""
        y.setflags(write=False)
        if X is not None:
            X.setflags(write=False)
        return cls(y=y, X=X)

    @property
    def n(self) -> int:
        """Number of observations."""
        return self.y.shape[0]

    @property
    def has_design(self) -> bool:
        return self.X is not None

    def take(self, indices: NDArray[np.integer[Any]]) -> Sample:
        """Row subset (with repetition) of this sample."""
        X = None if self.X is None else self.X[indices]
        return Sample.frozen(self.y[indices], X)

    def __len__(self) -> int:
        return self.n
