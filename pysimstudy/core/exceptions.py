"""
Exception hierarchy for PySimStudy.

All user-facing exceptions inherit from PySimStudyError to allow catching
any library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Configuration errors are never retried
    - Internal faults (bugs in a driver) stay outside the hierarchy
"""

from typing import Any


class PySimStudyError(Exception):
    """Base exception for all PySimStudy errors."""
    pass


class ValidationError(PySimStudyError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class InvalidParameterError(ValidationError):
    """
    A distributional or configuration parameter is out of range.

    Raised for non-positive degrees of freedom, shape or scale, for
    sample sizes too small for the requested statistic, and similar.

    Attributes:
        parameter: Name of the offending parameter
        value: The rejected value
    """

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        value: Any = None,
    ):
        super().__init__(message)
        self.parameter = parameter
        self.value = value


class InsufficientReplicationsError(ValidationError):
    """
    Replication count too small for the requested computation.

    Attributes:
        replications: The replication count that was supplied
        minimum: The smallest acceptable count
    """

    def __init__(
        self,
        message: str,
        replications: int | None = None,
        minimum: int | None = None,
    ):
        super().__init__(message)
        self.replications = replications
        self.minimum = minimum


class NumericalError(PySimStudyError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when a matrix operation requires invertibility but the matrix
    is singular or numerically rank-deficient.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (typically min(n, p))
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class SingularDesignError(SingularMatrixError):
    """
    Regression design matrix cannot be inverted.

    Typically caused by a sample size that is too small relative to the
    number of regressors, or by a degenerate regressor draw.

    Attributes:
        n_observations: Rows of the design matrix
        n_regressors: Columns of the design matrix
    """

    def __init__(
        self,
        message: str,
        n_observations: int | None = None,
        n_regressors: int | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
    ):
        super().__init__(
            message,
            matrix_name="X'X",
            condition_number=condition_number,
            rank=rank,
            expected_rank=n_regressors,
        )
        self.n_observations = n_observations
        self.n_regressors = n_regressors


class ResamplingFault(RuntimeError):
    """
    Internal invariant violated by the resampling index generator.

    Not a subclass of PySimStudyError: this signals a bug in the driver,
    not a configuration problem, and must not be caught alongside
    user-facing errors.

    Attributes:
        n: Size of the source sample
        bad_indices: Offending index values (possibly truncated)
    """

    def __init__(self, message: str, n: int, bad_indices: Any = None):
        super().__init__(message)
        self.n = n
        self.bad_indices = bad_indices
