"""
Core infrastructure for PySimStudy.

This module provides shared abstractions and utilities used by all
domain-specific submodules (dgp, estimators, montecarlo, summary).

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, random streams, worker pool, linear algebra
"""

from pysimstudy.core.result import Result
from pysimstudy.core.exceptions import (
    PySimStudyError,
    ValidationError,
    DimensionError,
    InvalidParameterError,
    InsufficientReplicationsError,
    NumericalError,
    SingularMatrixError,
    SingularDesignError,
    ResamplingFault,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PySimStudyError",
    "ValidationError",
    "DimensionError",
    "InvalidParameterError",
    "InsufficientReplicationsError",
    "NumericalError",
    "SingularMatrixError",
    "SingularDesignError",
    "ResamplingFault",
]
