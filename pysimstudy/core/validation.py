"""
Input validation utilities for PySimStudy.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import math
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pysimstudy.core.exceptions import (
    DimensionError,
    InsufficientReplicationsError,
    InvalidParameterError,
    ValidationError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that result in object dtype (indicating mixed types or
    non-numeric data) and non-numeric dtypes.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples.

    Raises:
        ValidationError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


def check_positive(value: float, name: str) -> float:
    """
    Verify a scalar parameter is finite and strictly positive.

    Returns:
        The value as a float

    Raises:
        InvalidParameterError: If value is non-positive, NaN or infinite
    """
    try:
        fvalue = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(
            f"{name}: expected a positive number, got {value!r}",
            parameter=name, value=value,
        ) from e
    if not math.isfinite(fvalue) or fvalue <= 0.0:
        raise InvalidParameterError(
            f"{name}: must be positive and finite, got {value!r}",
            parameter=name, value=value,
        )
    return fvalue


def check_finite_scalar(value: float, name: str) -> float:
    """Verify a scalar parameter is a finite number."""
    try:
        fvalue = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(
            f"{name}: expected a number, got {value!r}",
            parameter=name, value=value,
        ) from e
    if not math.isfinite(fvalue):
        raise InvalidParameterError(
            f"{name}: must be finite, got {value!r}",
            parameter=name, value=value,
        )
    return fvalue


def check_count(value: int, minimum: int, name: str) -> int:
    """
    Verify an integer count (sample size, worker count) is at least minimum.

    Raises:
        InvalidParameterError: If value is not an integer or is too small
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(
            f"{name}: expected an integer, got {type(value).__name__}",
            parameter=name, value=value,
        )
    if value < minimum:
        raise InvalidParameterError(
            f"{name}: must be >= {minimum}, got {value}",
            parameter=name, value=value,
        )
    return int(value)


def check_replications(value: int, minimum: int, name: str) -> int:
    """
    Verify a replication count is an integer of at least minimum.

    Raises:
        InsufficientReplicationsError: If value is below minimum
        InvalidParameterError: If value is not an integer
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(
            f"{name}: expected an integer, got {type(value).__name__}",
            parameter=name, value=value,
        )
    if value < minimum:
        raise InsufficientReplicationsError(
            f"{name}: requires at least {minimum} replications, got {value}",
            replications=int(value), minimum=minimum,
        )
    return int(value)


def check_probability(value: float, name: str) -> float:
    """
    Verify a level (alpha, confidence) lies strictly inside (0, 1).

    Raises:
        InvalidParameterError: If value is outside (0, 1)
    """
    fvalue = check_finite_scalar(value, name)
    if not 0.0 < fvalue < 1.0:
        raise InvalidParameterError(
            f"{name}: must be in (0, 1), got {value!r}",
            parameter=name, value=value,
        )
    return fvalue


def check_alternative(value: str) -> str:
    """Verify the alternative hypothesis label."""
    if value not in ("two.sided", "less", "greater"):
        raise InvalidParameterError(
            f"alternative must be 'two.sided', 'less', or 'greater', got {value!r}",
            parameter="alternative", value=value,
        )
    return value
