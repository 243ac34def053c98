"""
Linear algebra kernels for PySimStudy.

All functions follow these conventions:
    - NumPy/SciPy (LAPACK under the hood)
    - Each operation returns a structured result dataclass
    - Errors are raised immediately with clear messages

Submodules:
    normal_equations: Cholesky solve of X'X b = X'y
"""

from pysimstudy.core.compute.linalg.normal_equations import (
    NormalEquationsResult,
    normal_equations_solve,
)

__all__ = [
    "NormalEquationsResult",
    "normal_equations_solve",
]
