"""
Numerical thresholds shared by the estimators.

A design whose X'X condition number exceeds SINGULAR_CONDITION_THRESHOLD
is treated as singular: at that point a Cholesky solve still "succeeds"
but the coefficient of interest carries no reliable digits.
"""

# cond(X'X) above this is treated as a singular design.
SINGULAR_CONDITION_THRESHOLD = 1e12
