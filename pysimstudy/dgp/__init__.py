"""
Data-generating processes.

Provides the univariate distribution families used for Monte Carlo
samples and the linear regression DGP.

Usage:
    from pysimstudy.dgp import DGPConfig, RegressionDGP

    dgp = DGPConfig.student_t(df=3)
    sample = dgp.sample(20, rng)

    reg = RegressionDGP.build(
        regressor=DGPConfig.pareto(shape=1.5),
        error=DGPConfig.normal(),
        coefficients=(1.0, 0.5),
    )
"""

from pysimstudy.dgp.design import DGPConfig, DGPKind, RegressionDGP
from pysimstudy.dgp.sample import Sample

__all__ = [
    "DGPConfig",
    "DGPKind",
    "RegressionDGP",
    "Sample",
]
