"""
Statistics and estimators evaluated on each simulated sample.

Usage:
    from pysimstudy.estimators import StatisticConfig

    stat = StatisticConfig.mean_test(null_value=0.0)
    value = stat.compute(sample)
    value.t_stat

    ols = StatisticConfig.ols_test(coef_index=1, variance="robust")
"""

from pysimstudy.estimators._common import StatisticValue
from pysimstudy.estimators.design import StatisticConfig, StatisticKind

__all__ = [
    "StatisticConfig",
    "StatisticKind",
    "StatisticValue",
]
