"""
Aggregation and reporting of Monte Carlo results.

Usage:
    from pysimstudy.summary import CriticalValueRule, summarize, run_size_study

    rates = summarize(mc, [CriticalValueRule.exact("t"),
                           CriticalValueRule.asymptotic()])

    table = run_size_study([5, 10, 50, 500], 2000, reg_dgp,
                           StatisticConfig.ols_test(null_value=1.0), seed=1)
    print(table.summary())
"""

from pysimstudy.summary.rules import CriticalValueRule
from pysimstudy.summary.solution import SummaryRow, SummaryTable
from pysimstudy.summary.solvers import (
    default_rules,
    run_size_study,
    summarize,
    summarize_grid,
)

__all__ = [
    "CriticalValueRule",
    "SummaryRow",
    "SummaryTable",
    "default_rules",
    "run_size_study",
    "summarize",
    "summarize_grid",
]
