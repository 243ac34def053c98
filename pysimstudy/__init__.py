"""
PySimStudy: Monte Carlo and bootstrap studies of estimators and tests.

Draw synthetic samples from a data-generating process, compute a test
statistic on each, repeat, and summarize empirical size and power under
exact, asymptotic and bootstrap critical values.

Submodules:
    dgp: Distribution families and the regression DGP
    estimators: Mean-test and OLS t-statistics, custom statistics
    montecarlo: Monte Carlo and bootstrap drivers
    summary: Critical-value rules and summary tables
"""

__version__ = "0.1.0"

from pysimstudy import dgp
from pysimstudy import estimators
from pysimstudy import montecarlo
from pysimstudy import summary
from pysimstudy.dgp import DGPConfig, RegressionDGP, Sample
from pysimstudy.estimators import StatisticConfig
from pysimstudy.montecarlo import run_bootstrap, run_monte_carlo
from pysimstudy.summary import CriticalValueRule, summarize

__all__ = [
    "__version__",
    "dgp",
    "estimators",
    "montecarlo",
    "summary",
    "DGPConfig",
    "RegressionDGP",
    "Sample",
    "StatisticConfig",
    "CriticalValueRule",
    "run_monte_carlo",
    "run_bootstrap",
    "summarize",
]
