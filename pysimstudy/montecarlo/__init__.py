"""
PySimStudy Monte Carlo and bootstrap drivers.

Usage:
    from pysimstudy.montecarlo import run_monte_carlo, run_bootstrap

    # Monte Carlo
    mc = run_monte_carlo(20, 2000, DGPConfig.normal(),
                         StatisticConfig.mean_test(), seed=42)

    # Monte Carlo with a 199-resample bootstrap inside every trial
    mc = run_monte_carlo(20, 2000, DGPConfig.chi_square(3, center=True),
                         StatisticConfig.mean_test(), seed=42,
                         bootstrap_replications=199)

    # Bootstrap of one sample
    bs = run_bootstrap(data, 999, StatisticConfig.mean_test(), seed=42)
    bs.conf_int(("perc", "stud"))
"""

from pysimstudy.montecarlo.design import BootstrapDesign, MonteCarloDesign
from pysimstudy.montecarlo.solution import BootstrapSolution, MonteCarloSolution
from pysimstudy.montecarlo.solvers import run_bootstrap, run_monte_carlo

__all__ = [
    "run_monte_carlo",
    "run_bootstrap",
    "MonteCarloDesign",
    "BootstrapDesign",
    "MonteCarloSolution",
    "BootstrapSolution",
]
