"""
Shared compute infrastructure for PySimStudy.

This module provides timing utilities, per-trial random streams, the
ordered worker-pool map and linear algebra kernels shared by the DGP,
estimator and driver modules.

Submodules:
    timing: Execution timing utilities
    rng: SeedSequence-derived per-trial generators
    parallel: Ordered map over independent trials
    tolerances: Numerical thresholds
    linalg: Linear algebra kernels
"""

from pysimstudy.core.compute.timing import Timer
from pysimstudy.core.compute.rng import make_generator, root_sequence, trial_sequences
from pysimstudy.core.compute.parallel import map_trials

__all__ = [
    # Timing
    "Timer",
    # Random streams
    "make_generator",
    "root_sequence",
    "trial_sequences",
    # Workers
    "map_trials",
]
