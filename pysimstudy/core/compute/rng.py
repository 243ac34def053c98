"""
Per-trial random streams.

Every trial owns an independent numpy Generator derived from a single
top-level SeedSequence and the trial index. Trials never share a mutable
generator, so results do not depend on which worker runs which trial or
in which order.
"""

from __future__ import annotations

import numpy as np


def root_sequence(seed: int | np.random.SeedSequence | None) -> np.random.SeedSequence:
    """
    Build the top-level SeedSequence for a run.

    Args:
        seed: Integer seed, an existing SeedSequence, or None for fresh
            OS entropy.

    Returns:
        SeedSequence whose ``entropy`` reproduces the run.
    """
    if isinstance(seed, np.random.SeedSequence):
        return seed
    return np.random.SeedSequence(seed)


def trial_sequences(
    root: np.random.SeedSequence,
    n_trials: int,
) -> list[np.random.SeedSequence]:
    """
    Child SeedSequence for each trial.

    Child r has spawn key ``root.spawn_key + (r,)``, the same child that
    ``root.spawn`` would hand out first, but ``root`` is left untouched:
    the same root always yields the same children, however often a
    design is solved.
    """
    return [
        np.random.SeedSequence(
            root.entropy,
            spawn_key=root.spawn_key + (r,),
            pool_size=root.pool_size,
        )
        for r in range(n_trials)
    ]


def make_generator(seq: np.random.SeedSequence) -> np.random.Generator:
    """Generator for a single trial."""
    return np.random.Generator(np.random.PCG64(seq))
