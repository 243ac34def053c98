"""
Ordered map over independent trials.

Trials are embarrassingly parallel: each one reads only immutable
configuration and its own random stream. ``map_trials`` returns a freshly
allocated list in trial order, whatever the degree of parallelism.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar

T = TypeVar('T')


def map_trials(
    func: Callable[[int], T],
    n_trials: int,
    n_jobs: int = 1,
) -> list[T]:
    """
    Evaluate ``func(r)`` for r in 0..n_trials-1.

    Args:
        func: Trial function, called with the trial index.
        n_trials: Number of trials.
        n_jobs: Worker threads. 1 runs inline in the calling thread.

    Returns:
        Results in trial order.

    Raises:
        Whatever the first failing trial (in trial order) raised. Trials
        not yet started are cancelled and running ones are awaited before
        the exception leaves this function.
    """
    if n_jobs <= 1 or n_trials <= 1:
        return [func(r) for r in range(n_trials)]

    executor = ThreadPoolExecutor(max_workers=n_jobs)
    try:
        futures = [executor.submit(func, r) for r in range(n_trials)]
        results = [future.result() for future in futures]
    except BaseException:
        executor.shutdown(wait=True, cancel_futures=True)
        raise
    executor.shutdown(wait=True)
    return results
