"""
Aggregation of collected Monte Carlo sequences.

summarize() reduces one statistic sequence to rejection rates, one per
critical-value rule. summarize_grid() and run_size_study() build a table
over a grid of configurations. All functions are pure: they read the
collected sequences and return fresh report structures.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Mapping, Sequence

import numpy as np
from numpy.typing import ArrayLike

from pysimstudy.core.compute.rng import root_sequence, trial_sequences
from pysimstudy.core.exceptions import (
    InsufficientReplicationsError,
    ValidationError,
)
from pysimstudy.core.validation import check_1d, check_array
from pysimstudy.estimators import StatisticConfig
from pysimstudy.montecarlo import MonteCarloSolution, run_monte_carlo
from pysimstudy.montecarlo.design import DGP
from pysimstudy.summary.rules import CriticalValueRule
from pysimstudy.summary.solution import SummaryRow, SummaryTable


def default_rules(solution: MonteCarloSolution | None = None) -> list[CriticalValueRule]:
    """
    Rules applied when none are given.

    Exact t (if the run has a reference distribution), asymptotic normal,
    and bootstrap (if the run carries bootstrap critical values).
    """
    rules = []
    if solution is None or solution.reference_df is not None:
        rules.append(CriticalValueRule.exact("t"))
    rules.append(CriticalValueRule.asymptotic())
    if solution is not None and solution.bootstrap_critical_values is not None:
        rules.append(CriticalValueRule.bootstrap(solution.alpha))
    return rules


def summarize(
    values: MonteCarloSolution | ArrayLike,
    critical_value_rules: CriticalValueRule | Iterable[CriticalValueRule] | None = None,
) -> dict[str, float]:
    """
    Empirical rejection rate of each critical-value rule.

    Args:
        values: A MonteCarloSolution, or a 1D array of statistics.
        critical_value_rules: One rule or several. None applies
            default_rules().

    Returns:
        Rule name -> share of trials in the rejection region, in [0, 1].

    Raises:
        InsufficientReplicationsError: Empty sequence.
        ValidationError: Duplicate rule names; a bootstrap rule without
            per-trial critical values or at a different level; an exact
            rule with no degrees of freedom available.

    Example:
        >>> summarize(mc, [CriticalValueRule.exact("t"),
        ...                CriticalValueRule.asymptotic()])
        {'exact_t': 0.0495, 'asymptotic': 0.0655}
    """
    solution = values if isinstance(values, MonteCarloSolution) else None
    if solution is not None:
        statistics = solution.statistics
        reference_df = solution.reference_df
    else:
        statistics = check_array(values, 'values')
        check_1d(statistics, 'values')
        reference_df = None

    if statistics.shape[0] == 0:
        raise InsufficientReplicationsError(
            "cannot summarize an empty statistic sequence",
            replications=0, minimum=1,
        )

    if critical_value_rules is None:
        rules = default_rules(solution)
    elif isinstance(critical_value_rules, CriticalValueRule):
        rules = [critical_value_rules]
    else:
        rules = list(critical_value_rules)

    names = [rule.name for rule in rules]
    if len(set(names)) != len(names):
        raise ValidationError(f"duplicate rule names: {names}")

    rates: dict[str, float] = {}
    for rule in rules:
        if rule.kind == "bootstrap":
            critical = _bootstrap_critical_values(solution, rule)
        else:
            critical = rule.critical_value(reference_df)
        # NaN statistics never reject
        rates[rule.name] = float(np.mean(rule.rejections(statistics, critical)))
    return rates


def summarize_grid(
    results: Mapping[Hashable, MonteCarloSolution],
    critical_value_rules: Iterable[CriticalValueRule] | None = None,
) -> SummaryTable:
    """
    Summary table over a grid of configurations.

    Args:
        results: Configuration label -> completed Monte Carlo run. Rows
            keep the mapping's order.
        critical_value_rules: Rules applied to every run. None applies
            default_rules() per run.

    Returns:
        SummaryTable
    """
    rules = None if critical_value_rules is None else list(critical_value_rules)
    rows: dict[Hashable, SummaryRow] = {}
    for label, solution in results.items():
        if not isinstance(solution, MonteCarloSolution):
            raise ValidationError(
                f"results[{label!r}] must be a MonteCarloSolution, "
                f"got {type(solution).__name__}"
            )
        rows[label] = _row(label, solution, rules)
    return SummaryTable(rows=rows)


def run_size_study(
    sample_sizes: Sequence[int],
    replications: int,
    dgp_config: DGP,
    statistic_config: StatisticConfig,
    critical_value_rules: Iterable[CriticalValueRule] | None = None,
    seed: int | np.random.SeedSequence | None = None,
    **kwargs: Any,
) -> SummaryTable:
    """
    Monte Carlo over a grid of sample sizes, summarized into one table.

    Each sample size gets its own child of SeedSequence(seed), so a fixed
    seed reproduces the whole table.

    Args:
        sample_sizes: Grid of n values; each becomes a row label.
        replications: Trials per sample size.
        dgp_config: DGP shared by all rows.
        statistic_config: Statistic shared by all rows.
        critical_value_rules: Rules to apply (None: default_rules()).
        seed: Top-level seed.
        **kwargs: Passed through to run_monte_carlo (n_jobs, backend,
            bootstrap_replications, alpha).

    Returns:
        SummaryTable keyed by sample size.
    """
    sizes = list(sample_sizes)
    if not sizes:
        raise ValidationError("sample_sizes must not be empty")
    if len(set(sizes)) != len(sizes):
        raise ValidationError(f"duplicate sample sizes: {sizes}")

    children = trial_sequences(root_sequence(seed), len(sizes))
    results = {
        n: run_monte_carlo(
            n, replications, dgp_config, statistic_config, child, **kwargs
        )
        for n, child in zip(sizes, children)
    }
    return summarize_grid(results, critical_value_rules)


def _bootstrap_critical_values(
    solution: MonteCarloSolution | None,
    rule: CriticalValueRule,
) -> np.ndarray:
    if solution is None or solution.bootstrap_critical_values is None:
        raise ValidationError(
            f"rule {rule.name!r} needs per-trial bootstrap critical values; "
            f"run run_monte_carlo(..., bootstrap_replications=B)"
        )
    if not np.isclose(rule.alpha, solution.alpha):
        raise ValidationError(
            f"rule {rule.name!r} has alpha={rule.alpha:g} but the nested "
            f"bootstrap ran at alpha={solution.alpha:g}"
        )
    return solution.bootstrap_critical_values


def _row(
    label: Hashable,
    solution: MonteCarloSolution,
    rules: list[CriticalValueRule] | None,
) -> SummaryRow:
    estimates = solution.estimates
    statistics = solution.statistics
    ddof = 1 if solution.replications > 1 else 0
    return SummaryRow(
        label=label,
        sample_size=solution.sample_size,
        replications=solution.replications,
        rates=summarize(solution, rules),
        mean_estimate=float(np.mean(estimates)),
        sd_estimate=float(np.std(estimates, ddof=ddof)),
        mean_statistic=float(np.mean(statistics)),
        sd_statistic=float(np.std(statistics, ddof=ddof)),
    )
