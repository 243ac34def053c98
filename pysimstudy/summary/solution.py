"""
Summary table types.

A SummaryTable maps configuration labels (typically sample sizes) to a
SummaryRow of empirical rejection rates and dispersion measures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable


@dataclass(frozen=True)
class SummaryRow:
    """
    One configuration of a Monte Carlo grid.

    - rates: rule name -> empirical rejection rate in [0, 1]
    - mean_estimate / sd_estimate: dispersion of the point estimates
    - mean_statistic / sd_statistic: dispersion of the test statistics
    """
    label: Hashable
    sample_size: int
    replications: int
    rates: dict[str, float]
    mean_estimate: float
    sd_estimate: float
    mean_statistic: float
    sd_statistic: float

    def to_dict(self) -> dict[str, Any]:
        return {
            'sample_size': self.sample_size,
            'replications': self.replications,
            'rates': dict(self.rates),
            'mean_estimate': self.mean_estimate,
            'sd_estimate': self.sd_estimate,
            'mean_statistic': self.mean_statistic,
            'sd_statistic': self.sd_statistic,
        }


@dataclass(frozen=True)
class SummaryTable:
    """Ordered collection of SummaryRows keyed by configuration label."""
    rows: dict[Hashable, SummaryRow] = field(default_factory=dict)

    @property
    def rule_names(self) -> list[str]:
        names: list[str] = []
        for row in self.rows.values():
            for name in row.rates:
                if name not in names:
                    names.append(name)
        return names

    def rate(self, label: Hashable, rule: str) -> float:
        """Rejection rate of ``rule`` at configuration ``label``."""
        return self.rows[label].rates[rule]

    def rates(self, rule: str) -> dict[Hashable, float]:
        """Rejection rate of ``rule`` across all configurations."""
        return {label: row.rates[rule] for label, row in self.rows.items()}

    def to_dict(self) -> dict[Hashable, dict[str, Any]]:
        return {label: row.to_dict() for label, row in self.rows.items()}

    def summary(self) -> str:
        """
        Fixed-width text table.

        Produces:
                   n       R   exact_t  asymptotic    sd(est)
                   5    2000    0.0505      0.1210    0.52311
        """
        names = self.rule_names
        header = f"{'config':>10s} {'n':>7s} {'R':>7s}"
        for name in names:
            header += f" {name:>12s}"
        header += f" {'sd(est)':>10s}"
        lines = [header]
        for label, row in self.rows.items():
            line = f"{str(label):>10s} {row.sample_size:7d} {row.replications:7d}"
            for name in names:
                rate = row.rates.get(name)
                line += f" {rate:12.4f}" if rate is not None else f" {'':>12s}"
            line += f" {row.sd_estimate:10.5f}"
            lines.append(line)
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def __getitem__(self, label: Hashable) -> SummaryRow:
        return self.rows[label]
