"""
Descriptive statistics over rate values.

The confidence interval uses a small Student's t table keyed by degrees of
freedom. It is good enough for display; it is not an exact t lookup for every
sample size.
"""

import math
from typing import Iterable, Optional, Sequence

from trafficstats.schemas import StatSummary


# Two-sided 95% t values by degrees of freedom (n - 1).
T_TABLE = [
    (1, 12.71),
    (2, 4.30),
    (3, 3.18),
    (4, 2.78),
    (5, 2.57),
    (6, 2.45),
    (7, 2.36),
    (8, 2.31),
    (9, 2.26),
    (14, 2.13),
    (19, 2.09),
    (29, 2.04),
]
T_ASYMPTOTIC = 1.96


def t_value(df: int) -> float:
    """First table entry whose key is >= df, else the normal value."""
    for key, value in T_TABLE:
        if df <= key:
            return value
    return T_ASYMPTOTIC


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Linear interpolation between order statistics.

    `sorted_values` must already be sorted ascending and non-empty.
    """
    if not sorted_values:
        raise ValueError("percentile of an empty sequence")
    if not 0 <= p <= 100:
        raise ValueError(f"percentile must be within [0, 100], got {p}")

    idx = (p / 100) * (len(sorted_values) - 1)
    lower = math.floor(idx)
    upper = math.ceil(idx)
    if lower == upper:
        return sorted_values[lower]
    return sorted_values[lower] + (sorted_values[upper] - sorted_values[lower]) * (idx - lower)


def summarize(values: Iterable[float]) -> Optional[StatSummary]:
    """
    Summarize a collection of rate values.

    Returns None for an empty collection; callers must show that as
    "no data", never as zero.
    """
    values = list(values)
    n = len(values)
    if n == 0:
        return None

    ordered = sorted(values)
    mean = sum(values) / n

    if n == 1:
        stddev = ci = 0.0
    else:
        variance = sum((v - mean) ** 2 for v in values) / (n - 1)
        stddev = math.sqrt(variance)
        ci = t_value(n - 1) * stddev / math.sqrt(n)

    return StatSummary(
        n=n,
        mean=mean,
        stddev=stddev,
        ci=ci,
        min=ordered[0],
        max=ordered[-1],
        p50=percentile(ordered, 50),
        p95=percentile(ordered, 95),
        p99=percentile(ordered, 99),
    )
