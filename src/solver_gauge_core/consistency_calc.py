"""
Run Consistency Metrics Calculation

Computes best/worst/mean/standard deviation over the iteration series,
per-iteration deltas against the previous and the best result, and the
consistency tier of a finished run.
"""

import math
from collections.abc import Sequence

from solver_gauge_core.domain.constants import (
    BEST_TOLERANCE,
    HIGH_VARIANCE_THRESHOLD,
    IMPROVEMENT_THRESHOLD,
    MODERATE_VARIANCE_THRESHOLD,
    REGRESSION_THRESHOLD,
)
from solver_gauge_core.domain.value_objects import (
    ConsistencyAssessment,
    ConsistencyTier,
    IterationDelta,
    RunningStatistics,
)


def population_std_dev(values: Sequence[float]) -> float:
    """
    Population standard deviation (divides by n, not n - 1)

    Args:
        values: Non-empty list of values

    Returns:
        Standard deviation
    """
    mean = sum(values) / len(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def compute_statistics(metrics: Sequence[float]) -> RunningStatistics:
    """
    Recompute run statistics from the full metric series

    Args:
        metrics: Primary metrics in iteration order (at least one)

    Returns:
        RunningStatistics

    Raises:
        ValueError: If metrics is empty
    """
    if not metrics:
        raise ValueError("At least one result is required to compute statistics")

    n = len(metrics)
    mean = sum(metrics) / n
    std_dev = population_std_dev(metrics)
    std_dev_percent = 100 * std_dev / mean if mean > 0 else 0.0

    return RunningStatistics(
        count=n,
        best=min(metrics),
        worst=max(metrics),
        mean=mean,
        std_dev=std_dev,
        std_dev_percent=std_dev_percent,
    )


def delta_vs_previous(metrics: Sequence[float], index: int) -> float | None:
    """
    Percentage change of a result against the one before it

    Args:
        metrics: Primary metrics in iteration order
        index: 1-based iteration index

    Returns:
        Change in %, or None for the first iteration (or a zero predecessor)
    """
    if index <= 1:
        return None
    previous = metrics[index - 2]
    if previous == 0:
        return None
    return 100 * (metrics[index - 1] - previous) / previous


def delta_vs_best(metrics: Sequence[float], index: int) -> float:
    """
    Percentage distance of a result from the best result

    Args:
        metrics: Primary metrics in iteration order
        index: 1-based iteration index

    Returns:
        Distance in % (0 for the best result itself, and when best is 0)
    """
    best = min(metrics)
    if best == 0:
        return 0.0
    return 100 * (metrics[index - 1] - best) / best


def _trend(value: float, best: float, vs_previous: float | None) -> str:
    if abs(value - best) < BEST_TOLERANCE:
        return "best"
    if vs_previous is not None and vs_previous < IMPROVEMENT_THRESHOLD:
        return "improved"
    if vs_previous is not None and vs_previous > REGRESSION_THRESHOLD:
        return "regressed"
    return "steady"


def iteration_deltas(metrics: Sequence[float]) -> list[IterationDelta]:
    """
    Deltas for every iteration, computed on demand for display

    Args:
        metrics: Primary metrics in iteration order

    Returns:
        One IterationDelta per metric (empty for an empty series)
    """
    if not metrics:
        return []

    best = min(metrics)
    deltas = []
    for index, value in enumerate(metrics, start=1):
        vs_previous = delta_vs_previous(metrics, index)
        deltas.append(IterationDelta(
            index=index,
            vs_previous=vs_previous,
            vs_best=delta_vs_best(metrics, index),
            trend=_trend(value, best, vs_previous),
        ))
    return deltas


def classify_consistency(std_dev_percent: float) -> ConsistencyAssessment:
    """
    Classify overall run variance into a consistency tier

    > 15%: high variance, (10%, 15%]: moderate variance, <= 10%: acceptable.

    Args:
        std_dev_percent: Standard deviation as a percentage of the mean

    Returns:
        ConsistencyAssessment
    """
    if std_dev_percent > HIGH_VARIANCE_THRESHOLD:
        return ConsistencyAssessment(
            tier=ConsistencyTier.HIGH_VARIANCE,
            title="HIGH VARIANCE - PRODUCTION RISK",
            message="High variance indicates algorithmic instability. "
                    "Fix solver configuration before production.",
            std_dev_percent=std_dev_percent,
        )
    if std_dev_percent > MODERATE_VARIANCE_THRESHOLD:
        return ConsistencyAssessment(
            tier=ConsistencyTier.MODERATE_VARIANCE,
            title="MODERATE VARIANCE - NEEDS TUNING",
            message="Variance is borderline. Consider tuning solver configuration "
                    "for better consistency.",
            std_dev_percent=std_dev_percent,
        )
    return ConsistencyAssessment(
        tier=ConsistencyTier.ACCEPTABLE,
        title="EXCELLENT CONSISTENCY",
        message="Your solver shows excellent consistency suitable for production use.",
        std_dev_percent=std_dev_percent,
    )


def format_driving_time(seconds: float) -> str:
    """Format a driving time as 'Xh Ym', rounded to the nearest minute"""
    total_minutes = math.floor(seconds / 60 + 0.5)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"
