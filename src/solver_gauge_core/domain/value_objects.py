"""
Domain Value Objects

Defines immutable data structures representing solve outcomes, run statistics
and the consistency assessment.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

# Route plan JSON as returned by the solver service
FullSolution = dict[str, Any]


@dataclass(frozen=True)
class DirectSolution:
    """The solve call already carried the finished solution"""
    solution: FullSolution


@dataclass(frozen=True)
class SolveHandle:
    """The solve call returned a job id that must be polled"""
    job_id: str


SolveOutcome = Union[DirectSolution, SolveHandle]


@dataclass(frozen=True)
class ResolvedSolution:
    """A finished solution together with its optional enrichment payload"""
    solution: FullSolution
    enrichment: dict[str, Any] | None = None
    enrichment_available: bool = False
    resolution: str = "direct"  # direct / polled


@dataclass(frozen=True)
class RunningStatistics:
    """Statistics over the full primary metric series"""
    count: int
    best: float
    worst: float
    mean: float
    std_dev: float
    std_dev_percent: float


@dataclass(frozen=True)
class IterationDelta:
    """Per-iteration comparison against the previous and the best result"""
    index: int
    vs_previous: float | None
    vs_best: float
    trend: str  # best / improved / regressed / steady


class ConsistencyTier(str, Enum):
    """Policy bands for run-to-run variance"""
    HIGH_VARIANCE = "high_variance"
    MODERATE_VARIANCE = "moderate_variance"
    ACCEPTABLE = "acceptable"


@dataclass(frozen=True)
class ConsistencyAssessment:
    """Consistency tier with its display text"""
    tier: ConsistencyTier
    title: str
    message: str
    std_dev_percent: float

    @property
    def production_ready(self) -> bool:
        return self.tier is ConsistencyTier.ACCEPTABLE
