"""
Result Archive

Append-only store of iteration results together with the full solution
payloads needed to re-visualize any past iteration.
"""

import json
from collections.abc import Iterator
from dataclasses import asdict, dataclass
from typing import Any

import pandas as pd

from solver_gauge_core.consistency_calc import iteration_deltas
from solver_gauge_core.domain.entities import IterationResult
from solver_gauge_core.domain.value_objects import FullSolution


@dataclass(frozen=True)
class ArchiveEntry:
    """One archived iteration"""
    result: IterationResult
    solution: FullSolution
    enrichment: dict[str, Any] | None = None


class ResultArchive:
    """Ordered, append-only archive of (IterationResult, FullSolution) pairs"""

    def __init__(self) -> None:
        self._entries: list[ArchiveEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ArchiveEntry]:
        return iter(tuple(self._entries))

    def append(
        self,
        result: IterationResult,
        solution: FullSolution,
        enrichment: dict[str, Any] | None = None,
    ) -> ArchiveEntry:
        """
        Append the next iteration

        Args:
            result: Iteration result; its index must follow the last archived one
            solution: Full solution payload of the iteration
            enrichment: Optional visualization payload

        Returns:
            The archived entry

        Raises:
            ValueError: If result.index is out of order
        """
        expected = len(self._entries) + 1
        if result.index != expected:
            raise ValueError(f"Expected iteration {expected}, got {result.index}")
        entry = ArchiveEntry(result=result, solution=solution, enrichment=enrichment)
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> tuple[ArchiveEntry, ...]:
        return tuple(self._entries)

    @property
    def results(self) -> tuple[IterationResult, ...]:
        return tuple(e.result for e in self._entries)

    def primary_metrics(self) -> list[float]:
        return [e.result.primary_metric for e in self._entries]

    def entry(self, index: int) -> ArchiveEntry:
        """
        Look up an archived iteration for replay

        Args:
            index: 1-based iteration index

        Raises:
            IndexError: If no such iteration was archived
        """
        if not 1 <= index <= len(self._entries):
            raise IndexError(f"Iteration {index} is not in the archive")
        return self._entries[index - 1]

    def to_dataframe(self) -> pd.DataFrame:
        """Tabulate the archive, one row per iteration, with display deltas"""
        deltas = iteration_deltas(self.primary_metrics())
        rows = []
        for entry, delta in zip(self._entries, deltas):
            r = entry.result
            rows.append({
                "iteration": r.index,
                "distance_km": r.primary_metric,
                "total_driving_time_seconds": r.raw_metric,
                "elapsed_seconds": r.elapsed_seconds,
                "score": r.score_label,
                "completed_at_epoch_millis": r.completed_at_epoch_millis,
                "vehicle_count": r.vehicle_count,
                "visit_count": r.visit_count,
                "enrichment_available": r.enrichment_available,
                "resolution": r.resolution,
                "vs_previous_pct": delta.vs_previous,
                "vs_best_pct": delta.vs_best,
                "trend": delta.trend,
                "vehicle_details": json.dumps(
                    [asdict(v) for v in r.vehicle_details], ensure_ascii=False
                ),
            })
        return pd.DataFrame(rows)
