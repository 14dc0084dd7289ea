"""Tests for domain entities and value objects"""

import dataclasses

import pytest

from solver_gauge_core.domain.entities import (
    BenchmarkConfig,
    IterationResult,
    RunStatus,
    VehicleDetail,
)
from solver_gauge_core.domain.value_objects import (
    ConsistencyAssessment,
    ConsistencyTier,
    DirectSolution,
    ResolvedSolution,
    SolveHandle,
)


def _result(**overrides) -> IterationResult:
    fields = dict(
        index=1,
        primary_metric=20.0,
        raw_metric=1000,
        elapsed_seconds=3.5,
        score_label="0hard/-1000soft",
        completed_at_epoch_millis=1_700_000_000_000,
    )
    fields.update(overrides)
    return IterationResult(**fields)


class TestBenchmarkConfig:
    def test_construction(self):
        config = BenchmarkConfig(iteration_count=5, demo_data_id="SINGAPORE_WIDE")
        assert config.iteration_count == 5
        assert config.demo_data_id == "SINGAPORE_WIDE"

    def test_is_frozen(self):
        config = BenchmarkConfig(iteration_count=3, demo_data_id="SINGAPORE_EAST")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.iteration_count = 10

    @pytest.mark.parametrize("count", [0, -1])
    def test_rejects_non_positive_count(self, count):
        with pytest.raises(ValueError, match="positive"):
            BenchmarkConfig(iteration_count=count, demo_data_id="SINGAPORE_WIDE")

    @pytest.mark.parametrize("count", [2.5, "5", True])
    def test_rejects_non_integer_count(self, count):
        with pytest.raises(ValueError, match="integer"):
            BenchmarkConfig(iteration_count=count, demo_data_id="SINGAPORE_WIDE")

    def test_rejects_unknown_demo_data(self):
        with pytest.raises(ValueError, match="Unknown demo data"):
            BenchmarkConfig(iteration_count=3, demo_data_id="TOKYO")


class TestIterationResult:
    def test_defaults(self):
        result = _result()
        assert result.vehicle_details == ()
        assert result.vehicle_count == 0
        assert result.visit_count == 0
        assert result.enrichment_available is False
        assert result.resolution == "direct"

    def test_with_vehicle_details(self):
        detail = VehicleDetail(
            vehicle_id="1",
            driving_time_seconds=600,
            total_demand=7,
            capacity=10,
            visit_count=3,
        )
        result = _result(vehicle_details=(detail,), vehicle_count=1, visit_count=3)
        assert result.vehicle_details[0].vehicle_id == "1"
        assert result.vehicle_count == 1

    def test_rejects_zero_index(self):
        with pytest.raises(ValueError, match="index"):
            _result(index=0)

    def test_rejects_negative_metric(self):
        with pytest.raises(ValueError, match="primary_metric"):
            _result(primary_metric=-1.0)

    def test_rejects_negative_elapsed(self):
        with pytest.raises(ValueError, match="elapsed_seconds"):
            _result(elapsed_seconds=-0.1)

    def test_zero_metric_allowed(self):
        assert _result(primary_metric=0.0, raw_metric=0).primary_metric == 0.0


class TestRunStatus:
    def test_values(self):
        assert {s.value for s in RunStatus} == {
            "idle", "running", "completed", "stopped", "failed",
        }


class TestValueObjects:
    def test_solve_outcomes_are_distinct(self):
        direct = DirectSolution(solution={"vehicles": []})
        handle = SolveHandle(job_id="abc")
        assert isinstance(direct, DirectSolution)
        assert not isinstance(handle, DirectSolution)
        assert handle.job_id == "abc"

    def test_resolved_solution_defaults(self):
        resolved = ResolvedSolution(solution={})
        assert resolved.enrichment is None
        assert resolved.enrichment_available is False
        assert resolved.resolution == "direct"

    @pytest.mark.parametrize("tier,ready", [
        (ConsistencyTier.ACCEPTABLE, True),
        (ConsistencyTier.MODERATE_VARIANCE, False),
        (ConsistencyTier.HIGH_VARIANCE, False),
    ])
    def test_production_ready(self, tier, ready):
        assessment = ConsistencyAssessment(tier=tier, title="t", message="m", std_dev_percent=1.0)
        assert assessment.production_ready is ready
