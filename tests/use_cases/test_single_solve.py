"""
Tests for use_cases/single_solve.py
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from solver_gauge_core.domain.exceptions import DispatchFailed
from solver_gauge_core.use_cases.polling import CancellationToken
from solver_gauge_core.use_cases.single_solve import cancel_solve, solve_once

PROBLEM = {"vehicles": [], "visits": []}
DONE = {"solverStatus": "NOT_SOLVING", "totalDrivingTimeSeconds": 3600, "vehicles": []}


def _client(plans) -> MagicMock:
    client = MagicMock()
    client.start_solve = AsyncMock(return_value="job-1")
    client.fetch_route_plan = AsyncMock(side_effect=plans)
    client.fetch_enrichment = AsyncMock(return_value={"routes": []})
    client.cancel = AsyncMock()
    return client


class TestSolveOnce:
    @pytest.mark.asyncio
    async def test_solves_and_waits(self):
        client = _client([{"solverStatus": "SOLVING_ACTIVE"}, DONE])
        ticks = []

        result = await solve_once(client, PROBLEM, poll_interval_seconds=0, on_tick=ticks.append)

        client.start_solve.assert_awaited_once_with(PROBLEM)
        assert result.job_id == "job-1"
        assert result.cancelled is False
        assert result.resolved.solution == DONE
        assert result.resolved.resolution == "polled"
        assert result.elapsed_seconds >= 0
        assert len(ticks) == 1
        client.cancel.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancelled_solve_is_terminated(self):
        client = _client([DONE])
        token = CancellationToken()
        token.cancel()

        result = await solve_once(client, PROBLEM, token=token, poll_interval_seconds=0)

        assert result.cancelled is True
        assert result.resolved is None
        client.cancel.assert_awaited_once_with("job-1")
        client.fetch_route_plan.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_start_failure_propagates(self):
        client = _client([DONE])
        client.start_solve = AsyncMock(side_effect=DispatchFailed("Start solving failed: HTTP 500"))

        with pytest.raises(DispatchFailed, match="Start solving failed"):
            await solve_once(client, PROBLEM, poll_interval_seconds=0)
        client.fetch_route_plan.assert_not_awaited()


class TestCancelSolve:
    @pytest.mark.asyncio
    async def test_delegates_to_client(self):
        client = _client([])
        await cancel_solve(client, "job-9")
        client.cancel.assert_awaited_once_with("job-9")
