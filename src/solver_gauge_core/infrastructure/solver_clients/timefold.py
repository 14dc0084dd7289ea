"""
Timefold-style REST solver client
"""

import logging
from typing import Any

import httpx

from solver_gauge_core.domain.exceptions import (
    DispatchFailed,
    EnrichmentUnavailable,
    PollFailed,
    SetupFailed,
    UnexpectedResponseShape,
)
from solver_gauge_core.domain.value_objects import FullSolution, SolveOutcome
from solver_gauge_core.infrastructure.solver_clients.base import (
    RetryMixin,
    SolverClient,
    classify_solve_response,
)

logger = logging.getLogger(__name__)


def describe_http_error(exc: Exception) -> str:
    """
    Extract the most useful diagnostic text from a failed request.

    Prefers the JSON ``detail`` field of the error body, then the raw body,
    then the status code, then the exception text.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("detail"):
            return str(payload["detail"])
        if response.text:
            return response.text
        return f"HTTP {response.status_code}"
    return str(exc) or exc.__class__.__name__


def _status_code(exc: Exception) -> int | None:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


class TimefoldRestClient(RetryMixin, SolverClient):
    """Client for a Timefold vehicle-routing REST service"""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float | None = 120.0,
        max_retries: int = 3,
        retry_delay_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            base_url: Root URL of the solver service (e.g. http://localhost:8080)
            timeout_seconds: Per-request timeout (None disables it)
            max_retries: Attempts for idempotent setup reads (default: 3)
            retry_delay_seconds: Base backoff delay (default: 1.0)
            transport: Optional httpx transport (used for testing)
        """
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_seconds),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def load_demo_data(self, demo_data_id: str) -> FullSolution:
        """
        Fetch a demo problem instance

        Args:
            demo_data_id: Demo data name (e.g. SINGAPORE_WIDE)

        Returns:
            FullSolution: The unsolved route plan

        Raises:
            SetupFailed: If the demo data cannot be loaded after all retries
        """
        async def _call():
            response = await self.client.get(f"/demo-data/{demo_data_id}")
            response.raise_for_status()
            return response.json()

        try:
            data = await self._with_retry(
                _call,
                retryable_exceptions=(httpx.TransportError, httpx.HTTPStatusError),
            )
        except (httpx.HTTPError, ValueError) as e:
            raise SetupFailed(
                f"Failed to load demo data {demo_data_id}: {describe_http_error(e)}"
            ) from e

        if not isinstance(data, dict):
            raise SetupFailed(f"Demo data {demo_data_id} is not a route plan")
        logger.info("Loaded demo data %s", demo_data_id)
        return data

    async def submit(self, problem: FullSolution) -> SolveOutcome:
        """
        Submit a solve with a fresh random seed

        Args:
            problem: Route plan to solve

        Returns:
            DirectSolution or SolveHandle

        Raises:
            DispatchFailed: If the request fails
            UnexpectedResponseShape: If the response cannot be classified
        """
        try:
            response = await self.client.post("/route-plans-fresh", json=problem)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise DispatchFailed(
                f"Failed to start solve: {describe_http_error(e)}",
                status_code=_status_code(e),
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise UnexpectedResponseShape(
                "Unexpected response format from solve request: body is not JSON",
                status_code=response.status_code,
            ) from e
        return classify_solve_response(data)

    async def fetch_route_plan(self, job_id: str) -> FullSolution:
        """
        Query the route plan of a solve job

        Raises:
            PollFailed: If the status query fails
        """
        try:
            response = await self.client.get(f"/route-plans/{job_id}")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PollFailed(
                f"Error monitoring job {job_id}: {describe_http_error(e)}",
                job_id=job_id,
            ) from e

        if not isinstance(data, dict):
            raise PollFailed(f"Error monitoring job {job_id}: route plan is not an object", job_id=job_id)
        return data

    async def fetch_enrichment(self, job_id: str) -> dict[str, Any]:
        """
        Fetch the road-network route visualization of a finished job

        Raises:
            EnrichmentUnavailable: If the payload cannot be fetched
        """
        try:
            response = await self.client.get(f"/route-visualization/{job_id}")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise EnrichmentUnavailable(
                f"Route visualization unavailable for job {job_id}: {describe_http_error(e)}"
            ) from e

        if not isinstance(data, dict):
            raise EnrichmentUnavailable(f"Route visualization for job {job_id} is not an object")
        return data

    async def start_solve(self, problem: FullSolution) -> str:
        """
        Start a regular solve

        Returns:
            The job id (the service answers with plain text)

        Raises:
            DispatchFailed: If the request fails or returns no id
        """
        try:
            response = await self.client.post("/route-plans", json=problem)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise DispatchFailed(
                f"Start solving failed: {describe_http_error(e)}",
                status_code=_status_code(e),
            ) from e

        job_id = response.text.strip().strip('"')
        if not job_id:
            raise UnexpectedResponseShape(
                "Start solving failed: empty job id",
                status_code=response.status_code,
            )
        return job_id

    async def cancel(self, job_id: str) -> None:
        """
        Terminate a running solve

        Raises:
            DispatchFailed: If the request fails
        """
        try:
            response = await self.client.delete(f"/route-plans/{job_id}")
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise DispatchFailed(
                f"Stop solving failed: {describe_http_error(e)}",
                status_code=_status_code(e),
            ) from e
        logger.info("Stopped solve job %s", job_id)
