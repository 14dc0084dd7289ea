"""
Solver client factory

Creates the solver client from the harness configuration.
"""

from __future__ import annotations

from solver_gauge_core.harness_config import HarnessConfig, load_config
from solver_gauge_core.infrastructure.solver_clients.base import SolverClient
from solver_gauge_core.infrastructure.solver_clients.timefold import TimefoldRestClient


def create_client(config: HarnessConfig | None = None, base_url: str | None = None) -> SolverClient:
    """
    Create a solver client

    Args:
        config: HarnessConfig (loads from env if not provided)
        base_url: Overrides config.service.base_url

    Returns:
        SolverClient: The client instance
    """
    if config is None:
        config = load_config()

    service = config.service
    return TimefoldRestClient(
        base_url or service.base_url,
        timeout_seconds=service.timeout_seconds,
        max_retries=service.max_retries,
        retry_delay_seconds=service.retry_delay_seconds,
    )
