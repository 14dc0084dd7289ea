"""
Solver client package

Provides a unified interface to the remote vehicle-routing solver.
"""

from solver_gauge_core.infrastructure.solver_clients.base import (
    SolverClient,
    classify_solve_response,
)
from solver_gauge_core.infrastructure.solver_clients.factory import create_client
from solver_gauge_core.infrastructure.solver_clients.timefold import TimefoldRestClient

__all__ = ["SolverClient", "TimefoldRestClient", "classify_solve_response", "create_client"]
