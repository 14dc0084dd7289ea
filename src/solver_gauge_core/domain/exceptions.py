"""
Domain Exceptions

Failure taxonomy of a benchmark run.
"""


class SolverGaugeError(Exception):
    """Base class for all benchmark errors"""
    pass


class SetupFailed(SolverGaugeError):
    """The demo problem instance could not be loaded; the run never starts"""
    pass


class DispatchFailed(SolverGaugeError):
    """The solve request failed at transport level or could not be classified"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UnexpectedResponseShape(DispatchFailed):
    """The solve response carried neither a solution nor a job identifier"""
    pass


class PollFailed(SolverGaugeError):
    """A status query failed while an iteration was in progress"""

    def __init__(self, message: str, job_id: str | None = None):
        super().__init__(message)
        self.job_id = job_id


class EnrichmentUnavailable(SolverGaugeError):
    """The optional visualization payload could not be fetched (non-fatal)"""
    pass


class AlreadyRunning(SolverGaugeError):
    """A run was requested while another run is still active"""
    pass
