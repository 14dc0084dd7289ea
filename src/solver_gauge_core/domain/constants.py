"""
Domain Constants

Centrally manages constants shared across the benchmark harness.
"""

# Demo problem instances served by the solver service
DEMO_DATASETS = [
    "SINGAPORE_WIDE",
    "SINGAPORE_CENTRAL",
    "SINGAPORE_EAST",
    "SINGAPORE_WEST",
]

DEFAULT_DEMO_DATASET = "SINGAPORE_WIDE"

# Iteration counts offered by the CLI
ITERATION_CHOICES = [3, 5, 7, 10]

DEFAULT_ITERATIONS = 5

# Solver status reported once a job has finished
IDLE_SOLVER_STATUS = "NOT_SOLVING"

# Cadence (seconds)
DEFAULT_POLL_INTERVAL_SECONDS = 2.0
DEFAULT_ITERATION_PAUSE_SECONDS = 1.0

# Kilometres per second of total driving time
DEFAULT_DISTANCE_PER_DRIVING_SECOND = 0.02

# Consistency tiers (std dev as % of mean)
HIGH_VARIANCE_THRESHOLD = 15.0
MODERATE_VARIANCE_THRESHOLD = 10.0

# Trend labels for the per-iteration table
BEST_TOLERANCE = 0.1           # Within 0.1 km of the best counts as best
IMPROVEMENT_THRESHOLD = -0.5   # vs previous (%)
REGRESSION_THRESHOLD = 2.0     # vs previous (%)
