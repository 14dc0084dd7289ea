"""
solver-gauge-core

Measures run-to-run consistency of a vehicle-routing solver service.
"""

__version__ = "0.1.0"
