# greencart-dispatch/greencart/exceptions.py
"""
Custom exceptions for the GreenCart Delivery Simulation.

Input problems are reported by the caller layer before the engine runs.
Once invoked, the engine only fails on inconsistent snapshots, and such a
failure aborts the whole run.
"""

from typing import Any, Dict, Optional


class GreenCartError(Exception):
    """Base exception for all simulation errors."""


class InputValidationError(GreenCartError, ValueError):
    """
    Raised when run parameters or the input snapshot are unusable.

    Attributes:
        details: Extra context for the caller, e.g. available vs requested drivers
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.details: Dict[str, Any] = details or {}


class SimulationError(GreenCartError):
    """Raised when the engine cannot complete a run. No partial result exists."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Unable to simulate: {reason}")
        self.reason = reason


class DataLoadError(GreenCartError, ValueError):
    """Raised when a CSV snapshot contains an invalid row."""
