"""
qcore/errors.py - Engine Error Taxonomy

All engine errors derive from StopRule: they are raised, logged, and never
swallowed.
"""

from receipts import StopRule


class QuantumSimError(StopRule):
    """Base class for engine failures."""


class InvalidProfile(QuantumSimError, ValueError):
    """Profile rejected before any simulation state exists."""

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid profile: {field}={value!r} {reason}")


class StorageError(QuantumSimError):
    """Persistence unavailable or failed.

    When raised from a run, ``result`` holds the computed RunResult so the
    observation survives the failed write.
    """

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class ToolchainFailure(QuantumSimError):
    """External synthesis / place-and-route step failed or is unavailable."""

    def __init__(self, step: str, message: str, output: str = ""):
        self.step = step
        self.output = output
        super().__init__(f"{step}: {message}")
