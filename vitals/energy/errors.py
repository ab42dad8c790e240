"""Energy engine error taxonomy.

The arithmetic itself cannot fail. Callers get one of two conditions:
bad input, or a store read that did not complete.
"""

from __future__ import annotations


class EnergyEngineError(Exception):
    """Base class for engine errors."""


class InputValidationError(EnergyEngineError):
    """Malformed or missing required input (absent user id, unknown period)."""


class UpstreamFetchError(EnergyEngineError):
    """A read against the event store failed. Never retried, never masked."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
