"""
Errors raised by the model client adapter.

The adapter never recovers from these itself; each domain component decides
its own fallback value.
"""

from typing import Optional


class ServiceError(Exception):
    """Uniform failure of a reasoning-service call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(ServiceError):
    """Service unreachable, timed out, not configured or returned a non-200 status."""


class MalformedResponseError(ServiceError):
    """Payload does not parse or violates the declared schema / enums."""


class EmptyResultError(ServiceError):
    """Call succeeded but produced no usable content."""
