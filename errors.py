"""Errors raised by the vendor adapters and mapped to HTTP status codes."""

from typing import Any, Optional


class VendingMachineError(RuntimeError):
    pass


class ConfigurationMissing(VendingMachineError):
    """A credential is unset or still holds its template value."""


class UpstreamUnavailable(VendingMachineError):
    """A vendor client could not be constructed at startup."""


class UpstreamCallFailure(VendingMachineError):
    """A vendor call raised or returned something unusable."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details
