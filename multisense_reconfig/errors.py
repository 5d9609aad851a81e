"""
Error taxonomy for sensor reconfiguration.

Device boundary calls raise ``TransportFailure`` or ``UnsupportedFeature``;
the reconciler raises ``ValidationFailure`` for rejected desired values and
``FatalConfiguration`` when no configuration variant fits the sensor.
"""

from typing import Optional


class ReconfigureError(Exception):
    """Base class for all reconfiguration errors."""

    def __init__(self, message: str, operation: str = "", status: Optional[object] = None):
        super().__init__(message)
        self.operation = operation
        self.status = status


class TransportFailure(ReconfigureError):
    """A device query or command failed (channel error, timeout, bad reply)."""
    pass


class UnsupportedFeature(ReconfigureError):
    """The sensor explicitly declined a feature it does not implement."""
    pass


class ValidationFailure(ReconfigureError):
    """A desired value was malformed or is not supported by the sensor."""
    pass


class FatalConfiguration(ReconfigureError):
    """No configuration variant exists for this firmware/imager combination."""
    pass
