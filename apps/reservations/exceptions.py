"""
Custom exceptions for the reservation engine.
Raised in engine.py / models.py and caught in views for clean error handling.
"""


class ReservationError(Exception):
    """Base exception for all reservation engine errors."""
    pass


class InvalidDateRangeError(ReservationError):
    """Raised when the return date is not strictly after the pick-up date."""
    pass


class PastStartDateError(ReservationError):
    """Raised when the pick-up date is before today."""
    pass


class VehicleUnavailableError(ReservationError):
    """Raised when the vehicle is archived or switched off by the fleet manager."""
    pass


class ReservationConflictError(ReservationError):
    """Raised when the vehicle already has an active reservation overlapping the dates."""
    pass


class InvalidStatusTransitionError(ReservationError):
    """Raised when a status change is not allowed by the reservation state machine."""
    pass
