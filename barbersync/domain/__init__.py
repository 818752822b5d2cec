"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import BarbersyncError, BookingAPIError, InvalidDateError
from .models import (
    Appointment,
    AvailabilityResult,
    BarbershopSettings,
    ProfessionalAvailability,
    Service,
    SlotDetail,
    UnavailableReason,
)
from .slot_calculator import SlotCalculator

__all__ = [
    "Appointment",
    "AvailabilityResult",
    "BarbershopSettings",
    "BarbersyncError",
    "BookingAPIError",
    "InvalidDateError",
    "ProfessionalAvailability",
    "Service",
    "SlotCalculator",
    "SlotDetail",
    "UnavailableReason",
]
