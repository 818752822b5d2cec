"""
Application service for answering "which slots are free?" requests.

The service validates the requested day, pulls the inputs from a schedule
repository (booking API, fixture file, ...) and delegates the actual slot
math to the domain-level ``SlotCalculator``.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Dict, List, Optional, Protocol, Union

import pendulum

from ..domain.exceptions import InvalidDateError
from ..domain.models import (
    Appointment,
    AvailabilityResult,
    BarbershopSettings,
    ProfessionalAvailability,
    Service,
)
from ..domain.slot_calculator import SlotCalculator

logger = logging.getLogger(__name__)

ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class ScheduleRepositoryProtocol(Protocol):
    """Protocol describing the data access needed by the service."""

    def get_barbershop_settings(self) -> BarbershopSettings:
        """Return the tenant's opening hours."""

    def get_professional_availability(
        self, professional_id: int
    ) -> List[ProfessionalAvailability]:
        """Return the weekly availability records of a professional."""

    def get_appointments(self, professional_id: int, day: date) -> List[Appointment]:
        """Return the appointments of a professional on a day."""

    def get_services(self) -> Dict[int, Service]:
        """Return services keyed by id."""


class AvailabilityService:
    """
    Orchestrates data retrieval and slot calculation for one tenant.
    """

    def __init__(
        self,
        repository: ScheduleRepositoryProtocol,
        slot_calculator: Optional[SlotCalculator] = None,
    ) -> None:
        self._repository = repository
        self._slot_calculator = slot_calculator or SlotCalculator()

    @staticmethod
    def parse_date(value: Union[str, date, None]) -> date:
        """
        Validate a requested calendar day.

        Accepts ``date`` objects and ``YYYY-MM-DD`` strings.

        Raises:
            InvalidDateError: If the value is missing or malformed
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str) or not value.strip():
            raise InvalidDateError("A date in the format YYYY-MM-DD is required")

        if not ISO_DATE_PATTERN.fullmatch(value):
            raise InvalidDateError(f"Invalid date {value!r}. Use YYYY-MM-DD")

        try:
            return pendulum.from_format(value, "YYYY-MM-DD").date()
        except ValueError as exc:
            raise InvalidDateError(
                f"Invalid date {value!r}. Use YYYY-MM-DD"
            ) from exc

    def get_available_slots(
        self,
        *,
        professional_id: int,
        day: Union[str, date],
        now: Optional[datetime] = None,
    ) -> AvailabilityResult:
        """
        Fetch the day's inputs and compute the bookable slots.

        Repository failures propagate to the caller unchanged.
        """
        target_day = self.parse_date(day)

        settings = self._repository.get_barbershop_settings()
        availability = [
            record
            for record in self._repository.get_professional_availability(professional_id)
            if record.professional_id == professional_id
        ]
        appointments = self._repository.get_appointments(professional_id, target_day)
        services = self._repository.get_services()

        logger.info(
            "Computing slots for professional %s on %s (%d availability records, "
            "%d appointments)",
            professional_id,
            target_day.isoformat(),
            len(availability),
            len(appointments),
        )

        result = self._slot_calculator.calculate(
            professional_id=professional_id,
            day=target_day,
            settings=settings,
            availability=availability,
            appointments=appointments,
            services=services,
            now=now,
        )

        logger.info(
            "Professional %s has %d available slot(s) on %s",
            professional_id,
            len(result.available_slots),
            target_day.isoformat(),
        )
        return result

    def get_barbershop_settings(self) -> BarbershopSettings:
        return self._repository.get_barbershop_settings()
