"""
Core business logic for calculating bookable time slots.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). Every input is handed in by the caller; the only ambient
read is the wall clock, and even that can be injected.
"""

import logging
from datetime import date, datetime, time
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pendulum

from .models import (
    SLOT_MINUTES,
    Appointment,
    AvailabilityResult,
    BarbershopSettings,
    ProfessionalAvailability,
    Service,
    SlotDetail,
    UnavailableReason,
    day_of_week,
    format_minutes,
    minutes_of_day,
)

logger = logging.getLogger(__name__)


def _ceil_to_slot(minutes: int) -> int:
    return -(-minutes // SLOT_MINUTES) * SLOT_MINUTES


def _floor_to_slot(minutes: int) -> int:
    return (minutes // SLOT_MINUTES) * SLOT_MINUTES


class SlotCalculator:
    """
    Calculates the bookable slots of one professional on one day.

    Algorithm:
    1. Reject days the barbershop is closed
    2. Find the professional's availability record for the weekday
    3. Intersect professional hours with the opening hours (effective window)
    4. Map every non-cancelled appointment onto the slots it occupies
    5. Enumerate the window in 30-minute steps, dropping occupied, lunch
       break and past slots
    """

    def calculate(
        self,
        professional_id: int,
        day: date,
        settings: BarbershopSettings,
        availability: Iterable[ProfessionalAvailability],
        appointments: Iterable[Appointment],
        services: Mapping[int, Service],
        now: Optional[datetime] = None,
    ) -> AvailabilityResult:
        """
        Compute available slots for ``professional_id`` on ``day``.

        Args:
            professional_id: Professional whose schedule is computed
            day: Calendar day to compute
            settings: Barbershop opening hours and timezone
            availability: Weekly availability records of the professional
            appointments: Appointments of the day (extra ones are filtered out)
            services: Service lookup used to resolve appointment durations
            now: Current wall-clock time; defaults to now in the shop timezone

        Returns:
            AvailabilityResult with slots in ascending order
        """
        weekday = day_of_week(day)
        result = AvailabilityResult(
            professional_id=professional_id,
            date=day,
            day_of_week=weekday,
        )

        if not settings.is_open_on(weekday):
            logger.debug("Barbershop closed on weekday %s (%s)", weekday, day)
            result.reason = UnavailableReason.closed
            return result

        day_config = self._find_day_config(professional_id, weekday, availability)
        if day_config is None:
            logger.debug(
                "Professional %s has no availability on weekday %s",
                professional_id,
                weekday,
            )
            result.reason = UnavailableReason.unavailable
            return result

        window = self.effective_window(day_config, settings)
        if window is None:
            logger.warning(
                "Empty availability window for professional %s on %s "
                "(professional %s-%s, barbershop %s-%s)",
                professional_id,
                day,
                day_config.start_time,
                day_config.end_time,
                settings.open_time,
                settings.close_time,
            )
            result.reason = UnavailableReason.invalid_window
            return result

        occupied = self.occupied_slots(
            professional_id=professional_id,
            day=day,
            appointments=appointments,
            services=services,
        )

        tz = settings.timezone
        current = self._localize_now(now, tz)

        window_start, window_end = window
        for slot_minutes in range(window_start, window_end + 1, SLOT_MINUTES):
            detail = self._describe_slot(
                slot_minutes=slot_minutes,
                day=day,
                tz=tz,
                now=current,
                conflicts=occupied.get(slot_minutes),
                day_config=day_config,
            )
            result.slot_details.append(detail)
            if detail.available:
                result.available_slots.append(detail.time)

        return result

    @staticmethod
    def _localize_now(now: Optional[datetime], tz: str) -> datetime:
        """Naive clocks are read as shop wall-clock time."""
        if now is None:
            return pendulum.now(tz)
        if now.tzinfo is None:
            now = now.replace(tzinfo=pendulum.timezone(tz))
        return pendulum.instance(now).in_timezone(tz)

    @staticmethod
    def _find_day_config(
        professional_id: int,
        weekday: int,
        availability: Iterable[ProfessionalAvailability],
    ) -> Optional[ProfessionalAvailability]:
        for record in availability:
            if (
                record.professional_id == professional_id
                and record.day_of_week == weekday
                and record.is_available
            ):
                return record
        return None

    @staticmethod
    def effective_window(
        day_config: ProfessionalAvailability,
        settings: BarbershopSettings,
    ) -> Optional[Tuple[int, int]]:
        """
        Intersect professional hours with the barbershop opening hours.

        The start is rounded up to a slot boundary only when both start times
        share the hour; otherwise the later hour is taken at minute 0. The end
        mirrors this with the earlier hour and rounding down.

        Returns:
            (start, end) in minutes since midnight, or None when the window
            is empty (end before start)
        """
        prof_start = day_config.start_time or settings.open_time
        prof_end = day_config.end_time or settings.close_time

        start = SlotCalculator._window_boundary(prof_start, settings.open_time, later=True)
        end = SlotCalculator._window_boundary(prof_end, settings.close_time, later=False)

        if end < start:
            return None
        return start, end

    @staticmethod
    def _window_boundary(first: time, second: time, later: bool) -> int:
        if first.hour == second.hour:
            if later:
                return first.hour * 60 + _ceil_to_slot(max(first.minute, second.minute))
            return first.hour * 60 + _floor_to_slot(min(first.minute, second.minute))

        hour = max(first.hour, second.hour) if later else min(first.hour, second.hour)
        return hour * 60

    def occupied_slots(
        self,
        professional_id: int,
        day: date,
        appointments: Iterable[Appointment],
        services: Mapping[int, Service],
    ) -> Dict[int, List[int]]:
        """
        Map slot start (minutes since midnight) to the ids of the appointments
        occupying it.

        A slot is occupied when its start falls within
        [appointment start, appointment start + service duration). Cancelled
        appointments and appointments of other professionals or days are
        ignored. Overlapping appointments simply both register.
        """
        occupied: Dict[int, List[int]] = {}

        for appointment in appointments:
            if appointment.professional_id != professional_id:
                continue
            if appointment.is_cancelled or not appointment.occurs_on(day):
                continue

            start = appointment.start_minutes
            end = start + self._duration_for(appointment, services)

            slot = _ceil_to_slot(start)
            while slot < end:
                occupied.setdefault(slot, []).append(appointment.id)
                slot += SLOT_MINUTES

        return occupied

    @staticmethod
    def _duration_for(appointment: Appointment, services: Mapping[int, Service]) -> int:
        service = services.get(appointment.service_id)
        if service is None or service.duration <= 0:
            logger.warning(
                "Appointment %s references service %s without a usable duration; "
                "assuming %s minutes",
                appointment.id,
                appointment.service_id,
                SLOT_MINUTES,
            )
            return SLOT_MINUTES
        return service.duration

    @staticmethod
    def _describe_slot(
        *,
        slot_minutes: int,
        day: date,
        tz: str,
        now: datetime,
        conflicts: Optional[List[int]],
        day_config: ProfessionalAvailability,
    ) -> SlotDetail:
        slot_time = pendulum.datetime(
            day.year,
            day.month,
            day.day,
            slot_minutes // 60,
            slot_minutes % 60,
            tz=tz,
        )
        is_past = slot_time < now

        lunch_break = False
        if day_config.has_lunch_break():
            lunch_break = (
                minutes_of_day(day_config.lunch_start)
                <= slot_minutes
                < minutes_of_day(day_config.lunch_end)
            )

        return SlotDetail(
            time=format_minutes(slot_minutes),
            available=not is_past and not lunch_break and not conflicts,
            is_past=is_past,
            conflicts=list(conflicts) if conflicts else None,
            lunch_break=lunch_break,
        )
