"""
Tests for the AvailabilityService orchestration layer.
"""

from datetime import date, time
from typing import Dict, List

import pendulum
import pytest

from barbersync.domain.exceptions import BookingAPIError, InvalidDateError
from barbersync.domain.models import (
    Appointment,
    BarbershopSettings,
    ProfessionalAvailability,
    Service,
    UnavailableReason,
)
from barbersync.services.availability_service import AvailabilityService

from conftest import TZ


class StubScheduleRepository:
    """Minimal stub matching ScheduleRepositoryProtocol."""

    def __init__(
        self,
        settings: BarbershopSettings,
        availability: List[ProfessionalAvailability],
        appointments: List[Appointment],
        services: Dict[int, Service],
    ):
        self._settings = settings
        self._availability = availability
        self._appointments = appointments
        self._services = services
        self.calls: List[tuple] = []

    def get_barbershop_settings(self):
        self.calls.append(("settings",))
        return self._settings

    def get_professional_availability(self, professional_id):
        self.calls.append(("availability", professional_id))
        return self._availability

    def get_appointments(self, professional_id, day):
        self.calls.append(("appointments", professional_id, day))
        return self._appointments

    def get_services(self):
        self.calls.append(("services",))
        return self._services


class FailingRepository(StubScheduleRepository):
    def get_appointments(self, professional_id, day):
        raise BookingAPIError("booking API unavailable")


@pytest.fixture
def repository(shop_settings, monday_availability, services, make_appointment):
    return StubScheduleRepository(
        settings=shop_settings,
        availability=monday_availability,
        appointments=[make_appointment(1, 9, service_id=3)],
        services=services,
    )


class TestParseDate:
    def test_accepts_iso_string(self):
        assert AvailabilityService.parse_date("2024-11-25") == date(2024, 11, 25)

    def test_accepts_date_objects(self):
        assert AvailabilityService.parse_date(date(2024, 11, 25)) == date(2024, 11, 25)
        assert AvailabilityService.parse_date(pendulum.datetime(2024, 11, 25, 15, tz=TZ)) == date(2024, 11, 25)

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "25/11/2024", "2024-13-01", "2024-02-30", "tomorrow",
         "2024-1-5", " 2024-11-25", "2024-11-25T10:00"],
    )
    def test_rejects_missing_or_malformed_dates(self, value):
        with pytest.raises(InvalidDateError):
            AvailabilityService.parse_date(value)


class TestAvailabilityService:
    def test_monday_scenario_end_to_end(self, repository):
        """A 45 minute booking at 09:00 leaves 10:00 through 17:00."""
        service = AvailabilityService(repository=repository)

        result = service.get_available_slots(
            professional_id=1,
            day="2024-11-25",
            now=pendulum.datetime(2024, 11, 25, 8, 0, tz=TZ),
        )

        assert result.available_slots[0] == "10:00"
        assert result.available_slots[-1] == "17:00"
        assert "09:00" not in result.available_slots
        assert "09:30" not in result.available_slots
        assert len(result.available_slots) == 15

    def test_repository_receives_professional_and_day(self, repository):
        service = AvailabilityService(repository=repository)

        service.get_available_slots(
            professional_id=1,
            day="2024-11-25",
            now=pendulum.datetime(2024, 11, 25, 8, 0, tz=TZ),
        )

        assert ("availability", 1) in repository.calls
        assert ("appointments", 1, date(2024, 11, 25)) in repository.calls

    def test_invalid_date_is_rejected_before_any_lookup(self, repository):
        service = AvailabilityService(repository=repository)

        with pytest.raises(InvalidDateError):
            service.get_available_slots(professional_id=1, day="2024-99-99")

        assert repository.calls == []

    def test_availability_of_other_professionals_is_filtered(self, shop_settings, services):
        repository = StubScheduleRepository(
            settings=shop_settings,
            availability=[
                ProfessionalAvailability(
                    professional_id=2, day_of_week=1, start_time=time(9), end_time=time(17)
                )
            ],
            appointments=[],
            services=services,
        )
        service = AvailabilityService(repository=repository)

        result = service.get_available_slots(
            professional_id=1,
            day="2024-11-25",
            now=pendulum.datetime(2024, 11, 25, 8, 0, tz=TZ),
        )

        assert result.available_slots == []
        assert result.reason == UnavailableReason.unavailable

    def test_closed_day_is_not_an_error(self, repository):
        service = AvailabilityService(repository=repository)

        result = service.get_available_slots(
            professional_id=1,
            day="2024-11-24",
            now=pendulum.datetime(2024, 11, 24, 8, 0, tz=TZ),
        )

        assert result.available_slots == []
        assert result.reason == UnavailableReason.closed

    def test_repository_errors_propagate(self, shop_settings, monday_availability, services):
        repository = FailingRepository(
            settings=shop_settings,
            availability=monday_availability,
            appointments=[],
            services=services,
        )
        service = AvailabilityService(repository=repository)

        with pytest.raises(BookingAPIError):
            service.get_available_slots(professional_id=1, day="2024-11-25")
