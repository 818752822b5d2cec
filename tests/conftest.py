"""
Shared fixtures for the availability tests.
"""

from datetime import date, time

import pendulum
import pytest

from barbersync.domain.models import (
    Appointment,
    BarbershopSettings,
    ProfessionalAvailability,
    Service,
)
from barbersync.domain.slot_calculator import SlotCalculator

TZ = "America/Sao_Paulo"

# 2024-11-25 is a Monday
MONDAY = date(2024, 11, 25)
SUNDAY = date(2024, 11, 24)


@pytest.fixture
def shop_settings() -> BarbershopSettings:
    return BarbershopSettings(
        open_time=time(8, 0),
        close_time=time(20, 0),
        open_days=frozenset({1, 2, 3, 4, 5, 6}),
        timezone=TZ,
    )


@pytest.fixture
def monday_availability():
    """Professional 1 works Mondays 09:00-17:00."""
    return [
        ProfessionalAvailability(
            professional_id=1,
            day_of_week=1,
            start_time=time(9, 0),
            end_time=time(17, 0),
        )
    ]


@pytest.fixture
def services():
    return {
        1: Service(id=1, duration=30, name="Haircut"),
        2: Service(id=2, duration=60, name="Haircut + beard"),
        3: Service(id=3, duration=45, name="Beard trim"),
    }


@pytest.fixture
def early_monday():
    """Wall clock before the shop opens on the test Monday."""
    return pendulum.datetime(2024, 11, 25, 7, 0, tz=TZ)


@pytest.fixture
def calculator() -> SlotCalculator:
    return SlotCalculator()


@pytest.fixture
def make_appointment():
    """Factory for appointments of professional 1 on the test Monday."""

    def _make(
        appointment_id: int,
        hour: int,
        minute: int = 0,
        service_id: int = 1,
        status: str = "scheduled",
        professional_id: int = 1,
        day: date = MONDAY,
    ) -> Appointment:
        return Appointment(
            id=appointment_id,
            professional_id=professional_id,
            service_id=service_id,
            appointment_date=pendulum.datetime(day.year, day.month, day.day, hour, minute, tz=TZ),
            status=status,
        )

    return _make
