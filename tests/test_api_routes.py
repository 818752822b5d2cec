"""
Tests for the availability HTTP endpoint.
"""

import pendulum
import pytest
from fastapi.testclient import TestClient

from barbersync.api.app import create_app
from barbersync.domain.exceptions import BookingAPIError
from barbersync.services.availability_service import AvailabilityService


class InMemoryRepository:
    def __init__(self, settings, availability, appointments, services):
        self.settings = settings
        self.availability = availability
        self.appointments = appointments
        self.services = services

    def get_barbershop_settings(self):
        return self.settings

    def get_professional_availability(self, professional_id):
        return self.availability

    def get_appointments(self, professional_id, day):
        return self.appointments

    def get_services(self):
        return self.services


class BrokenRepository(InMemoryRepository):
    def get_barbershop_settings(self):
        raise BookingAPIError("Failed to fetch /api/barbershop-settings")


class FrozenClockService(AvailabilityService):
    """Pins the wall clock so the test Monday is still ahead of us."""

    def get_available_slots(self, *, professional_id, day, now=None):
        return super().get_available_slots(
            professional_id=professional_id,
            day=day,
            now=pendulum.datetime(2024, 11, 25, 7, 0, tz="America/Sao_Paulo"),
        )


@pytest.fixture
def client(shop_settings, monday_availability, services, make_appointment):
    repository = InMemoryRepository(
        settings=shop_settings,
        availability=monday_availability,
        appointments=[make_appointment(21, 9, service_id=3)],
        services=services,
    )
    return TestClient(create_app(FrozenClockService(repository=repository)))


class TestAvailabilityEndpoint:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_available_slots(self, client):
        response = client.get("/api/availability/1/2024-11-25")

        assert response.status_code == 200
        body = response.json()
        assert body["professional_id"] == 1
        assert body["date"] == "2024-11-25"
        assert body["available_slots"][0] == "10:00"
        assert body["available_slots"][-1] == "17:00"
        assert "slot_details" not in body
        assert "message" not in body

    def test_slot_details_on_request(self, client):
        response = client.get("/api/availability/1/2024-11-25", params={"details": True})

        details = response.json()["slot_details"]
        assert details[0] == {
            "time": "09:00",
            "available": False,
            "is_past": False,
            "conflicts": [21],
            "lunch_break": False,
        }
        assert details[2]["conflicts"] is None
        assert details[2]["available"]
        assert len(details) == 17

    def test_closed_day_returns_message(self, client):
        response = client.get("/api/availability/1/2024-11-24")

        assert response.status_code == 200
        assert response.json() == {
            "available_slots": [],
            "date": "2024-11-24",
            "professional_id": 1,
            "message": "Barbershop is closed on this day",
        }

    def test_invalid_date_is_a_client_error(self, client):
        response = client.get("/api/availability/1/25-11-2024")

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid date format. Use YYYY-MM-DD"}

    def test_non_numeric_professional_id_is_rejected(self, client):
        response = client.get("/api/availability/abc/2024-11-25")

        assert response.status_code == 422

    def test_data_source_failure_is_reported(self, shop_settings, monday_availability, services):
        repository = BrokenRepository(shop_settings, monday_availability, [], services)
        client = TestClient(create_app(AvailabilityService(repository=repository)))

        response = client.get("/api/availability/1/2024-11-25")

        assert response.status_code == 502
        assert response.json() == {"detail": "Failed to get availability slots"}
