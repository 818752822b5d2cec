"""
Schedule repository backed by a local YAML/JSON fixture file.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from ..domain.models import (
    DEFAULT_TIMEZONE,
    Appointment,
    BarbershopSettings,
    ProfessionalAvailability,
    Service,
)

logger = logging.getLogger(__name__)


class FixtureScheduleRepository:
    """
    Repository that serves a barbershop's schedule from a fixture file.

    Useful for demos and for exercising the calculator without a running
    booking API. Expected layout::

        barbershop: {open_time, close_time, open_days, timezone}
        services: [{id, duration, name}]
        availability: [{professional_id, day_of_week, start_time, end_time, is_available}]
        appointments: [{id, professional_id, service_id, appointment_date, status}]
    """

    def __init__(self, data: Mapping[str, Any], default_timezone: str = DEFAULT_TIMEZONE):
        """
        Args:
            data: Parsed fixture content
            default_timezone: Timezone used when the barbershop section has none

        Raises:
            ValueError: If a section is missing or malformed
        """
        if "barbershop" not in data or not isinstance(data["barbershop"], Mapping):
            raise ValueError("Fixture must contain a 'barbershop' mapping.")

        try:
            self._settings = BarbershopSettings.from_record(
                data["barbershop"], default_timezone=default_timezone
            )
            self._services = {
                service.id: service
                for service in (Service.from_record(r) for r in data.get("services") or [])
            }
            self._availability = [
                ProfessionalAvailability.from_record(r)
                for r in data.get("availability") or []
            ]
            self._appointments = [
                Appointment.from_record(r, timezone=self._settings.timezone)
                for r in data.get("appointments") or []
            ]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed fixture record: {exc}") from exc

        logger.debug(
            "Loaded fixture with %d services, %d availability records, %d appointments",
            len(self._services),
            len(self._availability),
            len(self._appointments),
        )

    @classmethod
    def from_file(
        cls, path: Path, default_timezone: str = DEFAULT_TIMEZONE
    ) -> "FixtureScheduleRepository":
        """
        Load a fixture from a ``.json``, ``.yaml`` or ``.yml`` file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the content is invalid
        """
        if not path.exists():
            raise FileNotFoundError(f"Fixture file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
            except (json.JSONDecodeError, yaml.YAMLError) as exc:
                raise ValueError(f"Invalid fixture file {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Fixture file must contain a mapping at the root level.")

        return cls(data, default_timezone=default_timezone)

    def get_barbershop_settings(self) -> BarbershopSettings:
        return self._settings

    def get_professional_availability(
        self, professional_id: int
    ) -> List[ProfessionalAvailability]:
        return [a for a in self._availability if a.professional_id == professional_id]

    def get_appointments(self, professional_id: int, day: date) -> List[Appointment]:
        return [
            a for a in self._appointments
            if a.professional_id == professional_id and a.occurs_on(day)
        ]

    def get_services(self) -> Dict[int, Service]:
        return dict(self._services)
