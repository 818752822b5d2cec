"""
Booking API client for fetching schedule data of a tenant.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from ..domain.exceptions import BookingAPIError
from ..domain.models import (
    DEFAULT_TIMEZONE,
    Appointment,
    BarbershopSettings,
    ProfessionalAvailability,
    Service,
)
from .lookup_cache import LookupCache

logger = logging.getLogger(__name__)


class BookingAPIClient:
    """
    Client for the multi-tenant booking REST API.

    Every request is scoped to one barbershop through the ``tenant`` query
    parameter. Opening hours, weekly availability and services are served
    from the given ``LookupCache``; appointments are always fetched fresh.
    """

    def __init__(
        self,
        base_url: str,
        tenant: str,
        *,
        access_token: Optional[str] = None,
        timeout: float = 30,
        cache: Optional[LookupCache] = None,
        default_timezone: str = DEFAULT_TIMEZONE,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the booking API client.

        Args:
            base_url: Root URL of the booking API (without ``/api``)
            tenant: Tenant slug of the barbershop
            access_token: Optional bearer token for authenticated endpoints
            timeout: Request timeout in seconds
            cache: Lookup cache for slowly changing data
            default_timezone: Timezone used when the settings carry none
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.tenant = tenant
        self.timeout = timeout
        self.default_timezone = default_timezone
        self.cache = cache or LookupCache()
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/json"}
        if access_token:
            self.headers["Authorization"] = f"Bearer {access_token}"

    def get_barbershop_settings(self) -> BarbershopSettings:
        return self.cache.get_or_load(
            (self.tenant, "barbershop-settings"),
            self._fetch_barbershop_settings,
        )

    def _fetch_barbershop_settings(self) -> BarbershopSettings:
        data = self._get_json("/api/barbershop-settings")
        if not isinstance(data, dict):
            raise BookingAPIError("Unexpected barbershop settings payload")
        try:
            return BarbershopSettings.from_record(data, default_timezone=self.default_timezone)
        except (KeyError, TypeError, ValueError) as exc:
            raise BookingAPIError(f"Could not parse barbershop settings: {exc}") from exc

    def get_professional_availability(
        self, professional_id: int
    ) -> List[ProfessionalAvailability]:
        return self.cache.get_or_load(
            (self.tenant, "availability", professional_id),
            lambda: self._fetch_professional_availability(professional_id),
        )

    def _fetch_professional_availability(
        self, professional_id: int
    ) -> List[ProfessionalAvailability]:
        records = self._get_list(f"/api/availability/professional/{professional_id}")

        availability: List[ProfessionalAvailability] = []
        for record in records:
            try:
                availability.append(ProfessionalAvailability.from_record(record))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed availability record %r: %s", record, exc)
        return availability

    def get_services(self) -> Dict[int, Service]:
        return self.cache.get_or_load((self.tenant, "services"), self._fetch_services)

    def _fetch_services(self) -> Dict[int, Service]:
        services: Dict[int, Service] = {}
        for record in self._get_list("/api/services"):
            try:
                service = Service.from_record(record)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed service record %r: %s", record, exc)
                continue
            services[service.id] = service
        return services

    def get_appointments(self, professional_id: int, day: date) -> List[Appointment]:
        """
        Get the appointments of a professional on a day.

        Status filtering is left to the calculator so that cancelled
        bookings stay visible in diagnostics.
        """
        timezone = self.get_barbershop_settings().timezone
        records = self._get_list(
            "/api/appointments",
            params={"date": day.isoformat(), "professionalId": professional_id},
        )

        appointments: List[Appointment] = []
        for record in records:
            try:
                appointments.append(Appointment.from_record(record, timezone=timezone))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed appointment record %r: %s", record, exc)
        return appointments

    def _get_list(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        data = self._get_json(path, params=params)
        if not isinstance(data, list):
            raise BookingAPIError(f"Expected a list from {path}, got {type(data).__name__}")
        return data

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform a tenant-scoped GET request and decode the JSON body.

        Raises:
            BookingAPIError: If the request fails or the body is not JSON
        """
        url = f"{self.base_url}{path}"
        query = {"tenant": self.tenant}
        if params:
            query.update(params)

        logger.debug("GET %s params=%s", url, query)
        try:
            response = self.session.get(
                url,
                headers=self.headers,
                params=query,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as exc:
            raise BookingAPIError(f"Failed to fetch {path} from booking API: {exc}") from exc
        except ValueError as exc:
            raise BookingAPIError(f"Invalid JSON returned by {path}: {exc}") from exc
