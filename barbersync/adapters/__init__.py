"""
Adapters layer - Data sources for schedule information.
"""

from .booking_api_client import BookingAPIClient
from .fixture_repository import FixtureScheduleRepository
from .lookup_cache import LookupCache

__all__ = ["BookingAPIClient", "FixtureScheduleRepository", "LookupCache"]
