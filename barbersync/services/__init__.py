"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import AvailabilityService, ScheduleRepositoryProtocol

__all__ = ["AvailabilityService", "ScheduleRepositoryProtocol"]
