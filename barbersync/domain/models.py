"""
Domain models for barbershop hours, professional availability and bookings.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

import pendulum

DEFAULT_TIMEZONE = "America/Sao_Paulo"
SLOT_MINUTES = 30


class AppointmentStatus(str, Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


class UnavailableReason(str, Enum):
    """Why a day produced no candidate slots at all."""
    closed = "closed"
    unavailable = "unavailable"
    invalid_window = "invalid_window"


REASON_MESSAGES = {
    UnavailableReason.closed: "Barbershop is closed on this day",
    UnavailableReason.unavailable: "Professional is not available on this day",
    UnavailableReason.invalid_window: (
        "Professional hours do not fit within the barbershop opening hours"
    ),
}


def parse_clock_time(value: Any) -> time:
    """
    Parse an ``HH:MM`` (or ``HH:MM:SS``) wall-clock string.

    Raises:
        ValueError: If the value is not a valid time of day
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if not isinstance(value, str):
        raise ValueError(f"Expected an HH:MM string, got {value!r}")

    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid time of day: {value!r}")

    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time of day: {value!r}")
    return time(hour=hour, minute=minute)


def format_minutes(minutes: int) -> str:
    """Render minutes since midnight as ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def day_of_week(day: date) -> int:
    """Weekday number with Sunday=0 ... Saturday=6."""
    return day.isoweekday() % 7


@dataclass(frozen=True)
class BarbershopSettings:
    """
    Opening hours of one tenant's barbershop.

    ``open_days`` uses Sunday=0 numbering.
    """
    open_time: time
    close_time: time
    open_days: FrozenSet[int] = frozenset({1, 2, 3, 4, 5, 6})
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self):
        invalid_days = sorted(d for d in self.open_days if d not in range(7))
        if invalid_days:
            raise ValueError(f"open_days must be between 0 and 6, got {invalid_days}")

    def is_open_on(self, weekday: int) -> bool:
        return weekday in self.open_days

    @classmethod
    def from_record(
        cls,
        data: Mapping[str, Any],
        default_timezone: str = DEFAULT_TIMEZONE,
    ) -> "BarbershopSettings":
        """Build settings from a booking API / fixture record."""
        open_days = data.get("open_days")
        if open_days is None:
            open_days = [1, 2, 3, 4, 5, 6]
        return cls(
            open_time=parse_clock_time(data.get("open_time") or "09:00"),
            close_time=parse_clock_time(data.get("close_time") or "18:00"),
            open_days=frozenset(int(d) for d in open_days),
            timezone=data.get("timezone") or default_timezone,
        )


@dataclass(frozen=True)
class ProfessionalAvailability:
    """
    Weekly availability of a professional for one weekday.

    Missing start/end times fall back to the barbershop opening hours.
    """
    professional_id: int
    day_of_week: int
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_available: bool = True
    lunch_start: Optional[time] = None
    lunch_end: Optional[time] = None

    def has_lunch_break(self) -> bool:
        return (
            self.lunch_start is not None
            and self.lunch_end is not None
            and self.lunch_start < self.lunch_end
        )

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> "ProfessionalAvailability":
        def optional_time(key: str) -> Optional[time]:
            value = data.get(key)
            return parse_clock_time(value) if value else None

        return cls(
            professional_id=int(data["professional_id"]),
            day_of_week=int(data["day_of_week"]),
            start_time=optional_time("start_time"),
            end_time=optional_time("end_time"),
            is_available=bool(data.get("is_available", True)),
            lunch_start=optional_time("lunch_start"),
            lunch_end=optional_time("lunch_end"),
        )


@dataclass(frozen=True)
class Service:
    id: int
    duration: int  # minutes
    name: str = ""

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> "Service":
        return cls(
            id=int(data["id"]),
            duration=int(data["duration"]),
            name=str(data.get("name", "")),
        )


@dataclass(frozen=True)
class Appointment:
    """
    An existing booking.

    ``appointment_date`` is read as local wall-clock time; adapters are
    responsible for normalising it into the barbershop timezone.
    """
    id: int
    professional_id: int
    service_id: int
    appointment_date: datetime
    status: str = AppointmentStatus.scheduled.value

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.cancelled.value

    @property
    def start_minutes(self) -> int:
        return self.appointment_date.hour * 60 + self.appointment_date.minute

    def occurs_on(self, day: date) -> bool:
        return self.appointment_date.date() == day

    @classmethod
    def from_record(
        cls,
        data: Mapping[str, Any],
        timezone: str = DEFAULT_TIMEZONE,
    ) -> "Appointment":
        """
        Build an appointment from a booking API / fixture record.

        Naive timestamps are taken as wall-clock time in ``timezone``;
        timestamps carrying an offset are converted into it.
        """
        raw_date = data["appointment_date"]
        if isinstance(raw_date, datetime):
            parsed = pendulum.instance(raw_date, tz=timezone)
        else:
            parsed = pendulum.parse(str(raw_date), tz=timezone)
            if not isinstance(parsed, datetime):
                raise ValueError(f"Could not parse appointment date: {raw_date!r}")

        return cls(
            id=int(data["id"]),
            professional_id=int(data["professional_id"]),
            service_id=int(data["service_id"]),
            appointment_date=parsed.in_timezone(timezone),
            status=str(data.get("status") or AppointmentStatus.scheduled.value),
        )


@dataclass(frozen=True)
class SlotDetail:
    """Diagnostic view of one candidate slot."""
    time: str
    available: bool
    is_past: bool
    conflicts: Optional[List[int]] = None
    lunch_break: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "available": self.available,
            "is_past": self.is_past,
            "conflicts": list(self.conflicts) if self.conflicts else None,
            "lunch_break": self.lunch_break,
        }


@dataclass
class AvailabilityResult:
    """
    Bookable slots of a professional for a single day.
    """
    professional_id: int
    date: date
    day_of_week: int
    available_slots: List[str] = field(default_factory=list)
    slot_details: List[SlotDetail] = field(default_factory=list)
    reason: Optional[UnavailableReason] = None

    @property
    def message(self) -> Optional[str]:
        if self.reason is None:
            return None
        return REASON_MESSAGES[self.reason]

    def to_dict(self, include_details: bool = False) -> Dict[str, Any]:
        """Render the response payload handed to HTTP / CLI callers."""
        payload: Dict[str, Any] = {
            "available_slots": list(self.available_slots),
            "date": self.date.isoformat(),
            "professional_id": self.professional_id,
        }
        if self.message:
            payload["message"] = self.message
        if include_details:
            payload["slot_details"] = [detail.to_dict() for detail in self.slot_details]
        return payload
