# barbersync/api/schemas.py

from typing import List, Optional

from pydantic import BaseModel


class SlotDetailPublic(BaseModel):
    time: str
    available: bool
    is_past: bool
    conflicts: Optional[List[int]] = None
    lunch_break: bool = False


class AvailabilityResponse(BaseModel):
    available_slots: List[str]
    date: str
    professional_id: int
    message: Optional[str] = None
    slot_details: Optional[List[SlotDetailPublic]] = None
