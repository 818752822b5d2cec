# barbersync/api/routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from ..domain.exceptions import BookingAPIError, InvalidDateError
from ..services.availability_service import AvailabilityService
from .schemas import AvailabilityResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/availability",
    tags=["availability"],
)


def get_availability_service(request: Request) -> AvailabilityService:
    return request.app.state.availability_service


@router.get(
    "/{professional_id}/{date}",
    response_model=AvailabilityResponse,
    response_model_exclude_unset=True,
)
def professional_slots(
    professional_id: int,
    date: str,
    details: bool = False,
    service: AvailabilityService = Depends(get_availability_service),
):
    # 1) Validate the date before touching any data source
    try:
        day = service.parse_date(date)
    except InvalidDateError:
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")

    # 2) Compute slots; data source failures are reported as upstream errors
    try:
        result = service.get_available_slots(professional_id=professional_id, day=day)
    except BookingAPIError as exc:
        logger.error("Failed to get availability slots for professional %s: %s", professional_id, exc)
        raise HTTPException(status_code=502, detail="Failed to get availability slots")

    return result.to_dict(include_details=details)
