"""Resource booking conflict endpoints."""

from fastapi import APIRouter, status

from fieldops_engine.api.schemas import (
    Booking,
    ConflictCheckRequest,
    ConflictCheckResponse,
    ConflictPairOut,
    ConflictScanRequest,
    ConflictScanResponse,
    ErrorResponse,
)
from fieldops_engine.scheduling import ScheduleConflictDetector

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


@router.post(
    "/conflicts/check",
    response_model=ConflictCheckResponse,
    status_code=status.HTTP_200_OK,
)
async def check_conflict(payload: ConflictCheckRequest) -> ConflictCheckResponse:
    """Check whether a proposed booking clashes with existing ones."""
    candidate = payload.candidate.to_domain()
    existing = [b.to_domain() for b in payload.existing]
    conflicting = ScheduleConflictDetector.conflicting_bookings(candidate, existing)

    return ConflictCheckResponse(
        conflict=bool(conflicting),
        conflicting=[Booking.model_validate(b) for b in conflicting],
    )


@router.post(
    "/conflicts",
    response_model=ConflictScanResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def find_conflicts(payload: ConflictScanRequest) -> ConflictScanResponse:
    """List every pair of overlapping bookings per resource."""
    bookings = [b.to_domain() for b in payload.bookings]
    bookings.extend(
        ScheduleConflictDetector.bookings_for_items(i.to_domain() for i in payload.items)
    )
    pairs = ScheduleConflictDetector.find_all_conflicts(bookings)

    return ConflictScanResponse(
        count=len(pairs),
        conflicts=[ConflictPairOut.model_validate(p) for p in pairs],
    )
