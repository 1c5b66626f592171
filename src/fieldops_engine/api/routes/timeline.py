"""Timeline validation and critical path endpoints."""

from fastapi import APIRouter, status

from fieldops_engine.api.schemas import (
    CriticalPathResponse,
    ErrorResponse,
    ScheduledItemOut,
    TimelineRequest,
    TimelineValidationResponse,
    ValidationIssue,
)
from fieldops_engine.timeline import TimelineGraph

router = APIRouter(prefix="/timeline", tags=["timeline"])


@router.post(
    "/validate",
    response_model=TimelineValidationResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def validate_timeline(payload: TimelineRequest) -> TimelineValidationResponse:
    """Report every dangling reference, duplicate id and cycle in a snapshot.

    Problems are returned in the body; the request itself succeeds.
    """
    items = payload.to_domain()
    result = TimelineGraph.detect_cycle(items)
    errors = TimelineGraph.validate(items)

    return TimelineValidationResponse(
        valid=not errors,
        has_cycle=result.has_cycle,
        cycle=list(result.cycle),
        errors=[
            ValidationIssue(code=e.code, message=str(e), item_ids=e.item_ids)
            for e in errors
        ],
    )


@router.post(
    "/critical-path",
    response_model=CriticalPathResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def critical_path(payload: TimelineRequest) -> CriticalPathResponse:
    """Compute early/late dates, slack and the critical path."""
    scheduled = TimelineGraph.compute_critical_path(
        payload.to_domain(), payload.project_epoch
    )

    return CriticalPathResponse(
        items=[ScheduledItemOut(**s.to_dict()) for s in scheduled],
        critical_path=[s.id for s in TimelineGraph.critical_path(scheduled)],
        project_duration_seconds=TimelineGraph.project_finish(scheduled).total_seconds(),
    )
