"""Project timeline dependency validation and critical path."""

from fieldops_engine.timeline.errors import (
    CyclicGraphError,
    DuplicateItemError,
    InvalidBookingError,
    InvalidScheduleItemError,
    TimelineError,
    TimelineValidationError,
    UnknownDependencyError,
)
from fieldops_engine.timeline.graph import (
    TimelineGraph,
    compute_critical_path,
    detect_cycle,
    validate,
)
from fieldops_engine.timeline.types import (
    CycleResult,
    DependencyEdge,
    ScheduledItem,
    ScheduleItem,
    as_utc,
)

__all__ = [
    "TimelineGraph",
    "detect_cycle",
    "validate",
    "compute_critical_path",
    "ScheduleItem",
    "ScheduledItem",
    "DependencyEdge",
    "CycleResult",
    "TimelineError",
    "CyclicGraphError",
    "UnknownDependencyError",
    "DuplicateItemError",
    "TimelineValidationError",
    "InvalidScheduleItemError",
    "InvalidBookingError",
    "as_utc",
]
