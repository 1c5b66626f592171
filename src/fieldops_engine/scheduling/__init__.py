"""Resource scheduling conflict detection."""

from fieldops_engine.scheduling.conflicts import (
    ConflictPair,
    ResourceBooking,
    ScheduleConflictDetector,
    bookings_for_items,
    conflicting_bookings,
    detect_conflict,
    find_all_conflicts,
)

__all__ = [
    "ScheduleConflictDetector",
    "ResourceBooking",
    "ConflictPair",
    "detect_conflict",
    "conflicting_bookings",
    "find_all_conflicts",
    "bookings_for_items",
]
