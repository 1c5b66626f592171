"""Resource booking conflict detection.

Overlap is inclusive of touching endpoints: a booking that ends at 10:00
conflicts with one that starts at 10:00 for the same resource. Callers that
want back-to-back bookings allowed must shrink the intervals first.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from fieldops_engine.timeline.errors import InvalidBookingError
from fieldops_engine.timeline.types import ScheduleItem, as_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceBooking:
    """A resource (staff member) committed to an item for an interval."""

    resource_id: str
    start: datetime
    end: datetime
    item_id: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.start > self.end:
            raise InvalidBookingError(self.resource_id, self.item_id, self.start, self.end)

    def overlaps(self, other: ResourceBooking) -> bool:
        """Inclusive interval overlap, ignoring resource and owner."""
        return self.start <= other.end and other.start <= self.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource_id": self.resource_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "item_id": self.item_id,
        }


@dataclass(frozen=True)
class ConflictPair:
    """Two overlapping bookings of one resource, ordered by start."""

    resource_id: str
    first: ResourceBooking
    second: ResourceBooking

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource_id": self.resource_id,
            "first": self.first.to_dict(),
            "second": self.second.to_dict(),
        }


class ScheduleConflictDetector:
    """Pure predicates over resource bookings. Never raises."""

    @staticmethod
    def is_conflict(candidate: ResourceBooking, existing: ResourceBooking) -> bool:
        """Same resource, different owning item, overlapping interval."""
        return (
            existing.resource_id == candidate.resource_id
            and existing.item_id != candidate.item_id
            and candidate.overlaps(existing)
        )

    @staticmethod
    def detect_conflict(
        candidate: ResourceBooking, existing: Iterable[ResourceBooking]
    ) -> bool:
        """Check a proposed booking against all others in one linear scan.

        A booking owned by the candidate's own item is skipped so an item
        being edited in place does not conflict with its previous version.
        """
        return any(ScheduleConflictDetector.is_conflict(candidate, b) for b in existing)

    @staticmethod
    def conflicting_bookings(
        candidate: ResourceBooking, existing: Iterable[ResourceBooking]
    ) -> list[ResourceBooking]:
        """Return every booking that conflicts with the candidate."""
        return [b for b in existing if ScheduleConflictDetector.is_conflict(candidate, b)]

    @staticmethod
    def find_all_conflicts(bookings: Sequence[ResourceBooking]) -> list[ConflictPair]:
        """Report every overlapping pair once.

        Bookings are grouped by resource and swept in start order. The
        active list holds earlier bookings still running at the current
        start, so overlaps between non-adjacent bookings are found too.
        """
        groups: dict[str, list[ResourceBooking]] = {}
        for booking in bookings:
            groups.setdefault(booking.resource_id, []).append(booking)

        pairs: list[ConflictPair] = []
        for resource_id, group in groups.items():
            active: list[ResourceBooking] = []
            for booking in sorted(group, key=lambda b: (b.start, b.end)):
                active = [a for a in active if a.end >= booking.start]
                for other in active:
                    if other.item_id != booking.item_id:
                        pairs.append(ConflictPair(resource_id, other, booking))
                active.append(booking)

        if pairs:
            logger.debug(
                "Found %d booking conflict(s) across %d resource(s)",
                len(pairs),
                len({p.resource_id for p in pairs}),
            )
        return pairs

    @staticmethod
    def bookings_for_items(items: Iterable[ScheduleItem]) -> list[ResourceBooking]:
        """Expand each item's assigned resources into bookings."""
        return [
            ResourceBooking(
                resource_id=resource_id,
                start=item.start,
                end=item.end,
                item_id=item.id,
            )
            for item in items
            for resource_id in dict.fromkeys(item.assigned_resource_ids)
        ]


detect_conflict = ScheduleConflictDetector.detect_conflict
conflicting_bookings = ScheduleConflictDetector.conflicting_bookings
find_all_conflicts = ScheduleConflictDetector.find_all_conflicts
bookings_for_items = ScheduleConflictDetector.bookings_for_items
