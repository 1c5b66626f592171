"""Timeline validation errors.

Every error carries the ids of the items involved so a caller can highlight
each broken record at once, and ``to_dict()`` for API responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class TimelineError(Exception):
    """Base class for timeline graph errors."""

    code = "TIMELINE_ERROR"

    @property
    def item_ids(self) -> list[str]:
        return []

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": str(self),
            "item_ids": self.item_ids,
        }


class InvalidScheduleItemError(TimelineError, ValueError):
    """Raised when a schedule item ends before it starts."""

    code = "INVALID_SCHEDULE_ITEM"

    def __init__(self, item_id: str, start: datetime, end: datetime):
        self.item_id = item_id
        self.start = start
        self.end = end
        super().__init__(
            f"Schedule item '{item_id}' ends ({end.isoformat()}) "
            f"before it starts ({start.isoformat()})"
        )

    @property
    def item_ids(self) -> list[str]:
        return [self.item_id]


class InvalidBookingError(TimelineError, ValueError):
    """Raised when a resource booking ends before it starts."""

    code = "INVALID_BOOKING"

    def __init__(self, resource_id: str, item_id: str, start: datetime, end: datetime):
        self.resource_id = resource_id
        self.item_id = item_id
        self.start = start
        self.end = end
        super().__init__(
            f"Booking for item '{item_id}' on resource '{resource_id}' ends "
            f"({end.isoformat()}) before it starts ({start.isoformat()})"
        )

    @property
    def item_ids(self) -> list[str]:
        return [self.item_id]

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["resource_id"] = self.resource_id
        return data


class UnknownDependencyError(TimelineError):
    """An item depends on an id that is not part of the timeline."""

    code = "UNKNOWN_DEPENDENCY"

    def __init__(self, item_id: str, missing_id: str):
        self.item_id = item_id
        self.missing_id = missing_id
        super().__init__(
            f"Item '{item_id}' depends on unknown item '{missing_id}'"
        )

    @property
    def item_ids(self) -> list[str]:
        return [self.item_id]

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["missing_id"] = self.missing_id
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnknownDependencyError):
            return NotImplemented
        return (self.item_id, self.missing_id) == (other.item_id, other.missing_id)

    def __hash__(self) -> int:
        return hash((self.item_id, self.missing_id))


class CyclicGraphError(TimelineError):
    """The dependency graph contains a cycle."""

    code = "CYCLIC_DEPENDENCY"

    def __init__(self, cycle: list[str]):
        self.cycle = list(cycle)
        path = " -> ".join(self.cycle + self.cycle[:1])
        super().__init__(f"Circular dependency detected: {path}")

    @property
    def item_ids(self) -> list[str]:
        return list(self.cycle)


class DuplicateItemError(TimelineError):
    """Two items in one snapshot share an id."""

    code = "DUPLICATE_ITEM"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item id '{item_id}' appears more than once")

    @property
    def item_ids(self) -> list[str]:
        return [self.item_id]


class TimelineValidationError(TimelineError):
    """Several problems were found in one validation pass."""

    code = "INVALID_TIMELINE"

    def __init__(self, errors: list[TimelineError]):
        self.errors = list(errors)
        super().__init__(
            f"Timeline has {len(self.errors)} problem(s): "
            + "; ".join(str(e) for e in self.errors)
        )

    @property
    def item_ids(self) -> list[str]:
        seen: dict[str, None] = {}
        for error in self.errors:
            for item_id in error.item_ids:
                seen.setdefault(item_id, None)
        return list(seen)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [e.to_dict() for e in self.errors]
        return data
