"""Type definitions for timeline validation and scheduling."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from fieldops_engine.timeline.errors import (
    CyclicGraphError,
    InvalidScheduleItemError,
    TimelineError,
    UnknownDependencyError,
)


def as_utc(value: datetime) -> datetime:
    """Normalise a timestamp to naive UTC.

    Naive values are taken to be UTC already. Aware values are converted and
    stripped, so naive and aware inputs can be compared and subtracted.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=None)
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class ScheduleItem:
    """A schedulable job or task on a project timeline.

    ``dependencies`` holds the ids of items that must finish before this one
    starts. Ids that do not exist in the current snapshot are tolerated here
    and reported by the graph validator.
    """

    id: str
    name: str
    start: datetime
    end: datetime
    dependencies: tuple[str, ...] = ()
    assigned_resource_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.start > self.end:
            raise InvalidScheduleItemError(self.id, self.start, self.end)
        # Accept lists from callers but store tuples so the record stays hashable
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(self, "assigned_resource_ids", tuple(self.assigned_resource_ids))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_milestone(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class DependencyEdge:
    """Directed edge from a prerequisite to the item that depends on it."""

    prerequisite_id: str
    dependent_id: str


@dataclass(frozen=True)
class CycleResult:
    """Outcome of a single cycle-detection pass."""

    has_cycle: bool
    item_id: str | None = None  # Dependency found on the active path
    cycle: tuple[str, ...] = ()  # Ids forming the loop, in traversal order
    unknown_dependencies: tuple[UnknownDependencyError, ...] = ()

    @property
    def has_unknown_dependencies(self) -> bool:
        return len(self.unknown_dependencies) > 0

    @property
    def is_valid(self) -> bool:
        return not self.has_cycle and not self.has_unknown_dependencies

    @property
    def errors(self) -> list[TimelineError]:
        """All problems found, dangling references first."""
        errors: list[TimelineError] = list(self.unknown_dependencies)
        if self.has_cycle:
            errors.append(CyclicGraphError(list(self.cycle)))
        return errors


@dataclass(frozen=True)
class ScheduledItem:
    """A schedule item augmented with forward/backward pass results.

    All offsets are measured from the computation's zero point: either the
    start of the project (offset 0) or the caller-supplied project epoch.
    """

    item: ScheduleItem
    duration: timedelta
    early_start: timedelta
    early_finish: timedelta
    late_start: timedelta
    late_finish: timedelta
    slack: timedelta
    is_critical: bool = field(default=False)

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def name(self) -> str:
        return self.item.name

    def to_dict(self) -> dict[str, Any]:
        """Serialise offsets as seconds for JSON transport."""
        return {
            "id": self.item.id,
            "name": self.item.name,
            "duration_seconds": self.duration.total_seconds(),
            "early_start_seconds": self.early_start.total_seconds(),
            "early_finish_seconds": self.early_finish.total_seconds(),
            "late_start_seconds": self.late_start.total_seconds(),
            "late_finish_seconds": self.late_finish.total_seconds(),
            "slack_seconds": self.slack.total_seconds(),
            "is_critical": self.is_critical,
        }
