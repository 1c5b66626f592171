"""Dependency graph validation and critical path scheduling."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator, Sequence
from datetime import datetime, timedelta

from fieldops_engine.timeline.errors import (
    CyclicGraphError,
    DuplicateItemError,
    TimelineError,
    TimelineValidationError,
    UnknownDependencyError,
)
from fieldops_engine.timeline.types import (
    CycleResult,
    DependencyEdge,
    ScheduledItem,
    ScheduleItem,
    as_utc,
)

logger = logging.getLogger(__name__)

ZERO = timedelta(0)


class TimelineGraph:
    """Stateless validator and scheduler for project timelines.

    Every call receives the full current snapshot of items and computes from
    scratch, so re-validating after each edit never sees stale state.

    Scheduling pipeline (compute_critical_path):
    1) Validate: duplicates, dangling dependencies, cycles
    2) Topological order (Kahn, ties broken by input order)
    3) Forward pass: early start / early finish
    4) Project finish = max early finish over items with no dependents
    5) Backward pass: late finish / late start
    6) Slack = late start - early start; zero slack is critical
    """

    @staticmethod
    def adjacency(items: Sequence[ScheduleItem]) -> dict[str, tuple[str, ...]]:
        """Map each item id to its dependency ids (first occurrence wins)."""
        graph: dict[str, tuple[str, ...]] = {}
        for item in items:
            graph.setdefault(item.id, item.dependencies)
        return graph

    @staticmethod
    def edges(items: Sequence[ScheduleItem]) -> list[DependencyEdge]:
        """Derive prerequisite -> dependent edges between known items."""
        graph = TimelineGraph.adjacency(items)
        edges: list[DependencyEdge] = []
        for item_id, deps in graph.items():
            for dep_id in dict.fromkeys(deps):
                if dep_id in graph:
                    edges.append(DependencyEdge(prerequisite_id=dep_id, dependent_id=item_id))
        return edges

    @staticmethod
    def detect_cycle(items: Sequence[ScheduleItem]) -> CycleResult:
        """Find the first dependency cycle and every dangling reference.

        Depth-first traversal over dependency edges, keeping a ``visited`` set
        (fully explored) and an ``on_stack`` set (active path). Reaching an id
        that is already on the stack closes a loop. Dependencies that are not
        in ``items`` are reported once per (item, missing id) pair and are not
        traversed.
        """
        graph = TimelineGraph.adjacency(items)

        unknown: list[UnknownDependencyError] = []
        for item_id, deps in graph.items():
            for dep_id in dict.fromkeys(deps):
                if dep_id not in graph:
                    unknown.append(UnknownDependencyError(item_id, dep_id))

        visited: set[str] = set()
        for root in graph:
            if root in visited:
                continue

            # Iterative DFS: each frame is (node, remaining dependencies)
            stack: list[tuple[str, Iterator[str]]] = [(root, iter(graph[root]))]
            path: list[str] = [root]
            on_stack: set[str] = {root}

            while stack:
                node, deps = stack[-1]
                descended = False
                for dep_id in deps:
                    if dep_id not in graph:
                        continue
                    if dep_id in on_stack:
                        cycle = tuple(path[path.index(dep_id):])
                        logger.debug("Cycle detected through %s: %s", dep_id, cycle)
                        return CycleResult(
                            has_cycle=True,
                            item_id=dep_id,
                            cycle=cycle,
                            unknown_dependencies=tuple(unknown),
                        )
                    if dep_id not in visited:
                        stack.append((dep_id, iter(graph[dep_id])))
                        path.append(dep_id)
                        on_stack.add(dep_id)
                        descended = True
                        break

                if not descended:
                    stack.pop()
                    path.pop()
                    on_stack.discard(node)
                    visited.add(node)

        return CycleResult(has_cycle=False, unknown_dependencies=tuple(unknown))

    @staticmethod
    def validate(items: Sequence[ScheduleItem]) -> list[TimelineError]:
        """Collect every structural problem in one pass.

        Returns list of errors (empty if the graph is a valid DAG).
        """
        errors: list[TimelineError] = []

        seen: set[str] = set()
        reported: set[str] = set()
        for item in items:
            if item.id in seen and item.id not in reported:
                errors.append(DuplicateItemError(item.id))
                reported.add(item.id)
            seen.add(item.id)

        errors.extend(TimelineGraph.detect_cycle(items).errors)
        return errors

    @staticmethod
    def topological_order(items: Sequence[ScheduleItem]) -> list[str]:
        """Order item ids so every prerequisite precedes its dependents.

        Raises:
            CyclicGraphError: If some items could not be ordered
        """
        graph = TimelineGraph.adjacency(items)
        dependents: dict[str, list[str]] = {item_id: [] for item_id in graph}
        in_degree: dict[str, int] = {item_id: 0 for item_id in graph}

        for edge in TimelineGraph.edges(items):
            dependents[edge.prerequisite_id].append(edge.dependent_id)
            in_degree[edge.dependent_id] += 1

        queue = deque(item_id for item_id in graph if in_degree[item_id] == 0)
        order: list[str] = []
        while queue:
            item_id = queue.popleft()
            order.append(item_id)
            for dependent_id in dependents[item_id]:
                in_degree[dependent_id] -= 1
                if in_degree[dependent_id] == 0:
                    queue.append(dependent_id)

        if len(order) != len(graph):
            ordered = set(order)
            remaining = [item_id for item_id in graph if item_id not in ordered]
            raise CyclicGraphError(remaining)

        return order

    @staticmethod
    def compute_critical_path(
        items: Sequence[ScheduleItem],
        project_epoch: datetime | None = None,
    ) -> list[ScheduledItem]:
        """Run forward and backward passes and mark zero-slack items.

        Args:
            items: Full snapshot of timeline items
            project_epoch: Optional calendar zero point. When given, items
                without prerequisites start at ``max(item.start - epoch, 0)``
                instead of 0.

        Returns:
            One ScheduledItem per input item, in input order

        Raises:
            CyclicGraphError: If the only problem is a dependency cycle
            UnknownDependencyError: If the only problem is one dangling reference
            TimelineValidationError: If several problems were found
        """
        errors = TimelineGraph.validate(items)
        if errors:
            logger.warning(
                "Critical path refused: %d timeline problem(s) affecting %s",
                len(errors),
                sorted({i for e in errors for i in e.item_ids}),
            )
            if len(errors) == 1:
                raise errors[0]
            raise TimelineValidationError(errors)

        if not items:
            return []

        if project_epoch is not None:
            project_epoch = as_utc(project_epoch)

        by_id = {item.id: item for item in items}
        order = TimelineGraph.topological_order(items)

        prerequisites: dict[str, list[str]] = {item_id: [] for item_id in by_id}
        dependents: dict[str, list[str]] = {item_id: [] for item_id in by_id}
        for edge in TimelineGraph.edges(items):
            prerequisites[edge.dependent_id].append(edge.prerequisite_id)
            dependents[edge.prerequisite_id].append(edge.dependent_id)

        # Forward pass
        early_start: dict[str, timedelta] = {}
        early_finish: dict[str, timedelta] = {}
        for item_id in order:
            item = by_id[item_id]
            preds = prerequisites[item_id]
            if preds:
                start = max(max(early_finish[p] for p in preds), ZERO)
            elif project_epoch is not None:
                start = max(item.start - project_epoch, ZERO)
            else:
                start = ZERO
            early_start[item_id] = start
            early_finish[item_id] = start + item.duration

        finish = max(early_finish[item_id] for item_id in order if not dependents[item_id])

        # Backward pass
        late_start: dict[str, timedelta] = {}
        late_finish: dict[str, timedelta] = {}
        for item_id in reversed(order):
            item = by_id[item_id]
            succs = dependents[item_id]
            late = min(late_start[s] for s in succs) if succs else finish
            late_finish[item_id] = late
            late_start[item_id] = late - item.duration

        scheduled: list[ScheduledItem] = []
        for item in items:
            slack = late_start[item.id] - early_start[item.id]
            scheduled.append(
                ScheduledItem(
                    item=item,
                    duration=item.duration,
                    early_start=early_start[item.id],
                    early_finish=early_finish[item.id],
                    late_start=late_start[item.id],
                    late_finish=late_finish[item.id],
                    slack=slack,
                    is_critical=slack == ZERO,
                )
            )

        logger.debug(
            "Critical path computed: %d items, project finish %s, %d critical",
            len(scheduled),
            finish,
            sum(1 for s in scheduled if s.is_critical),
        )
        return scheduled

    @staticmethod
    def project_finish(scheduled: Sequence[ScheduledItem]) -> timedelta:
        """Latest early finish, i.e. the minimum project duration."""
        return max((s.early_finish for s in scheduled), default=ZERO)

    @staticmethod
    def critical_path(scheduled: Sequence[ScheduledItem]) -> list[ScheduledItem]:
        """Zero-slack items ordered by early start."""
        critical = [s for s in scheduled if s.is_critical]
        return sorted(critical, key=lambda s: (s.early_start, s.early_finish))


detect_cycle = TimelineGraph.detect_cycle
validate = TimelineGraph.validate
compute_critical_path = TimelineGraph.compute_critical_path
