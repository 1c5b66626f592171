"""Property-based tests for timeline scheduling.

Generates random acyclic timelines and checks the invariants the forward and
backward passes must hold regardless of input order.
"""

from datetime import timedelta

from hypothesis import given, settings, strategies as st

from conftest import T0
from fieldops_engine.timeline import ScheduleItem, TimelineGraph, compute_critical_path, detect_cycle


@st.composite
def acyclic_timelines(draw) -> list[ScheduleItem]:
    """Items may only depend on items created before them; order is then shuffled."""
    count = draw(st.integers(min_value=1, max_value=12))
    items: list[ScheduleItem] = []
    for index in range(count):
        earlier = [f"t{i}" for i in range(index)]
        deps = draw(st.lists(st.sampled_from(earlier), unique=True, max_size=3)) if earlier else []
        offset = draw(st.integers(min_value=0, max_value=600))
        minutes = draw(st.integers(min_value=0, max_value=480))
        start = T0 + timedelta(minutes=offset)
        items.append(
            ScheduleItem(
                id=f"t{index}",
                name=f"Task {index}",
                start=start,
                end=start + timedelta(minutes=minutes),
                dependencies=tuple(deps),
            )
        )
    return draw(st.permutations(items))


class TestAcyclicTimelineProperties:
    """Invariants over random DAGs."""

    @given(items=acyclic_timelines())
    @settings(max_examples=100)
    def test_no_cycle_detected(self, items):
        result = detect_cycle(items)

        assert not result.has_cycle
        assert result.is_valid

    @given(items=acyclic_timelines())
    @settings(max_examples=100)
    def test_slack_is_never_negative(self, items):
        scheduled = compute_critical_path(items)

        assert all(s.slack >= timedelta(0) for s in scheduled)
        assert any(s.is_critical for s in scheduled)

    @given(items=acyclic_timelines())
    @settings(max_examples=100)
    def test_dependents_start_after_prerequisites_finish(self, items):
        scheduled = {s.id: s for s in compute_critical_path(items)}

        for s in scheduled.values():
            for dep_id in s.item.dependencies:
                assert s.early_start >= scheduled[dep_id].early_finish
                assert s.late_start >= scheduled[dep_id].late_finish

    @given(items=acyclic_timelines())
    @settings(max_examples=50)
    def test_recomputation_is_idempotent(self, items):
        assert compute_critical_path(items) == compute_critical_path(items)

    @given(items=acyclic_timelines())
    @settings(max_examples=50)
    def test_project_finish_is_longest_critical_finish(self, items):
        scheduled = compute_critical_path(items)
        finish = TimelineGraph.project_finish(scheduled)

        critical = TimelineGraph.critical_path(scheduled)
        assert max(s.early_finish for s in critical) == finish


class TestClosingALoop:
    """Adding a back edge to a chain always creates a detectable cycle."""

    @given(length=st.integers(min_value=1, max_value=15))
    @settings(max_examples=30)
    def test_back_edge_creates_cycle(self, length):
        ids = [f"c{i}" for i in range(length)]
        items = [
            ScheduleItem(
                id=item_id,
                name=item_id,
                start=T0,
                end=T0 + timedelta(hours=1),
                # c0 depends on the last link, closing the chain into a loop
                dependencies=(ids[i - 1],) if i > 0 else (ids[-1],),
            )
            for i, item_id in enumerate(ids)
        ]

        result = detect_cycle(items)

        assert result.has_cycle
        assert set(result.cycle) == set(ids)

    @given(length=st.integers(min_value=1, max_value=15))
    @settings(max_examples=30)
    def test_cycle_detection_is_repeatable(self, length):
        ids = [f"c{i}" for i in range(length)]
        items = [
            ScheduleItem(
                id=item_id,
                name=item_id,
                start=T0,
                end=T0 + timedelta(hours=1),
                dependencies=(ids[i - 1],) if i > 0 else (ids[-1],),
            )
            for i, item_id in enumerate(ids)
        ]

        assert detect_cycle(items) == detect_cycle(items)
