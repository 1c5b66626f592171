"""Tests for resource booking conflict detection."""

from datetime import timedelta, timezone

import pytest
from hypothesis import given, settings, strategies as st

from conftest import T0, hours, make_booking, make_item
from fieldops_engine.scheduling import (
    ResourceBooking,
    ScheduleConflictDetector,
    bookings_for_items,
    conflicting_bookings,
    detect_conflict,
    find_all_conflicts,
)
from fieldops_engine.timeline import InvalidBookingError

AEST = timezone(timedelta(hours=10))


class TestResourceBooking:
    """Test booking construction and overlap."""

    def test_end_before_start_rejected(self):
        with pytest.raises(ValueError):
            ResourceBooking("r1", T0 + hours(2), T0, "job-1")

    def test_end_before_start_is_typed(self):
        with pytest.raises(InvalidBookingError) as exc_info:
            ResourceBooking("r1", T0 + hours(2), T0, "job-1")

        data = exc_info.value.to_dict()
        assert data["code"] == "INVALID_BOOKING"
        assert data["item_ids"] == ["job-1"]
        assert data["resource_id"] == "r1"

    def test_touching_endpoints_overlap(self):
        """Intervals are inclusive: 9-10 and 10-11 overlap."""
        first = make_booking("r1", 9, 10, "job-1")
        second = make_booking("r1", 10, 11, "job-2")

        assert first.overlaps(second)
        assert second.overlaps(first)

    def test_disjoint_intervals_do_not_overlap(self):
        assert not make_booking("r1", 9, 10, "job-1").overlaps(make_booking("r1", 10.5, 11, "job-2"))


class TestDetectConflict:
    """Test checking one proposed booking."""

    def test_overlap_on_same_resource_conflicts(self):
        candidate = make_booking("r1", 9, 12, "job-new")
        existing = [make_booking("r1", 11, 13, "job-1")]

        assert detect_conflict(candidate, existing)

    def test_other_resource_never_conflicts(self):
        candidate = make_booking("r1", 9, 12, "job-new")
        existing = [make_booking("r2", 9, 12, "job-1")]

        assert not detect_conflict(candidate, existing)

    def test_own_item_is_skipped(self):
        """Rescheduling an item does not clash with its previous slot."""
        candidate = make_booking("r1", 9, 12, "job-1")
        existing = [make_booking("r1", 10, 11, "job-1")]

        assert not detect_conflict(candidate, existing)

    def test_no_existing_bookings(self):
        assert not detect_conflict(make_booking("r1", 9, 12, "job-1"), [])

    def test_conflicting_bookings_lists_every_clash(self):
        candidate = make_booking("r1", 9, 17, "job-new")
        clash_a = make_booking("r1", 8, 9, "job-a")
        clash_b = make_booking("r1", 16, 18, "job-b")
        free = make_booking("r1", 18, 19, "job-c")

        assert conflicting_bookings(candidate, [clash_a, free, clash_b]) == [clash_a, clash_b]


class TestFindAllConflicts:
    """Test scanning a whole schedule."""

    def test_non_adjacent_overlaps_found(self):
        """A long booking clashes with two short ones that do not clash with each other."""
        long = make_booking("r1", 9, 17, "job-long")
        morning = make_booking("r1", 10, 11, "job-am")
        afternoon = make_booking("r1", 12, 13, "job-pm")

        pairs = find_all_conflicts([afternoon, long, morning])

        assert [(p.first.item_id, p.second.item_id) for p in pairs] == [
            ("job-long", "job-am"),
            ("job-long", "job-pm"),
        ]
        assert all(p.resource_id == "r1" for p in pairs)

    def test_resources_scanned_independently(self):
        bookings = [
            make_booking("r1", 9, 10, "job-1"),
            make_booking("r2", 9, 10, "job-2"),
        ]

        assert find_all_conflicts(bookings) == []

    def test_same_item_pairs_skipped(self):
        bookings = [make_booking("r1", 9, 10, "job-1"), make_booking("r1", 9, 10, "job-1")]

        assert find_all_conflicts(bookings) == []

    def test_empty_schedule(self):
        assert find_all_conflicts([]) == []

    def test_pair_to_dict(self):
        [pair] = find_all_conflicts(
            [make_booking("r1", 9, 10, "job-1"), make_booking("r1", 10, 11, "job-2")]
        )

        data = pair.to_dict()
        assert data["resource_id"] == "r1"
        assert data["first"]["item_id"] == "job-1"
        assert data["second"]["start"] == (T0 + hours(10)).isoformat()

    @given(
        specs=st.lists(
            st.tuples(
                st.sampled_from(["r1", "r2", "r3"]),
                st.integers(min_value=0, max_value=48),
                st.integers(min_value=0, max_value=8),
                st.sampled_from(["job-1", "job-2", "job-3", "job-4"]),
            ),
            max_size=15,
        )
    )
    @settings(max_examples=100)
    def test_agrees_with_pairwise_check(self, specs):
        bookings = [make_booking(r, start, start + length, item) for r, start, length, item in specs]

        expected = sum(
            1
            for i in range(len(bookings))
            for j in range(i + 1, len(bookings))
            if ScheduleConflictDetector.is_conflict(bookings[i], bookings[j])
        )

        assert len(find_all_conflicts(bookings)) == expected


class TestBookingsForItems:
    """Test expanding timeline items into bookings."""

    def test_one_booking_per_assigned_resource(self):
        items = [make_item("job-1", 0, 2, resources=["r1", "r2"]), make_item("job-2", 1, 3)]

        bookings = bookings_for_items(items)

        assert [(b.resource_id, b.item_id) for b in bookings] == [("r1", "job-1"), ("r2", "job-1")]
        assert bookings[0].end == T0 + hours(2)

    def test_items_sharing_a_resource_conflict(self):
        items = [
            make_item("job-1", 0, 2, resources=["r1"]),
            make_item("job-2", 1, 3, resources=["r1"]),
        ]

        pairs = find_all_conflicts(bookings_for_items(items))

        assert len(pairs) == 1


class TestMixedTimezones:
    """Naive timestamps are UTC; aware ones are converted before comparing."""

    def test_aware_booking_stored_as_utc(self):
        booking = ResourceBooking("r1", T0.replace(tzinfo=timezone.utc), T0 + hours(1), "job-1")

        assert booking.start == T0
        assert booking.start.tzinfo is None

    def test_offset_converted(self):
        """17:00 at +10:00 is 07:00 UTC."""
        booking = ResourceBooking("r1", (T0 + hours(10)).replace(tzinfo=AEST), T0 + hours(1), "job-1")

        assert booking.start == T0

    def test_detect_conflict_across_naive_and_aware(self):
        naive = make_booking("r1", 0, 2, "job-1")
        aware = ResourceBooking(
            "r1",
            (T0 + hours(1)).replace(tzinfo=timezone.utc),
            (T0 + hours(3)).replace(tzinfo=timezone.utc),
            "job-2",
        )

        assert detect_conflict(naive, [aware])

    def test_find_all_conflicts_across_naive_and_aware(self):
        bookings = [
            make_booking("r1", 0, 1, "job-1"),
            ResourceBooking(
                "r1",
                (T0 + hours(10)).replace(tzinfo=AEST),
                (T0 + hours(12)).replace(tzinfo=AEST),
                "job-2",
            ),
            make_booking("r1", 5, 6, "job-3"),
        ]

        pairs = find_all_conflicts(bookings)

        assert [(p.first.item_id, p.second.item_id) for p in pairs] == [("job-1", "job-2")]

    def test_mixed_interval_ending_before_start(self):
        with pytest.raises(InvalidBookingError):
            ResourceBooking("r1", T0 + hours(1), T0.replace(tzinfo=timezone.utc), "job-1")
