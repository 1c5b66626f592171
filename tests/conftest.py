"""Pytest fixtures for field-ops engine tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from fieldops_engine.calculators import (
    EmploymentType,
    HourlyEmployee,
    LaborRateRule,
    SalaryEmployee,
    TimesheetEntry,
)
from fieldops_engine.config import get_settings
from fieldops_engine.scheduling import ResourceBooking
from fieldops_engine.timeline import ScheduleItem

# Monday; the week runs 2024-07-01 .. 2024-07-07
T0 = datetime(2024, 7, 1, 7, 0)
MONDAY = date(2024, 7, 1)
TUESDAY = date(2024, 7, 2)
SATURDAY = date(2024, 7, 6)
SUNDAY = date(2024, 7, 7)


def hours(n: float) -> timedelta:
    return timedelta(hours=n)


def make_item(
    item_id: str,
    start_h: float,
    end_h: float,
    deps: Sequence[str] = (),
    resources: Sequence[str] = (),
) -> ScheduleItem:
    """Item spanning ``start_h``..``end_h`` hours after T0."""
    return ScheduleItem(
        id=item_id,
        name=item_id.upper(),
        start=T0 + hours(start_h),
        end=T0 + hours(end_h),
        dependencies=tuple(deps),
        assigned_resource_ids=tuple(resources),
    )


def make_booking(resource_id: str, start_h: float, end_h: float, item_id: str) -> ResourceBooking:
    return ResourceBooking(resource_id, T0 + hours(start_h), T0 + hours(end_h), item_id)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reload them for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def item() -> Callable[..., ScheduleItem]:
    return make_item


@pytest.fixture
def booking() -> Callable[..., ResourceBooking]:
    return make_booking


@pytest.fixture
def standard_rules() -> LaborRateRule:
    """Technician rate card: 1.5x overtime, 2x double time and weekends."""
    return LaborRateRule(
        name="Technician",
        standard_rate=Decimal("40"),
        overtime_rate=Decimal("60"),
        overtime_after_hours=Decimal("8"),
        double_time_rate=Decimal("80"),
        double_time_after_hours=Decimal("10"),
        saturday_first_rate=Decimal("60"),
        saturday_first_hours=Decimal("2"),
        saturday_after_rate=Decimal("80"),
        sunday_rate=Decimal("80"),
        public_holiday_rate=Decimal("100"),
        after_hours_callout_rate=Decimal("80"),
    )


@pytest.fixture
def hourly_employee() -> HourlyEmployee:
    return HourlyEmployee(name="Alex Rivera", wage=Decimal("30"), role="Technician")


@pytest.fixture
def salary_employee() -> SalaryEmployee:
    return SalaryEmployee(name="Jordan Lee", annual_salary=Decimal("104000"), role="Supervisor")


@pytest.fixture
def casual_employee() -> HourlyEmployee:
    return HourlyEmployee(
        name="Casey Nguyen",
        wage=Decimal("40"),
        employment_type=EmploymentType.CASUAL,
        role="Technician",
    )


@pytest.fixture
def monday_entry() -> Callable[[str], TimesheetEntry]:
    def _entry(n: str, work_date: date = MONDAY) -> TimesheetEntry:
        return TimesheetEntry(work_date=work_date, hours=Decimal(n))

    return _entry
