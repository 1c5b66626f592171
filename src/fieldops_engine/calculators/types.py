"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any


class PayType(str, Enum):
    """How an employee is paid."""

    HOURLY = "Hourly"
    SALARY = "Salary"


class EmploymentType(str, Enum):
    """Employment basis. Casuals accrue no paid leave."""

    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CASUAL = "Casual"


class PayTier(str, Enum):
    """Rate tier a block of hours was billed at."""

    ORDINARY = "ORDINARY"
    OVERTIME = "OVERTIME"
    DOUBLE_TIME = "DOUBLE_TIME"
    SATURDAY_FIRST = "SATURDAY_FIRST"
    SATURDAY_AFTER = "SATURDAY_AFTER"
    SUNDAY = "SUNDAY"
    PUBLIC_HOLIDAY = "PUBLIC_HOLIDAY"
    SALARY = "SALARY"


@dataclass(frozen=True)
class HourlyEmployee:
    """Employee paid per hour worked from a timesheet."""

    name: str
    wage: Decimal
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    estimated_non_billable_hours: Decimal = Decimal("0")  # Per week
    tfn: str | None = None  # Opaque, never validated here
    role: str | None = None

    @property
    def pay_type(self) -> PayType:
        return PayType.HOURLY


@dataclass(frozen=True)
class SalaryEmployee:
    """Employee paid a fixed annual salary in weekly instalments."""

    name: str
    annual_salary: Decimal
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    estimated_non_billable_hours: Decimal = Decimal("0")  # Per week
    tfn: str | None = None
    role: str | None = None

    @property
    def pay_type(self) -> PayType:
        return PayType.SALARY


Employee = HourlyEmployee | SalaryEmployee


@dataclass(frozen=True)
class TimesheetEntry:
    """Hours worked on one calendar day."""

    work_date: date
    hours: Decimal
    description: str | None = None


@dataclass(frozen=True)
class LaborRateRule:
    """Award/company rate card for one role.

    Rates are dollars per hour. ``*_after_hours`` and ``saturday_first_hours``
    are daily thresholds in hours. The weekday overtime tiers are applied as
    multipliers of the employee's own wage (``overtime_rate / standard_rate``);
    weekend and public holiday rates are applied as-is.
    """

    name: str = ""
    cost_rate: Decimal = Decimal("0")
    standard_rate: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal("0")
    overtime_after_hours: Decimal = Decimal("8")
    double_time_rate: Decimal = Decimal("0")
    double_time_after_hours: Decimal = Decimal("10")
    saturday_first_rate: Decimal = Decimal("0")
    saturday_first_hours: Decimal = Decimal("2")
    saturday_after_rate: Decimal = Decimal("0")
    sunday_rate: Decimal = Decimal("0")
    public_holiday_rate: Decimal = Decimal("0")
    after_hours_callout_rate: Decimal = Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "cost_rate": str(self.cost_rate),
            "standard_rate": str(self.standard_rate),
            "overtime_rate": str(self.overtime_rate),
            "overtime_after_hours": str(self.overtime_after_hours),
            "double_time_rate": str(self.double_time_rate),
            "double_time_after_hours": str(self.double_time_after_hours),
            "saturday_first_rate": str(self.saturday_first_rate),
            "saturday_first_hours": str(self.saturday_first_hours),
            "saturday_after_rate": str(self.saturday_after_rate),
            "sunday_rate": str(self.sunday_rate),
            "public_holiday_rate": str(self.public_holiday_rate),
            "after_hours_callout_rate": str(self.after_hours_callout_rate),
        }


@dataclass(frozen=True)
class PayLineItem:
    """One tier of hours on one day (never merged across days)."""

    work_date: date | None
    description: str
    tier: PayTier
    hours: Decimal
    rate: Decimal
    line_total: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.work_date.isoformat() if self.work_date else None,
            "description": self.description,
            "tier": self.tier.value,
            "hours": str(self.hours),
            "rate": str(self.rate),
            "line_total": str(self.line_total),
        }


@dataclass(frozen=True)
class PayResult:
    """Result of calculating pay for one employee and one pay period.

    This is also the shape an external payroll generator must produce to
    interoperate with the rest of the system.
    """

    employee_name: str
    gross_pay: Decimal
    ordinary_time_earnings: Decimal
    superannuation: Decimal
    tax_deductions: Decimal
    net_pay: Decimal
    line_items: tuple[PayLineItem, ...] = field(default_factory=tuple)

    @property
    def total_hours(self) -> Decimal:
        return sum((li.hours for li in self.line_items), Decimal("0"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee_name": self.employee_name,
            "gross_pay": str(self.gross_pay),
            "ordinary_time_earnings": str(self.ordinary_time_earnings),
            "superannuation": str(self.superannuation),
            "tax_deductions": str(self.tax_deductions),
            "net_pay": str(self.net_pay),
            "line_items": [li.to_dict() for li in self.line_items],
        }


@dataclass(frozen=True)
class TaxBracket:
    """Marginal bracket for progressive taxation on annual income."""

    min_amount: Decimal
    max_amount: Decimal | None  # None = no upper limit
    rate: Decimal  # As decimal, e.g., 0.30 for 30%
