"""Payroll calculation engine - main orchestrator."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from fieldops_engine.calculators.errors import (
    InvalidEmployeeConfigurationError,
    InvalidRulesError,
    InvalidTimesheetError,
    MissingRulesError,
)
from fieldops_engine.calculators.line_builder import LineItemBuilder
from fieldops_engine.calculators.tax_calculator import TaxCalculator
from fieldops_engine.calculators.types import (
    Employee,
    HourlyEmployee,
    LaborRateRule,
    PayLineItem,
    PayResult,
    PayTier,
    SalaryEmployee,
    TimesheetEntry,
)
from fieldops_engine.config import PayrollPolicy

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


class PayrollCalculator:
    """Calculates one employee's pay for one weekly pay period.

    Calculation pipeline (stable order per employee):
    1) Build earnings lines (salary instalment, or tiered hours per day)
    2) Gross = sum of line totals
    3) Ordinary time earnings from the ordinary tiers only
    4) Superannuation on ordinary time earnings
    5) Tax withholding on gross
    6) Net = gross - tax
    """

    def __init__(
        self,
        policy: PayrollPolicy | None = None,
        tax_calculator: TaxCalculator | None = None,
    ):
        self.policy = policy or PayrollPolicy()
        self.tax_calculator = tax_calculator or TaxCalculator()

    def calculate_pay(
        self,
        employee: Employee,
        timesheet: Iterable[TimesheetEntry],
        rules: LaborRateRule | None = None,
        *,
        public_holidays: Iterable[date] = (),
    ) -> PayResult:
        """Calculate pay for ``employee`` from a week of timesheet entries.

        Salaried employees ignore the timesheet and rules. Hourly employees
        need a rule set; each day's hours are split into tiers and every
        non-zero tier becomes its own line item.
        """
        if isinstance(employee, SalaryEmployee):
            lines = [self._salary_line(employee)]
        elif isinstance(employee, HourlyEmployee):
            lines = self._hourly_lines(employee, list(timesheet), rules, set(public_holidays))
        else:
            raise InvalidEmployeeConfigurationError(
                f"Unknown pay type for {type(employee).__name__}",
                getattr(employee, "name", None),
            )

        gross = LineItemBuilder.calculate_gross_from_lines(lines)
        by_tier = LineItemBuilder.sum_by_tier(lines)
        ote = LineItemBuilder.round_to_cents(
            sum((by_tier[tier] for tier in LineItemBuilder.ORDINARY_TIERS), Decimal("0"))
        )
        superannuation = LineItemBuilder.round_to_cents(ote * self.policy.super_guarantee_rate)
        tax = self.tax_calculator.calculate_withholding(gross)
        net = LineItemBuilder.round_to_cents(gross - tax)

        logger.debug(
            "Calculated pay for %s: gross=%s ote=%s tax=%s net=%s (%d lines)",
            employee.name, gross, ote, tax, net, len(lines),
        )

        return PayResult(
            employee_name=employee.name,
            gross_pay=gross,
            ordinary_time_earnings=ote,
            superannuation=superannuation,
            tax_deductions=tax,
            net_pay=net,
            line_items=tuple(lines),
        )

    def _salary_line(self, employee: SalaryEmployee) -> PayLineItem:
        salary = employee.annual_salary
        if salary is None or salary <= 0:
            raise InvalidEmployeeConfigurationError(
                f"Salaried employee '{employee.name}' requires a positive annual salary",
                employee.name,
            )
        weekly = salary / Decimal(self.policy.weeks_per_year)
        return LineItemBuilder.create_salary_line(
            weekly, f"Salary: {salary.normalize():f} / {self.policy.weeks_per_year}"
        )

    def _hourly_lines(
        self,
        employee: HourlyEmployee,
        timesheet: list[TimesheetEntry],
        rules: LaborRateRule | None,
        public_holidays: set[date],
    ) -> list[PayLineItem]:
        if rules is None:
            raise MissingRulesError(employee.name)
        if employee.wage is None or employee.wage <= 0:
            raise InvalidTimesheetError(
                f"Hourly employee '{employee.name}' requires a positive wage",
                employee.name,
            )

        lines: list[PayLineItem] = []
        for index, entry in enumerate(timesheet):
            work_date = _entry_date(entry, index, employee.name)
            hours = entry.hours
            if hours is None or hours < 0:
                raise InvalidTimesheetError(
                    f"Timesheet entry {index} has negative hours: {hours}",
                    employee.name,
                    index,
                )
            if hours == 0:
                continue

            if work_date in public_holidays:
                tiers = [(PayTier.PUBLIC_HOLIDAY, hours, rules.public_holiday_rate)]
            elif work_date.weekday() == SUNDAY:
                tiers = [(PayTier.SUNDAY, hours, rules.sunday_rate)]
            elif work_date.weekday() == SATURDAY:
                tiers = self._saturday_tiers(hours, rules)
            else:
                tiers = self._weekday_tiers(employee, hours, rules)

            for tier, tier_hours, rate in tiers:
                if tier_hours > 0:
                    lines.append(
                        LineItemBuilder.create_line(work_date, tier, tier_hours, rate, entry.description)
                    )

        problems = LineItemBuilder.validate_lines(lines)
        if problems:
            raise InvalidRulesError("; ".join(problems), employee.name)
        return lines

    @staticmethod
    def _saturday_tiers(
        hours: Decimal, rules: LaborRateRule
    ) -> list[tuple[PayTier, Decimal, Decimal]]:
        first = min(hours, rules.saturday_first_hours)
        return [
            (PayTier.SATURDAY_FIRST, first, rules.saturday_first_rate),
            (PayTier.SATURDAY_AFTER, hours - first, rules.saturday_after_rate),
        ]

    @staticmethod
    def _weekday_tiers(
        employee: HourlyEmployee, hours: Decimal, rules: LaborRateRule
    ) -> list[tuple[PayTier, Decimal, Decimal]]:
        """Split weekday hours into ordinary, overtime and double time.

        Overtime tiers pay the employee's wage scaled by the rule set's
        overtime multipliers (``overtime_rate / standard_rate``).
        """
        if rules.standard_rate <= 0:
            raise InvalidRulesError(
                f"Rule set '{rules.name}' needs a positive standard rate to derive overtime multipliers",
                employee.name,
            )

        overtime_after = rules.overtime_after_hours
        # A double-time threshold below the overtime threshold collapses the overtime tier
        double_time_after = max(rules.double_time_after_hours, overtime_after)

        ordinary = min(hours, overtime_after)
        overtime = max(min(hours, double_time_after) - overtime_after, Decimal("0"))
        double_time = max(hours - double_time_after, Decimal("0"))

        wage = employee.wage
        overtime_rate = LineItemBuilder.round_rate(wage * rules.overtime_rate / rules.standard_rate)
        double_time_rate = LineItemBuilder.round_rate(wage * rules.double_time_rate / rules.standard_rate)

        return [
            (PayTier.ORDINARY, ordinary, wage),
            (PayTier.OVERTIME, overtime, overtime_rate),
            (PayTier.DOUBLE_TIME, double_time, double_time_rate),
        ]


def _entry_date(entry: TimesheetEntry, index: int, employee_name: str) -> date:
    """Entry date, accepting ISO strings from loosely-typed callers."""
    value = entry.work_date
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise InvalidTimesheetError(
            f"Timesheet entry {index} has an unparseable date: {value!r}",
            employee_name,
            index,
        ) from exc


def calculate_pay(
    employee: Employee,
    timesheet: Iterable[TimesheetEntry],
    rules: LaborRateRule | None = None,
    *,
    public_holidays: Iterable[date] = (),
    policy: PayrollPolicy | None = None,
) -> PayResult:
    """Calculate pay with the default tax table and the given policy."""
    return PayrollCalculator(policy).calculate_pay(
        employee, timesheet, rules, public_holidays=public_holidays
    )
