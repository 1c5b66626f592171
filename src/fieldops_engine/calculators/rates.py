"""Cost rates and generated labour rate cards for job costing."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from fieldops_engine.calculators.errors import (
    InvalidEmployeeConfigurationError,
    InvalidRulesError,
)
from fieldops_engine.calculators.line_builder import LineItemBuilder
from fieldops_engine.calculators.types import (
    EmploymentType,
    Employee,
    HourlyEmployee,
    LaborRateRule,
    SalaryEmployee,
)
from fieldops_engine.config import PayrollPolicy

logger = logging.getLogger(__name__)

DEFAULT_TARGET_MARGIN = Decimal("0.40")

# Multiples of the standard sell rate
OVERTIME_MULTIPLIER = Decimal("1.5")
DOUBLE_TIME_MULTIPLIER = Decimal("2")
PUBLIC_HOLIDAY_MULTIPLIER = Decimal("2.5")


def _pay_rate(employee: Employee, policy: PayrollPolicy) -> Decimal:
    if isinstance(employee, HourlyEmployee):
        if employee.wage is None or employee.wage <= 0:
            raise InvalidEmployeeConfigurationError(
                f"Hourly employee '{employee.name}' requires a positive wage",
                employee.name,
            )
        return employee.wage
    if isinstance(employee, SalaryEmployee):
        if employee.annual_salary is None or employee.annual_salary <= 0:
            raise InvalidEmployeeConfigurationError(
                f"Salaried employee '{employee.name}' requires a positive annual salary",
                employee.name,
            )
        return employee.annual_salary / policy.annual_hours
    raise InvalidEmployeeConfigurationError(
        f"Unknown pay type for {type(employee).__name__}",
        getattr(employee, "name", None),
    )


def calculate_cost_rate(employee: Employee, policy: PayrollPolicy | None = None) -> Decimal:
    """True hourly cost of an employee.

    Loads the pay rate with superannuation and, for non-casual staff,
    spreads the annual cost over productive hours only (ordinary hours less
    paid leave and estimated non-billable time). Casuals accrue no leave so
    their cost rate is just the loaded pay rate.
    """
    policy = policy or PayrollPolicy()
    pay_rate_with_super = _pay_rate(employee, policy) * (1 + policy.cost_rate_super_loading)

    if employee.employment_type == EmploymentType.CASUAL:
        return LineItemBuilder.round_to_cents(pay_rate_with_super)

    annual_hours = policy.annual_hours
    leave_hours = (policy.annual_leave_days + policy.sick_leave_days) * policy.hours_per_day
    non_billable_hours = (employee.estimated_non_billable_hours or Decimal("0")) * policy.weeks_per_year
    productive_hours = annual_hours - (leave_hours + non_billable_hours)

    if productive_hours <= 0:
        logger.warning(
            "No productive hours left for %s (non-billable %s/week); using loaded pay rate",
            employee.name, employee.estimated_non_billable_hours,
        )
        return LineItemBuilder.round_to_cents(pay_rate_with_super)

    return LineItemBuilder.round_to_cents(annual_hours * pay_rate_with_super / productive_hours)


def generate_labor_rate(
    name: str,
    cost_rate: Decimal,
    target_margin: Decimal = DEFAULT_TARGET_MARGIN,
) -> LaborRateRule:
    """Rate card whose standard rate earns ``target_margin`` over cost.

    Premium rates are multiples of the unrounded standard rate; each is
    rounded to cents independently.
    """
    if target_margin < 0 or target_margin >= 1:
        raise InvalidRulesError(f"Target margin must be in [0, 1), got {target_margin}")

    standard = cost_rate / (1 - target_margin) if cost_rate > 0 else Decimal("0")

    def scaled(multiplier: Decimal) -> Decimal:
        return LineItemBuilder.round_to_cents(standard * multiplier)

    return LaborRateRule(
        name=name,
        cost_rate=LineItemBuilder.round_to_cents(cost_rate),
        standard_rate=LineItemBuilder.round_to_cents(standard),
        overtime_rate=scaled(OVERTIME_MULTIPLIER),
        overtime_after_hours=Decimal("8"),
        double_time_rate=scaled(DOUBLE_TIME_MULTIPLIER),
        double_time_after_hours=Decimal("10"),
        saturday_first_rate=scaled(OVERTIME_MULTIPLIER),
        saturday_first_hours=Decimal("2"),
        saturday_after_rate=scaled(DOUBLE_TIME_MULTIPLIER),
        sunday_rate=scaled(DOUBLE_TIME_MULTIPLIER),
        public_holiday_rate=scaled(PUBLIC_HOLIDAY_MULTIPLIER),
        after_hours_callout_rate=scaled(DOUBLE_TIME_MULTIPLIER),
    )


def labor_rates_by_role(
    employees: Iterable[Employee],
    target_margin: Decimal = DEFAULT_TARGET_MARGIN,
    policy: PayrollPolicy | None = None,
) -> list[LaborRateRule]:
    """One generated rate card per role, priced off the role's dearest employee.

    Roles keep first-seen order. Employees without a role are skipped.
    """
    highest: dict[str, Decimal] = {}
    for employee in employees:
        if not employee.role:
            continue
        cost = calculate_cost_rate(employee, policy)
        if employee.role not in highest or cost > highest[employee.role]:
            highest[employee.role] = cost

    return [generate_labor_rate(role, cost, target_margin) for role, cost in highest.items()]


def margin_percent(sell_rate: Decimal, cost_rate: Decimal) -> Decimal:
    """Gross margin of ``sell_rate`` over ``cost_rate`` as a percentage."""
    if sell_rate <= 0:
        return Decimal("0.00")
    return LineItemBuilder.round_to_cents((sell_rate - cost_rate) / sell_rate * 100)
